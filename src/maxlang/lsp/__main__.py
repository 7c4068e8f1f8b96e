"""
Entry point for running the maxlang LSP server as a module.

Usage:
    python -m maxlang.lsp
    python -m maxlang.lsp --tcp --port 2087
"""

from maxlang.lsp.server import main

if __name__ == "__main__":
    main()
