"""
maxlang Language Server.

Editor integration over the Language Server Protocol: diagnostics,
document symbols and formatting.
"""

from maxlang.lsp.diagnostics import DiagnosticProvider, get_diagnostics_for_document
from maxlang.lsp.formatting import LSPFormatter
from maxlang.lsp.symbols import Symbol, SymbolCollector, SymbolKind, get_document_symbols

__all__ = [
    "DiagnosticProvider",
    "get_diagnostics_for_document",
    "LSPFormatter",
    "Symbol",
    "SymbolCollector",
    "SymbolKind",
    "get_document_symbols",
]
