"""
maxlang Language Server Protocol (LSP) Server.

This module implements an LSP server for maxlang using pygls. It provides:

- Document synchronization (open, change, save, close)
- Diagnostics for lexer and parser errors
- Document symbols (outline of let, letrec and named fn bindings)
- Document formatting

Usage:
    # Start the server in stdio mode (for IDE integration)
    maxlang-lsp

    # Start in TCP mode (for debugging)
    maxlang-lsp --tcp --port 2087
"""

import argparse
import logging
from typing import Optional

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from maxlang import __version__
from maxlang.compiler import parse_source
from maxlang.lsp.diagnostics import get_diagnostics_for_document
from maxlang.lsp.formatting import LSPFormatter
from maxlang.lsp.symbols import get_document_symbols
from maxlang.utils.errors import MaxlangError

logger = logging.getLogger("maxlang-lsp")


class MaxlangLanguageServer(LanguageServer):
    """
    Language Server Protocol implementation for maxlang.

    Every request works from the current document text; nothing is
    cached between requests.
    """

    def __init__(self) -> None:
        """Initialize the maxlang language server."""
        super().__init__(
            name="maxlang-lsp",
            version=__version__,
        )

        self._formatter = LSPFormatter()

    def _get_source(self, uri: str) -> Optional[str]:
        """Get the current text of an open document."""
        doc = self.workspace.get_text_document(uri)
        if doc is None:
            return None
        return doc.source

    def _publish_diagnostics(self, uri: str, diagnostics: list[types.Diagnostic]) -> None:
        """Publish diagnostics to the client."""
        self.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )

    def _validate(self, uri: str, source: str) -> None:
        """Re-parse a document and publish its diagnostics."""
        diagnostics = get_diagnostics_for_document(source, uri)
        logger.debug(f"{uri}: {len(diagnostics)} diagnostic(s)")
        self._publish_diagnostics(uri, diagnostics)

    # =========================================================================
    # Document Synchronization
    # =========================================================================

    def _on_did_open(self, params: types.DidOpenTextDocumentParams) -> None:
        """Handle document open notification."""
        document = params.text_document
        logger.info(f"Document opened: {document.uri}")
        self._validate(document.uri, document.text)

    def _on_did_change(self, params: types.DidChangeTextDocumentParams) -> None:
        """Handle document change notification."""
        uri = params.text_document.uri
        source = self._get_source(uri)
        if source is None:
            return

        logger.debug(f"Document changed: {uri}")
        self._validate(uri, source)

    def _on_did_save(self, params: types.DidSaveTextDocumentParams) -> None:
        """Handle document save notification."""
        uri = params.text_document.uri
        logger.info(f"Document saved: {uri}")

        source = self._get_source(uri)
        if source is not None:
            self._validate(uri, source)

    def _on_did_close(self, params: types.DidCloseTextDocumentParams) -> None:
        """Handle document close notification."""
        uri = params.text_document.uri
        logger.info(f"Document closed: {uri}")

        # Clear diagnostics
        self._publish_diagnostics(uri, [])

    # =========================================================================
    # Document Symbols
    # =========================================================================

    def _on_document_symbol(
        self, params: types.DocumentSymbolParams
    ) -> list[types.DocumentSymbol] | None:
        """Handle document symbols request (for outline view)."""
        uri = params.text_document.uri
        source = self._get_source(uri)
        if source is None:
            return None

        try:
            ast = parse_source(source, uri)
        except MaxlangError:
            # No outline for a document that does not parse
            return None
        return get_document_symbols(ast, source)

    # =========================================================================
    # Formatting
    # =========================================================================

    def _on_formatting(
        self, params: types.DocumentFormattingParams
    ) -> list[types.TextEdit] | None:
        """Handle document formatting request."""
        source = self._get_source(params.text_document.uri)
        if source is None:
            return None
        return self._formatter.format_document(source)


# =============================================================================
# Server Creation and Main Entry Point
# =============================================================================


def create_server() -> MaxlangLanguageServer:
    """Create and configure a maxlang language server instance."""
    server = MaxlangLanguageServer()

    # Document synchronization
    @server.feature(types.TEXT_DOCUMENT_DID_OPEN)
    def did_open(ls: MaxlangLanguageServer, params: types.DidOpenTextDocumentParams) -> None:
        ls._on_did_open(params)

    @server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
    def did_change(ls: MaxlangLanguageServer, params: types.DidChangeTextDocumentParams) -> None:
        ls._on_did_change(params)

    @server.feature(types.TEXT_DOCUMENT_DID_SAVE)
    def did_save(ls: MaxlangLanguageServer, params: types.DidSaveTextDocumentParams) -> None:
        ls._on_did_save(params)

    @server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
    def did_close(ls: MaxlangLanguageServer, params: types.DidCloseTextDocumentParams) -> None:
        ls._on_did_close(params)

    # Document symbols (outline)
    @server.feature(types.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
    def document_symbol(
        ls: MaxlangLanguageServer, params: types.DocumentSymbolParams
    ) -> list[types.DocumentSymbol] | None:
        return ls._on_document_symbol(params)

    # Formatting
    @server.feature(types.TEXT_DOCUMENT_FORMATTING)
    def formatting(
        ls: MaxlangLanguageServer, params: types.DocumentFormattingParams
    ) -> list[types.TextEdit] | None:
        return ls._on_formatting(params)

    @server.feature(types.INITIALIZED)
    def on_initialized(
        params: types.InitializedParams,  # noqa: ARG001
    ) -> None:
        """Handle initialized notification."""
        logger.info("maxlang Language Server initialized successfully")

    @server.feature(types.SHUTDOWN)
    def on_shutdown(
        params: None,  # noqa: ARG001
    ) -> None:
        """Handle shutdown request."""
        logger.info("Shutting down maxlang Language Server")

    return server


def main(argv: Optional[list[str]] = None) -> None:
    """
    Main entry point for the maxlang language server.

    Starts the server in stdio mode for IDE integration.
    """
    parser = argparse.ArgumentParser(
        description="maxlang Language Server",
        prog="maxlang-lsp",
    )
    parser.add_argument(
        "--tcp",
        action="store_true",
        help="Start server in TCP mode instead of stdio",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to in TCP mode (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=2087,
        help="Port to listen on in TCP mode (default: 2087)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging level (default: info)",
    )

    args = parser.parse_args(argv)

    # Configure logging; stdout carries the protocol in stdio mode
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    server = create_server()

    if args.tcp:
        logger.info(f"Starting maxlang LSP in TCP mode on {args.host}:{args.port}")
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Starting maxlang LSP in stdio mode")
        server.start_io()


if __name__ == "__main__":
    main()
