"""
Diagnostic generation for maxlang LSP.

This module converts lexer and parser errors into LSP-compatible
diagnostic messages for display in editors.
"""

from lsprotocol import types

from maxlang.compiler import parse_source
from maxlang.lsp.positions import to_lsp_range
from maxlang.utils.errors import LexerError, MaxlangError, ParserError


class DiagnosticProvider:
    """
    Generates LSP diagnostics from maxlang source code.

    The lexer and parser stop at the first error, so a document has at
    most one diagnostic.
    """

    def __init__(self, source: str, uri: str) -> None:
        """
        Initialize the diagnostic provider.

        Args:
            source: The maxlang source code to analyze
            uri: The document URI for location information
        """
        self.source = source
        self.uri = uri
        self._diagnostics: list[types.Diagnostic] = []

    def get_diagnostics(self) -> list[types.Diagnostic]:
        """
        Get all diagnostics for the document.

        Returns:
            List of LSP diagnostic objects (empty for a valid program)
        """
        self._diagnostics = []

        try:
            parse_source(self.source, self.uri)
        except LexerError as e:
            self._add_maxlang_error(e, "lexer")
        except ParserError as e:
            self._add_maxlang_error(e, "parser")

        return self._diagnostics

    def _add_maxlang_error(self, error: MaxlangError, code: str) -> None:
        """
        Add a maxlang front-end error as an LSP diagnostic.

        Args:
            error: The lexer or parser error
            code: Diagnostic code naming the failing phase
        """
        if error.location:
            range_ = to_lsp_range(error.location, self.source.split("\n"))
        else:
            range_ = types.Range(
                start=types.Position(line=0, character=0),
                end=types.Position(line=0, character=1),
            )

        diagnostic = types.Diagnostic(
            range=range_,
            message=error.message,
            severity=types.DiagnosticSeverity.Error,
            source="maxlang",
            code=code,
        )
        self._diagnostics.append(diagnostic)


def get_diagnostics_for_document(source: str, uri: str) -> list[types.Diagnostic]:
    """
    Convenience function to get diagnostics for a document.

    Args:
        source: The maxlang source code
        uri: The document URI

    Returns:
        List of LSP diagnostics
    """
    provider = DiagnosticProvider(source, uri)
    return provider.get_diagnostics()
