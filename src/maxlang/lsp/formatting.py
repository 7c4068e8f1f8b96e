"""
Code formatting for maxlang LSP.

This module provides document formatting functionality by wrapping
the maxlang formatter for LSP integration.
"""

from lsprotocol import types

from maxlang.formatter import FormatConfig, format_source
from maxlang.lsp.positions import utf16_length
from maxlang.utils.errors import MaxlangError


class LSPFormatter:
    """
    Provides code formatting for the maxlang LSP server.

    Produces a single text edit replacing the whole document.
    """

    def __init__(self, config: FormatConfig | None = None) -> None:
        """
        Initialize the formatter.

        Args:
            config: Optional formatting configuration
        """
        self.config = config or FormatConfig()

    def format_document(self, source: str) -> list[types.TextEdit]:
        """
        Format an entire document.

        Args:
            source: The maxlang source code to format

        Returns:
            List of text edits to apply; empty when the document is
            already formatted or does not parse
        """
        try:
            formatted = format_source(source, self.config)
        except MaxlangError:
            # Reported separately as a diagnostic
            return []

        if source == formatted:
            return []

        return [
            types.TextEdit(
                range=types.Range(
                    start=types.Position(line=0, character=0),
                    end=_end_position(source),
                ),
                new_text=formatted,
            )
        ]


def _end_position(source: str) -> types.Position:
    """Position just past the last character of ``source``."""
    line = source.count("\n")
    character = utf16_length(source[source.rfind("\n") + 1 :])
    return types.Position(line=line, character=character)
