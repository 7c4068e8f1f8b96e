"""
Position conversion for maxlang LSP.

maxlang source locations count Unicode code points, while LSP positions
count UTF-16 code units by default. Characters outside the Basic
Multilingual Plane take two code units.
"""

from typing import Sequence

from lsprotocol import types

from maxlang.utils.errors import SourceLocation


def utf16_length(text: str) -> int:
    """Number of UTF-16 code units needed to encode ``text``."""
    return len(text.encode("utf-16-le")) // 2


def utf16_column(line_text: str, index: int) -> int:
    """Convert a 0-indexed code point index on a line to UTF-16 units."""
    return utf16_length(line_text[:index]) + max(0, index - len(line_text))


def to_lsp_range(location: SourceLocation, lines: Sequence[str]) -> types.Range:
    """
    Convert a source location and its span to a 0-indexed LSP range.

    Args:
        location: 1-indexed location; a zero length is widened to one
        lines: The document split on newlines

    Returns:
        A single-line range starting at the location
    """
    line = max(0, location.line - 1)
    start = max(0, location.column - 1)
    end = start + max(1, location.length)

    text = lines[line] if line < len(lines) else ""
    return types.Range(
        start=types.Position(line=line, character=utf16_column(text, start)),
        end=types.Position(line=line, character=utf16_column(text, end)),
    )
