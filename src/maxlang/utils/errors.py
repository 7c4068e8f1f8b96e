"""
Error types and source location tracking for the maxlang front end.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from maxlang.compiler.tokens import Token


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Attributes:
        line: 1-indexed line number
        column: 1-indexed column number
        offset: 0-indexed character offset from start of input
        filename: Optional source label (file path, URI, "<stdin>")
        length: Number of characters spanned (0 when unknown)
    """

    line: int
    column: int
    offset: int = 0
    filename: Optional[str] = None
    length: int = 0

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


class MaxlangError(Exception):
    """Base exception for all maxlang front-end errors."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.message = message
        self.location = location
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []

        if self.location:
            parts.append(f"[{self.location}]")

        parts.append(self.message)

        if self.source_line and self.location:
            parts.append(f"\n    {self.source_line}")
            # Caret under the error column
            padding = " " * (4 + self.location.column - 1)
            parts.append(f"\n{padding}^")

        return " ".join(parts) if not self.source_line else parts[0] + " " + "".join(parts[1:])


class LexerError(MaxlangError):
    """Raised when the lexer meets a character or literal it cannot classify."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        text: str = "",
    ) -> None:
        self.text = text
        super().__init__(message, location, source_line)


class ParserError(MaxlangError):
    """
    Raised when the token sequence cannot be reduced by the grammar.

    Attributes:
        found: The unexpected token
        expected: Human-readable names of the token kinds that would
            have been accepted at that point
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        found: Optional["Token"] = None,
        expected: tuple[str, ...] = (),
    ) -> None:
        self.found = found
        self.expected = expected
        super().__init__(message, location, source_line)


class FormatError(MaxlangError):
    """Raised when an AST has no canonical textual form."""

    pass
