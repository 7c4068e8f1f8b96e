"""
Character stream with position tracking.

Wraps any text stream (an open file, ``io.StringIO``, ``sys.stdin``) and
hands characters to the lexer one at a time, counting lines and columns
from the start of input. Input is read lazily in chunks, so a read may
block on the underlying stream.
"""

from __future__ import annotations

import io
from typing import Optional, TextIO

from maxlang.utils.errors import SourceLocation


class CharStream:
    """
    Pull-based character reader used by the lexer.

    Only the line currently being scanned (plus any lookahead) is kept in
    memory; everything before the last newline is discarded.

    Usage:
        chars = CharStream(open("prog.max"), "prog.max")
        while chars.peek() is not None:
            chars.advance()
    """

    def __init__(
        self,
        stream: TextIO,
        filename: Optional[str] = None,
        chunk_size: int = 4096,
    ) -> None:
        """
        Initialize the stream.

        Args:
            stream: Any readable text stream
            filename: Optional source label threaded through every location
            chunk_size: Number of characters requested per read
        """
        self.filename = filename
        self._stream = stream
        self._chunk_size = chunk_size
        # Buffer always starts at the beginning of the current line
        self._buffer = ""
        self._index = 0
        self._exhausted = False

        self.offset = 0
        self.line = 1
        self.column = 1

    @classmethod
    def from_string(cls, source: str, filename: Optional[str] = None) -> "CharStream":
        """Create a stream over an in-memory string."""
        return cls(io.StringIO(source), filename)

    def _fill(self, count: int) -> bool:
        """Make at least ``count`` unread characters available. Returns success."""
        while len(self._buffer) - self._index < count:
            if self._exhausted:
                return False
            chunk = self._stream.read(self._chunk_size)
            if not chunk:
                self._exhausted = True
                return False
            self._buffer += chunk
        return True

    def peek(self, offset: int = 0) -> Optional[str]:
        """Return the character ``offset`` positions ahead, or None at end of input."""
        if not self._fill(offset + 1):
            return None
        return self._buffer[self._index + offset]

    def at_end(self) -> bool:
        """Check if every character has been consumed."""
        return self.peek() is None

    def advance(self) -> str:
        """Consume and return the current character."""
        char = self.peek()
        if char is None:
            raise EOFError("advance() past end of input")
        self._index += 1
        self.offset += 1

        if char == "\n":
            self.line += 1
            self.column = 1
            self._buffer = self._buffer[self._index:]
            self._index = 0
        else:
            self.column += 1

        return char

    def location(self, length: int = 0) -> SourceLocation:
        """Create a SourceLocation for the current position."""
        return SourceLocation(
            line=self.line,
            column=self.column,
            offset=self.offset,
            filename=self.filename,
            length=length,
        )

    def current_line_text(self) -> str:
        """Return the full text of the line being scanned, for error messages."""
        while "\n" not in self._buffer and self._fill(len(self._buffer) - self._index + 1):
            pass
        end = self._buffer.find("\n")
        if end == -1:
            end = len(self._buffer)
        return self._buffer[:end].rstrip("\r")
