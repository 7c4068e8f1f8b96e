"""
Token source adapter.

The parser never talks to the lexer or the character stream directly: it
pulls tokens from a TokenSource, which owns both and keeps one token of
lookahead.
"""

from __future__ import annotations

import io
from typing import Optional, TextIO

from maxlang.compiler.lexer import Lexer
from maxlang.compiler.stream import CharStream
from maxlang.compiler.tokens import Token, TokenType


class TokenSource:
    """
    Pull-based token provider for the parser.

    Usage:
        tokens = TokenSource.open(open("prog.max"), "prog.max")
        token = tokens.next_token()
    """

    def __init__(self, lexer: Lexer) -> None:
        self._lexer = lexer
        self._lookahead: Optional[Token] = None

    @classmethod
    def open(cls, stream: TextIO, filename: Optional[str] = None) -> "TokenSource":
        """Wrap an open text stream."""
        return cls(Lexer(CharStream(stream, filename)))

    @classmethod
    def from_string(cls, source: str, filename: Optional[str] = None) -> "TokenSource":
        """Wrap an in-memory string."""
        return cls.open(io.StringIO(source), filename)

    @property
    def filename(self) -> Optional[str]:
        """The source label attached to every token location."""
        return self._lexer.filename

    def line_text(self, line: int) -> Optional[str]:
        """Source text of ``line`` for error carets, when still available."""
        return self._lexer.line_text(line)

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        if self._lookahead is None:
            self._lookahead = self._lexer.next_token()
        return self._lookahead

    def next_token(self) -> Token:
        """Consume and return the next token."""
        token = self.peek()
        if token.type != TokenType.EOF:
            self._lookahead = None
        return token
