"""
maxlang Lexer (Tokenizer).

Transforms maxlang source text into a stream of classified, located
tokens. Whitespace is skipped and never reaches the parser.
"""

from __future__ import annotations

import io
from typing import Iterator, Optional, TextIO, Union

from maxlang.compiler.stream import CharStream
from maxlang.compiler.tokens import (
    KEYWORDS,
    OPERATOR_CHARS,
    QUOTE_CHARS,
    SINGLE_CHAR_TOKENS,
    Token,
    TokenType,
)
from maxlang.utils.errors import LexerError, SourceLocation

WHITESPACE = " \t\r\n"
DIGITS = "0123456789"


def _is_digit(char: str) -> bool:
    return char in DIGITS


class Lexer:
    """
    Tokenizer for maxlang source code.

    Classification order (first match wins):
    - whitespace (skipped)
    - reserved punctuation: ( ) { } ` ; , !
    - words; keywords (let, letrec, fn) are checked before symbols
    - operator symbols (+, <=, ...)
    - integers and decimals
    - string literals (single or double quoted, no escapes)

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()
        # or pull one at a time: token = lexer.next_token()
    """

    def __init__(
        self,
        source: Union[str, TextIO, CharStream],
        filename: Optional[str] = None,
    ) -> None:
        """
        Initialize the lexer.

        Args:
            source: Source text, an open text stream, or a CharStream
            filename: Optional filename for error reporting
        """
        if isinstance(source, CharStream):
            self._chars = source
        elif isinstance(source, str):
            self._chars = CharStream(io.StringIO(source), filename)
        else:
            self._chars = CharStream(source, filename)
        self.filename = self._chars.filename
        self._done = False

    def _error(self, message: str, location: SourceLocation, text: str) -> LexerError:
        return LexerError(message, location, self._chars.current_line_text(), text=text)

    def _token(self, token_type: TokenType, lexeme: str, value, start: SourceLocation) -> Token:
        """Build a token whose location spans the matched lexeme."""
        location = SourceLocation(
            line=start.line,
            column=start.column,
            offset=start.offset,
            filename=start.filename,
            length=len(lexeme),
        )
        return Token(token_type, lexeme, value, location)

    def _skip_whitespace(self) -> None:
        chars = self._chars
        while chars.peek() is not None and chars.peek() in WHITESPACE:
            chars.advance()

    def _read_while(self, predicate) -> str:
        chars = self._chars
        collected: list[str] = []
        while chars.peek() is not None and predicate(chars.peek()):
            collected.append(chars.advance())
        return "".join(collected)

    def _read_word(self) -> Token:
        """
        Read an identifier or keyword.

        The whole word is read before the keyword check, so ``letter``
        is a symbol and ``letrec`` is a keyword.
        """
        start = self._chars.location()
        word = self._read_while(lambda c: c.isalnum() or c == "_")

        token_type = KEYWORDS.get(word)
        if token_type is not None:
            return self._token(token_type, word, None, start)
        return self._token(TokenType.SYMBOL, word, word, start)

    def _read_operator_symbol(self) -> Token:
        start = self._chars.location()
        text = self._read_while(lambda c: c in OPERATOR_CHARS)
        return self._token(TokenType.SYMBOL, text, text, start)

    def _read_number(self) -> Token:
        """
        Read a numeric literal.

        Supports:
        - Integers: 42
        - Decimals: 3.14, .5

        Digits followed by a '.' with no digit after it are rejected.
        """
        chars = self._chars
        start = chars.location()
        whole = self._read_while(_is_digit)

        if chars.peek() != ".":
            return self._token(TokenType.INTEGER, whole, int(whole), start)

        following = chars.peek(1)
        if following is None or not _is_digit(following):
            chars.advance()  # consume '.'
            raise self._error(
                f"Malformed decimal literal: {whole + '.'!r} (expected digits after '.')",
                start,
                whole + ".",
            )

        chars.advance()  # consume '.'
        fraction = self._read_while(_is_digit)
        lexeme = f"{whole}.{fraction}"
        return self._token(TokenType.DECIMAL, lexeme, float(lexeme), start)

    def _read_string(self, quote_char: str) -> Token:
        """
        Read a string literal delimited by ``quote_char``.

        The value is the raw text between the delimiters; there are no
        escape sequences, so a string cannot contain its own delimiter.
        """
        chars = self._chars
        start = chars.location()
        start_line = chars.current_line_text()
        chars.advance()  # opening quote

        value_chars: list[str] = []
        while True:
            char = chars.peek()
            if char is None:
                raise LexerError(
                    "Unterminated string literal",
                    start,
                    start_line,
                    text=quote_char + "".join(value_chars),
                )
            chars.advance()
            if char == quote_char:
                break
            value_chars.append(char)

        value = "".join(value_chars)
        return self._token(TokenType.STRING, f"{quote_char}{value}{quote_char}", value, start)

    def next_token(self) -> Token:
        """
        Extract the next token from the source.

        Returns:
            The next token; EOF (repeatedly) once input is exhausted.

        Raises:
            LexerError: if the input matches no token rule.
        """
        self._skip_whitespace()
        chars = self._chars
        char = chars.peek()

        if char is None:
            self._done = True
            return self._token(TokenType.EOF, "", None, chars.location())

        if char in SINGLE_CHAR_TOKENS:
            start = chars.location()
            chars.advance()
            return self._token(SINGLE_CHAR_TOKENS[char], char, None, start)

        if char.isalpha() or char == "_":
            return self._read_word()

        if char in OPERATOR_CHARS:
            return self._read_operator_symbol()

        if _is_digit(char):
            return self._read_number()

        if char == ".":
            following = chars.peek(1)
            if following is not None and _is_digit(following):
                start = chars.location()
                chars.advance()  # consume '.'
                fraction = self._read_while(_is_digit)
                lexeme = f".{fraction}"
                return self._token(TokenType.DECIMAL, lexeme, float(lexeme), start)

        if char in QUOTE_CHARS:
            return self._read_string(char)

        # Unknown character
        raise self._error(f"Unexpected character: {char!r}", chars.location(1), char)

    def line_text(self, line: int) -> Optional[str]:
        """Return the text of ``line`` if it is the line being scanned, else None."""
        if self._chars.line != line:
            return None
        return self._chars.current_line_text()

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source.

        Returns:
            A list of all tokens including the final EOF token.
        """
        tokens: list[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break
        return tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over the remaining tokens, stopping before EOF."""
        while not self._done:
            token = self.next_token()
            if token.type == TokenType.EOF:
                return
            yield token


def tokenize(source: Union[str, TextIO], filename: Optional[str] = None) -> list[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: maxlang source text or an open text stream
        filename: Optional filename for error reporting

    Returns:
        List of tokens ending with EOF
    """
    return Lexer(source, filename).tokenize()
