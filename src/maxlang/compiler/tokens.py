"""
Token definitions for the maxlang lexer.

This module defines every token kind the lexer can emit: literals,
symbols, the reserved punctuation and the keywords.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from maxlang.utils.errors import SourceLocation


class TokenType(Enum):
    """Enumeration of all token types in maxlang."""

    # End of input
    EOF = auto()

    # Literals
    INTEGER = auto()
    DECIMAL = auto()
    STRING = auto()

    # Names (identifiers and operator symbols such as + or <=)
    SYMBOL = auto()

    # Keywords
    LET = auto()           # ordinary binding
    LETREC = auto()        # self-referential binding
    FN = auto()            # function definition

    # Delimiters
    LPAREN = auto()        # (
    RPAREN = auto()        # )
    LBRACE = auto()        # {
    RBRACE = auto()        # }

    # Punctuation
    BACKTICK = auto()      # ` (infix call)
    SEMICOLON = auto()     # ;
    COMMA = auto()         # ,
    BANG = auto()          # ! (no-argument invocation)


# Mapping of keywords to token types
KEYWORDS: dict[str, TokenType] = {
    "let": TokenType.LET,
    "letrec": TokenType.LETREC,
    "fn": TokenType.FN,
}

# Single character punctuation
SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "`": TokenType.BACKTICK,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    "!": TokenType.BANG,
}

# Characters that form operator symbols (runs of these lex as one SYMBOL)
OPERATOR_CHARS = frozenset("+-*/%<>=&|^~?:@$")

# String delimiters
QUOTE_CHARS = frozenset("\"'")

# Token kinds that can begin a primary (level-1) expression
PRIMARY_START: frozenset[TokenType] = frozenset({
    TokenType.INTEGER,
    TokenType.DECIMAL,
    TokenType.STRING,
    TokenType.SYMBOL,
    TokenType.FN,
    TokenType.LBRACE,
    TokenType.LPAREN,
})

# Token kinds that can begin a full expression
EXPRESSION_START: frozenset[TokenType] = PRIMARY_START | {TokenType.LET, TokenType.LETREC}

# How token kinds are named in error messages
TOKEN_DESCRIPTIONS: dict[TokenType, str] = {
    TokenType.EOF: "end of input",
    TokenType.INTEGER: "integer",
    TokenType.DECIMAL: "decimal",
    TokenType.STRING: "string",
    TokenType.SYMBOL: "symbol",
    **{token_type: f"'{keyword}'" for keyword, token_type in KEYWORDS.items()},
    **{token_type: f"'{char}'" for char, token_type in SINGLE_CHAR_TOKENS.items()},
}


def describe(token_type: TokenType) -> str:
    """Return the human-readable name of a token kind."""
    return TOKEN_DESCRIPTIONS[token_type]


@dataclass(frozen=True, slots=True)
class Token:
    """
    Represents a single token from the source code.

    Attributes:
        type: The type of this token
        lexeme: The raw text matched in the source
        value: The parsed value (int, float or str) for literals and
            symbols, None for punctuation and keywords
        location: Source location of this token

    Equality compares type, lexeme and value; location is ignored, and a
    token also equals its own TokenType.
    """

    type: TokenType
    lexeme: str
    value: Any
    location: SourceLocation

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.location})"
        return f"Token({self.type.name}, {self.location})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Token):
            return (
                self.type == other.type
                and self.lexeme == other.lexeme
                and self.value == other.value
            )
        if isinstance(other, TokenType):
            return self.type == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.type, self.lexeme, self.value))

    @property
    def is_literal(self) -> bool:
        """Check if this token represents a literal value."""
        return self.type in {
            TokenType.INTEGER,
            TokenType.DECIMAL,
            TokenType.STRING,
        }

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a reserved keyword."""
        return self.type in KEYWORDS.values()

    def describe(self) -> str:
        """Describe this token for error messages."""
        if self.type in (TokenType.SYMBOL, TokenType.INTEGER, TokenType.DECIMAL, TokenType.STRING):
            return f"{describe(self.type)} {self.lexeme!r}"
        return describe(self.type)
