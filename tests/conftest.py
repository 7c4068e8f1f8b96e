"""
Pytest configuration and shared fixtures for maxlang tests.
"""

import pytest

from maxlang.compiler.ast_nodes import Expression
from maxlang.compiler.lexer import Lexer
from maxlang.compiler.parser import Parser
from maxlang.compiler.source import TokenSource
from maxlang.compiler.tokens import Token
from maxlang.formatter import FormatConfig, Formatter


@pytest.fixture
def lexer_factory():
    """Factory fixture for creating lexers."""

    def _create_lexer(source: str, filename: str = "test.max") -> Lexer:
        return Lexer(source, filename)

    return _create_lexer


@pytest.fixture
def parser_factory():
    """Factory fixture for creating parsers from source."""

    def _create_parser(source: str, filename: str = "test.max") -> Parser:
        return Parser(TokenSource.from_string(source, filename))

    return _create_parser


@pytest.fixture
def tokenize(lexer_factory):
    """Fixture to tokenize source code (EOF included)."""

    def _tokenize(source: str) -> list[Token]:
        lexer = lexer_factory(source)
        return lexer.tokenize()

    return _tokenize


@pytest.fixture
def parse(parser_factory):
    """Fixture to parse source code into an AST."""

    def _parse(source: str) -> Expression:
        parser = parser_factory(source)
        return parser.parse()

    return _parse


@pytest.fixture
def format_node():
    """Fixture to render an AST as source text without a trailing newline."""

    def _format(node: Expression, **options) -> str:
        config = FormatConfig(trailing_newline=False, **options)
        return Formatter(config).format(node)

    return _format
