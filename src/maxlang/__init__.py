"""
maxlang - a small expression language built on juxtaposition calls.

This package provides the language front end: a streaming lexer, a
precedence parser producing an immutable AST, a canonical formatter, a
command-line interface and a language server.
"""

__version__ = "0.1.0"

from maxlang.compiler import parse_file, parse_source, parse_stream  # noqa: E402
from maxlang.compiler.lexer import Lexer  # noqa: E402
from maxlang.compiler.parser import Parser  # noqa: E402
from maxlang.formatter import format_node, format_source  # noqa: E402

__all__ = [
    "parse_source",
    "parse_stream",
    "parse_file",
    "Lexer",
    "Parser",
    "format_node",
    "format_source",
]
