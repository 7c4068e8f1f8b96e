"""
maxlang Compiler Package.

This package contains the front-end components:
- CharStream: Position-tracking reader over a text stream
- Lexer: Tokenizes maxlang source text
- TokenSource: Pull-based token provider used by the parser
- Parser: Produces an Abstract Syntax Tree from tokens
- AST: Node definitions for the syntax tree
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, TextIO, Union

from maxlang.compiler.ast_nodes import (
    EMPTY,
    ASTNode,
    ASTVisitor,
    Assignment,
    Block,
    Call,
    Expression,
    FunctionDef,
    InfixCall,
    InfixStep,
    Literal,
    NoArgInvoke,
    SymbolRef,
)
from maxlang.compiler.lexer import Lexer, tokenize
from maxlang.compiler.parser import Parser
from maxlang.compiler.source import TokenSource
from maxlang.compiler.stream import CharStream
from maxlang.compiler.tokens import Token, TokenType

logger = logging.getLogger(__name__)


def parse_source(source: str, filename: Optional[str] = None) -> Expression:
    """
    Parse maxlang source text into an AST.

    Args:
        source: The program text
        filename: Optional source label for error reporting

    Returns:
        The root expression node

    Raises:
        LexerError: On an unrecognised character or malformed literal
        ParserError: On a token sequence the grammar cannot reduce
    """
    return Parser(TokenSource.from_string(source, filename)).parse()


def parse_stream(stream: TextIO, filename: Optional[str] = None) -> Expression:
    """Parse a program read lazily from an open text stream."""
    return Parser(TokenSource.open(stream, filename)).parse()


def parse_file(path: Union[str, Path]) -> Expression:
    """
    Parse a maxlang source file.

    Args:
        path: Path to the source file

    Returns:
        The root expression node
    """
    path = Path(path)
    logger.debug(f"Parsing {path}")
    with path.open(encoding="utf-8") as stream:
        return parse_stream(stream, str(path))


__all__ = [
    # Entry points
    "parse_source",
    "parse_stream",
    "parse_file",
    "tokenize",
    # Components
    "CharStream",
    "Lexer",
    "TokenSource",
    "Parser",
    "Token",
    "TokenType",
    # AST
    "ASTNode",
    "ASTVisitor",
    "Expression",
    "Literal",
    "SymbolRef",
    "FunctionDef",
    "Block",
    "Assignment",
    "Call",
    "InfixCall",
    "InfixStep",
    "NoArgInvoke",
    "EMPTY",
]
