"""
maxlang Utilities Package.

Common utilities for error handling and source locations.
"""

from maxlang.utils.errors import (
    FormatError,
    LexerError,
    MaxlangError,
    ParserError,
    SourceLocation,
)

__all__ = [
    "MaxlangError",
    "LexerError",
    "ParserError",
    "FormatError",
    "SourceLocation",
]
