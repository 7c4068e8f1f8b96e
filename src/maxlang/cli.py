"""
maxlang Command-Line Interface.

Provides debugging and formatting commands for maxlang programs.

Usage:
    maxlang tokens prog.max          # Show the token stream
    maxlang ast prog.max             # Show the syntax tree
    maxlang check prog.max           # Check for syntax errors
    maxlang fmt prog.max             # Print the formatted program
    maxlang fmt --check prog.max     # Exit 1 if formatting would change
    cat prog.max | maxlang ast -     # Read from standard input
"""

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from maxlang import __version__
from maxlang.compiler import parse_source
from maxlang.compiler.lexer import Lexer
from maxlang.utils.errors import MaxlangError

STDIN_NAME = "-"


# =============================================================================
# ANSI Color Codes for Terminal Output
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"

    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors (for non-TTY output)."""
        cls.RED = ""
        cls.GREEN = ""
        cls.YELLOW = ""
        cls.CYAN = ""
        cls.GRAY = ""
        cls.BOLD = ""
        cls.RESET = ""


def _init_colors() -> None:
    """Initialize colors based on terminal capabilities."""
    # Disable colors if not a TTY or if NO_COLOR is set
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


# Initialize on module load
_init_colors()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="maxlang",
        description="maxlang - lexer, parser and formatter for the maxlang expression language",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Tokens command (debug)
    tokens_parser = subparsers.add_parser(
        "tokens",
        help="Show tokens for a maxlang file (debug)",
    )
    tokens_parser.add_argument(
        "input",
        help="Input maxlang file, or '-' for standard input",
    )

    # AST command (debug)
    ast_parser = subparsers.add_parser(
        "ast",
        help="Show AST for a maxlang file (debug)",
    )
    ast_parser.add_argument(
        "input",
        help="Input maxlang file, or '-' for standard input",
    )

    # Check command (syntax validation)
    check_parser = subparsers.add_parser(
        "check",
        help="Check a maxlang file for syntax errors",
    )
    check_parser.add_argument(
        "input",
        help="Input maxlang file, or '-' for standard input",
    )

    # Format command
    fmt_parser = subparsers.add_parser(
        "fmt",
        aliases=["format"],
        help="Format a maxlang source file",
    )
    fmt_parser.add_argument(
        "input",
        help="Input maxlang file, or '-' for standard input",
    )
    fmt_mode = fmt_parser.add_mutually_exclusive_group()
    fmt_mode.add_argument(
        "--check",
        action="store_true",
        help="Check if the file is formatted without modifying it",
    )
    fmt_mode.add_argument(
        "--diff",
        action="store_true",
        help="Show diff of formatting changes",
    )
    fmt_mode.add_argument(
        "-w",
        "--write",
        action="store_true",
        help="Write changes to the file (default: print to stdout)",
    )

    return parser


def _read_input(name: str) -> tuple[str, str]:
    """
    Read the program text for a command.

    Returns:
        (source, label) where label is used in locations and diff headers

    Raises:
        FileNotFoundError: If the named file does not exist
    """
    if name == STDIN_NAME:
        return sys.stdin.read(), "<stdin>"
    path = Path(name)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    return path.read_text(encoding="utf-8"), str(path)


def _print_error(error: Exception) -> None:
    print(f"{Colors.RED}Error:{Colors.RESET} {error}", file=sys.stderr)


def cmd_tokens(args: argparse.Namespace) -> int:
    """Handle the tokens command (debug)."""
    try:
        source, label = _read_input(args.input)
        for token in Lexer(source, label).tokenize():
            print(token)
        return 0

    except (OSError, MaxlangError) as e:
        _print_error(e)
        return 1


def cmd_ast(args: argparse.Namespace) -> int:
    """Handle the ast command (debug)."""
    try:
        source, label = _read_input(args.input)
        ast = parse_source(source, label)

        # Pretty print the AST
        _print_ast(ast)
        return 0

    except (OSError, MaxlangError) as e:
        _print_error(e)
        return 1


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the check command."""
    try:
        source, label = _read_input(args.input)
        parse_source(source, label)

        print(f"{Colors.GREEN}OK:{Colors.RESET} {label} (no syntax errors)")
        return 0

    except (OSError, MaxlangError) as e:
        _print_error(e)
        return 1


def cmd_fmt(args: argparse.Namespace) -> int:
    """Handle the fmt command - format a source file."""
    from maxlang.formatter import check_format, format_source, get_diff

    try:
        source, label = _read_input(args.input)

        if args.check:
            # Check mode: just report if formatting is needed
            if not check_format(source):
                print(f"{Colors.YELLOW}Would reformat:{Colors.RESET} {label}")
                return 1
            print(f"{Colors.GREEN}Already formatted:{Colors.RESET} {label}")
        elif args.diff:
            # Diff mode: show what would change
            diff = get_diff(source, filename=label)
            if diff:
                print(diff, end="")
                return 1
        elif args.write:
            if args.input == STDIN_NAME:
                print(f"{Colors.RED}Error:{Colors.RESET} --write needs a file", file=sys.stderr)
                return 1
            formatted = format_source(source)
            if source != formatted:
                Path(label).write_text(formatted, encoding="utf-8")
                print(f"{Colors.GREEN}Formatted:{Colors.RESET} {label}")
        else:
            # Default: print formatted output to stdout
            print(format_source(source), end="")
        return 0

    except (OSError, MaxlangError) as e:
        _print_error(e)
        return 1


def _print_ast(node, indent: int = 0) -> None:
    """Pretty print an AST node."""
    prefix = "  " * indent
    node_name = type(node).__name__

    # Dataclass fields in declaration order, positions left out
    attrs = {
        f.name: getattr(node, f.name)
        for f in dataclasses.fields(node)
        if f.name != "location"
    }

    if not attrs:
        print(f"{prefix}{node_name}")
        return

    print(f"{prefix}{node_name}:")
    for key, value in attrs.items():
        if dataclasses.is_dataclass(value):
            print(f"{prefix}  {key}:")
            _print_ast(value, indent + 2)
        elif isinstance(value, tuple) and value and dataclasses.is_dataclass(value[0]):
            print(f"{prefix}  {key}: [")
            for item in value:
                _print_ast(item, indent + 2)
            print(f"{prefix}  ]")
        else:
            print(f"{prefix}  {key}: {value!r}")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    if args.command is None:
        parser.print_help()
        return 0

    command_handlers = {
        "tokens": cmd_tokens,
        "ast": cmd_ast,
        "check": cmd_check,
        "fmt": cmd_fmt,
        "format": cmd_fmt,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
