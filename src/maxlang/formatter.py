"""
maxlang Code Formatter.

Renders an AST back to canonical maxlang source text. Parsing the output
yields a tree equal to the one that was formatted, so the formatter is
also the reference printer used by the CLI and the language server.

Usage:
    maxlang fmt prog.max
    maxlang fmt --check prog.max
    maxlang fmt --diff prog.max
"""

from __future__ import annotations

import difflib
import math
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from maxlang.compiler import parse_source
from maxlang.compiler.ast_nodes import (
    Assignment,
    ASTVisitor,
    Block,
    Call,
    Expression,
    FunctionDef,
    InfixCall,
    Literal,
    NoArgInvoke,
    SymbolRef,
)
from maxlang.utils.errors import FormatError

# =============================================================================
# Formatter Configuration
# =============================================================================


@dataclass
class FormatConfig:
    """Configuration for the code formatter."""

    indent_size: int = 2
    max_line_length: int = 80
    trailing_newline: bool = True


# =============================================================================
# Code Formatter
# =============================================================================


class Formatter(ASTVisitor):
    """
    AST-based code formatter for maxlang.

    Every ``visit_*`` method returns the node's text. Operands that the
    greedy grammar would otherwise extend (calls, assignments, infix
    chains, functions without a brace body) are wrapped in parentheses
    when they appear in operand position.
    """

    def __init__(self, config: FormatConfig | None = None) -> None:
        """Initialize the formatter with optional configuration."""
        self.config = config or FormatConfig()
        self._indent_level = 0

    def format(self, node: Expression) -> str:
        """Format a complete program."""
        self._indent_level = 0
        try:
            result = self.visit(node)
        except RecursionError:
            raise FormatError("Expression nested too deeply to format", node.location) from None
        if self.config.trailing_newline and not result.endswith("\n"):
            result += "\n"
        return result

    def _indent(self) -> str:
        """Get the current indentation string."""
        return " " * (self._indent_level * self.config.indent_size)

    # -------------------------------------------------------------------------
    # Operand Positions
    # -------------------------------------------------------------------------

    def _is_closed(self, node: Expression) -> bool:
        """Check if a node's text cannot absorb tokens written after it."""
        if isinstance(node, (Literal, SymbolRef, Block, NoArgInvoke)):
            return True
        if isinstance(node, FunctionDef):
            return isinstance(node.body, Block) and node.body.scoped
        return False

    def _operand(self, node: Expression) -> str:
        """Format a node in callee, non-final argument or infix position."""
        if isinstance(node, Assignment):
            raise FormatError(
                f"Binding of '{node.name}' cannot be written as an operand",
                node.location,
            )
        text = self.visit(node)
        if self._is_closed(node):
            return text
        return f"({text})"

    def _last_argument(self, node: Expression) -> str:
        """Format the final argument of a call; a trailing infix chain stays bare."""
        if isinstance(node, InfixCall):
            return self.visit(node)
        return self._operand(node)

    # -------------------------------------------------------------------------
    # Node Formatting
    # -------------------------------------------------------------------------

    def visit_literal(self, node: Literal) -> str:
        value = node.value
        if isinstance(value, bool):
            raise FormatError(f"Unsupported literal value: {value!r}", node.location)
        if isinstance(value, int):
            if value < 0:
                raise FormatError(f"Negative literal has no source form: {value}", node.location)
            return str(value)
        if isinstance(value, float):
            return self._format_decimal(node)
        return self._format_string(node)

    def _format_decimal(self, node: Literal) -> str:
        value = node.value
        if not math.isfinite(value) or value < 0:
            raise FormatError(f"Decimal literal has no source form: {value!r}", node.location)
        # Positional notation; repr() keeps the shortest round-tripping digits
        text = format(Decimal(repr(value)), "f")
        if "." not in text:
            text += ".0"
        return text

    def _format_string(self, node: Literal) -> str:
        text = node.value
        if '"' not in text:
            return f'"{text}"'
        if "'" not in text:
            return f"'{text}'"
        raise FormatError("String contains both quote characters", node.location)

    def visit_symbol_ref(self, node: SymbolRef) -> str:
        return node.name

    def visit_function_def(self, node: FunctionDef) -> str:
        parts = ["fn"]
        if node.name is not None:
            parts.append(node.name)
        parts.append("(" + ", ".join(node.parameters) + ")")

        body = self.visit(node.body)
        brace_body = isinstance(node.body, Block) and node.body.scoped
        if not brace_body and body.startswith("{"):
            # Otherwise the leading block would be read as the whole body
            body = f"({body})"
        parts.append(body)
        return " ".join(parts)

    def visit_block(self, node: Block) -> str:
        opener, closer = ("{", "}") if node.scoped else ("(", ")")
        if not node.statements:
            return opener + closer

        self._indent_level += 1
        try:
            statements = [self.visit(stmt) for stmt in node.statements]
        finally:
            self._indent_level -= 1

        # (e;) keeps a lone unscoped statement from reading as grouping
        keep_block = (
            not node.scoped
            and len(statements) == 1
            and not isinstance(node.statements[0], Assignment)
        )

        multi_line = any("\n" in stmt for stmt in statements)
        if not multi_line:
            inner = "; ".join(statements) + (";" if keep_block else "")
            if node.scoped:
                text = f"{{ {inner} }}"
            else:
                text = f"({inner})"
            if len(self._indent()) + len(text) <= self.config.max_line_length:
                return text

        inner_indent = " " * ((self._indent_level + 1) * self.config.indent_size)
        lines = [opener]
        for i, stmt in enumerate(statements):
            last = i == len(statements) - 1
            separator = ";" if not last or keep_block else ""
            lines.append(f"{inner_indent}{stmt}{separator}")
        lines.append(self._indent() + closer)
        return "\n".join(lines)

    def visit_assignment(self, node: Assignment) -> str:
        keyword = "letrec" if node.recursive else "let"
        return f"{keyword} {node.name} {self.visit(node.value)}"

    def visit_call(self, node: Call) -> str:
        parts = [self._operand(node.callee)]
        *leading, last = node.arguments
        parts.extend(self._operand(arg) for arg in leading)
        parts.append(self._last_argument(last))
        return " ".join(parts)

    def visit_infix_call(self, node: InfixCall) -> str:
        parts = [self._operand(node.seed)]
        for step in node.chain:
            parts.append("`" + self._operand(step.operator))
            parts.extend(self._operand(arg) for arg in step.extra_args)
        return " ".join(parts)

    def visit_no_arg_invoke(self, node: NoArgInvoke) -> str:
        return self._operand(node.target) + "!"


# =============================================================================
# Public API
# =============================================================================


def format_node(node: Expression, config: FormatConfig | None = None) -> str:
    """Format an AST node as canonical source text."""
    return Formatter(config).format(node)


def format_source(source: str, config: FormatConfig | None = None) -> str:
    """
    Format maxlang source code.

    Args:
        source: The maxlang source code to format
        config: Optional formatting configuration

    Returns:
        The formatted source code

    Raises:
        MaxlangError: If the source cannot be parsed or rendered
    """
    return format_node(parse_source(source), config)


def format_file(
    filepath: str | Path,
    config: FormatConfig | None = None,
    write: bool = False,
) -> str:
    """
    Format a maxlang file.

    Args:
        filepath: Path to the source file
        config: Optional formatting configuration
        write: If True, write the formatted output back to the file

    Returns:
        The formatted source code

    Raises:
        FileNotFoundError: If the file does not exist
        MaxlangError: If the source cannot be parsed
    """
    path = Path(filepath)
    source = path.read_text(encoding="utf-8")

    formatted = format_node(parse_source(source, str(path)), config)

    if write and formatted != source:
        path.write_text(formatted, encoding="utf-8")

    return formatted


def check_format(source: str, config: FormatConfig | None = None) -> bool:
    """
    Check if source code is already in canonical form.

    Raises:
        MaxlangError: If the source cannot be parsed
    """
    return source == format_source(source, config)


def get_diff(
    source: str,
    config: FormatConfig | None = None,
    filename: str = "<input>",
) -> str:
    """
    Get a diff showing formatting changes.

    Args:
        source: The maxlang source code
        config: Optional formatting configuration
        filename: Filename for diff header

    Returns:
        A unified diff string, or empty string if no changes needed
    """
    formatted = format_source(source, config)

    if source == formatted:
        return ""

    diff = difflib.unified_diff(
        source.splitlines(keepends=True),
        formatted.splitlines(keepends=True),
        fromfile=f"a/{filename}",
        tofile=f"b/{filename}",
    )
    return "".join(diff)
