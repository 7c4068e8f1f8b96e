"""
Abstract Syntax Tree (AST) node definitions for maxlang.

The node set is closed: every program is built from the eight node
kinds below. Nodes are immutable and carry source location information
for error reporting. Locations are excluded from equality, so two trees
parsed from differently laid out text compare equal when their
structure is the same.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from maxlang.utils.errors import SourceLocation


class ASTNode(ABC):
    """Base class for all AST nodes."""

    location: Optional[SourceLocation]

    @abstractmethod
    def accept(self, visitor: "ASTVisitor") -> Any:
        """Accept a visitor for tree traversal."""
        pass


class ASTVisitor(ABC):
    """
    Visitor pattern base class for AST traversal.

    Implement this to create AST processors (evaluators, formatters,
    symbol collectors). Subclasses must handle every node kind.
    """

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to the appropriate visit method."""
        return node.accept(self)

    @abstractmethod
    def visit_literal(self, node: "Literal") -> Any: ...

    @abstractmethod
    def visit_symbol_ref(self, node: "SymbolRef") -> Any: ...

    @abstractmethod
    def visit_function_def(self, node: "FunctionDef") -> Any: ...

    @abstractmethod
    def visit_block(self, node: "Block") -> Any: ...

    @abstractmethod
    def visit_assignment(self, node: "Assignment") -> Any: ...

    @abstractmethod
    def visit_call(self, node: "Call") -> Any: ...

    @abstractmethod
    def visit_infix_call(self, node: "InfixCall") -> Any: ...

    @abstractmethod
    def visit_no_arg_invoke(self, node: "NoArgInvoke") -> Any: ...


class _Empty:
    """Value of a block with no statements."""

    _instance: Optional["_Empty"] = None

    def __new__(cls) -> "_Empty":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "EMPTY"


EMPTY = _Empty()


class Expression(ASTNode):
    """Base class for all expressions."""

    pass


# -----------------------------------------------------------------------------
# Primary expressions
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Literal(Expression):
    """
    A number or string literal.

    Examples:
        42, 3.14, .5, "hello", 'world'
    """

    value: Union[int, float, str]
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_literal(self)

    def __eq__(self, other: object) -> bool:
        # 1 and 1.0 are different literals
        if isinstance(other, Literal):
            return type(self.value) is type(other.value) and self.value == other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))


@dataclass(frozen=True, slots=True)
class SymbolRef(Expression):
    """A reference to a variable or function by name (``x``, ``+``)."""

    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_symbol_ref(self)


@dataclass(frozen=True, slots=True)
class FunctionDef(Expression):
    """
    A function definition.

    Examples:
        fn (x, y) { x `+ y }
        fn square (x) x `* x
        fn { 42 }

    Attributes:
        parameters: Parameter names in declaration order
        body: The function body
        name: Optional name written after ``fn``
    """

    parameters: tuple[str, ...]
    body: Expression
    name: Optional[str] = None
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_function_def(self)


@dataclass(frozen=True, slots=True)
class Block(Expression):
    """
    A sequence of statements separated by ``;``.

    ``{ ... }`` is scoped (introduces a new lexical scope for the
    evaluator); ``( ... )`` is not.

    Attributes:
        scoped: True for the brace form
        statements: Statements in source order
    """

    scoped: bool
    statements: tuple[Expression, ...]
    location: Optional[SourceLocation] = field(default=None, compare=False)

    @property
    def result(self) -> Union[Expression, _Empty]:
        """The statement whose value is the block's value, or EMPTY."""
        if not self.statements:
            return EMPTY
        return self.statements[-1]

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_block(self)


# -----------------------------------------------------------------------------
# Bindings
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Assignment(Expression):
    """
    A binding.

    Examples:
        let x 42
        letrec loop fn (n) loop n

    Attributes:
        recursive: True for ``letrec``, where ``name`` is visible while
            evaluating ``value``
        name: The bound name
        value: The bound expression
    """

    recursive: bool
    name: str
    value: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_assignment(self)


# -----------------------------------------------------------------------------
# Applications
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Call(Expression):
    """
    Function application by juxtaposition: ``f x y``.

    Currying and arity are left to the evaluator; arguments keep
    source order.
    """

    callee: Expression
    arguments: tuple[Expression, ...]
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.arguments:
            raise ValueError("Call requires at least one argument")

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_call(self)


@dataclass(frozen=True, slots=True)
class InfixStep:
    """
    One backtick step of an infix call: `` `op extra1 extra2 ``.

    ``operator`` is invoked with the running value as its first argument
    followed by ``extra_args``.
    """

    operator: Expression
    extra_args: tuple[Expression, ...] = ()


@dataclass(frozen=True, slots=True)
class InfixCall(Expression):
    """
    A chain of infix steps applied left to right.

    Example:
        x `+ 1 `* 2    =>    * (+ x 1) 2
    """

    seed: Expression
    chain: tuple[InfixStep, ...]
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_infix_call(self)


@dataclass(frozen=True, slots=True)
class NoArgInvoke(Expression):
    """Postfix ``!``: invoke ``target`` with zero arguments."""

    target: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_no_arg_invoke(self)
