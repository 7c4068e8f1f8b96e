"""
Document symbols for maxlang LSP.

Collects every named binding in a document (``let``, ``letrec`` and
named ``fn`` definitions) into a tree that mirrors the nesting of the
source, for the editor's outline view.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Sequence

from lsprotocol import types

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
from maxlang.lsp.positions import to_lsp_range
from maxlang.utils.errors import SourceLocation


class SymbolKind(Enum):
    """Kind of binding in the maxlang language."""

    FUNCTION = auto()
    VARIABLE = auto()


# Map maxlang symbol kinds to LSP symbol kinds
SYMBOL_KIND_TO_LSP: dict[SymbolKind, types.SymbolKind] = {
    SymbolKind.FUNCTION: types.SymbolKind.Function,
    SymbolKind.VARIABLE: types.SymbolKind.Variable,
}


@dataclass
class Symbol:
    """
    A named binding in the source code.

    Attributes:
        name: The bound name
        kind: Function or variable
        detail: Short description shown next to the name
        location: Where the binding starts (its keyword)
        children: Bindings nested inside the bound value
    """

    name: str
    kind: SymbolKind
    detail: Optional[str] = None
    location: Optional[SourceLocation] = None
    children: list["Symbol"] = field(default_factory=list)

    def to_lsp_range(self, lines: Sequence[str] = ()) -> types.Range:
        """Convert the binding's keyword span to an LSP range (0-indexed)."""
        if self.location is None:
            return types.Range(
                start=types.Position(line=0, character=0),
                end=types.Position(line=0, character=len(self.name)),
            )
        return to_lsp_range(self.location, lines)

    def to_document_symbol(self, lines: Sequence[str] = ()) -> types.DocumentSymbol:
        """
        Convert to LSP DocumentSymbol.

        Args:
            lines: The document split on newlines, for UTF-16 columns
        """
        range_ = self.to_lsp_range(lines)
        children = [child.to_document_symbol(lines) for child in self.children]

        return types.DocumentSymbol(
            name=self.name,
            kind=SYMBOL_KIND_TO_LSP[self.kind],
            range=range_,
            selection_range=range_,
            detail=self.detail,
            children=children if children else None,
        )


class SymbolCollector(ASTVisitor):
    """
    Walks an AST and returns the bindings found in each subtree.

    Usage:
        symbols = SymbolCollector().collect(ast)
    """

    def collect(self, node: Expression) -> list[Symbol]:
        """Collect the top-level bindings of a program."""
        return self.visit(node)

    def _collect_all(self, nodes) -> list[Symbol]:
        symbols: list[Symbol] = []
        for node in nodes:
            symbols.extend(self.visit(node))
        return symbols

    def visit_literal(self, node: Literal) -> list[Symbol]:
        return []

    def visit_symbol_ref(self, node: SymbolRef) -> list[Symbol]:
        return []

    def visit_function_def(self, node: FunctionDef) -> list[Symbol]:
        children = self.visit(node.body)
        if node.name is None:
            return children
        return [
            Symbol(
                name=node.name,
                kind=SymbolKind.FUNCTION,
                detail=f"fn ({', '.join(node.parameters)})",
                location=node.location,
                children=children,
            )
        ]

    def visit_block(self, node: Block) -> list[Symbol]:
        return self._collect_all(node.statements)

    def visit_assignment(self, node: Assignment) -> list[Symbol]:
        if isinstance(node.value, FunctionDef):
            kind = SymbolKind.FUNCTION
            detail = f"fn ({', '.join(node.value.parameters)})"
        else:
            kind = SymbolKind.VARIABLE
            detail = None
        if node.recursive:
            detail = f"letrec {detail}" if detail else "letrec"

        return [
            Symbol(
                name=node.name,
                kind=kind,
                detail=detail,
                location=node.location,
                children=self.visit(node.value),
            )
        ]

    def visit_call(self, node: Call) -> list[Symbol]:
        return self._collect_all((node.callee, *node.arguments))

    def visit_infix_call(self, node: InfixCall) -> list[Symbol]:
        nodes: list[Expression] = [node.seed]
        for step in node.chain:
            nodes.append(step.operator)
            nodes.extend(step.extra_args)
        return self._collect_all(nodes)

    def visit_no_arg_invoke(self, node: NoArgInvoke) -> list[Symbol]:
        return self.visit(node.target)


def get_document_symbols(node: Expression, source: str = "") -> list[types.DocumentSymbol]:
    """Build the LSP outline for a parsed document from its AST and text."""
    lines = source.split("\n")
    return [symbol.to_document_symbol(lines) for symbol in SymbolCollector().collect(node)]
