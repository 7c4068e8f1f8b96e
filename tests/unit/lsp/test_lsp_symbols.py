"""Tests for the maxlang LSP document symbols."""

from lsprotocol import types

from maxlang.compiler import parse_source
from maxlang.lsp.symbols import SymbolCollector, SymbolKind, get_document_symbols


def collect(source: str):
    return SymbolCollector().collect(parse_source(source))


class TestSymbolCollector:
    """Test suite for SymbolCollector."""

    def test_no_bindings(self) -> None:
        assert collect("f x `+ 1") == []

    def test_let_variable(self) -> None:
        symbols = collect("let x 42")

        assert len(symbols) == 1
        assert symbols[0].name == "x"
        assert symbols[0].kind == SymbolKind.VARIABLE
        assert symbols[0].detail is None

    def test_let_function(self) -> None:
        symbols = collect("let add fn (a, b) a `+ b")

        assert symbols[0].kind == SymbolKind.FUNCTION
        assert symbols[0].detail == "fn (a, b)"

    def test_letrec_detail(self) -> None:
        symbols = collect("letrec loop fn (n) loop n")

        assert symbols[0].detail == "letrec fn (n)"

    def test_named_fn(self) -> None:
        symbols = collect("fn square (x) { x `* x }")

        assert [s.name for s in symbols] == ["square"]
        assert symbols[0].kind == SymbolKind.FUNCTION

    def test_block_statements(self) -> None:
        symbols = collect("{ let a 1; let b 2; a `+ b }")

        assert [s.name for s in symbols] == ["a", "b"]

    def test_nested_bindings_become_children(self) -> None:
        symbols = collect("let outer fn () { let inner 1; inner }")

        assert len(symbols) == 1
        assert [child.name for child in symbols[0].children] == ["inner"]

    def test_bindings_inside_arguments(self) -> None:
        symbols = collect("f (let x 1) { let y 2 }!")

        assert [s.name for s in symbols] == ["x", "y"]


class TestDocumentSymbols:
    """Tests for conversion to LSP types."""

    def test_lsp_conversion(self) -> None:
        symbols = get_document_symbols(parse_source("{\n  letrec go fn () go!\n}"))

        assert len(symbols) == 1
        symbol = symbols[0]
        assert isinstance(symbol, types.DocumentSymbol)
        assert symbol.name == "go"
        assert symbol.kind == types.SymbolKind.Function
        assert symbol.range.start.line == 1
        assert symbol.range.start.character == 2
        assert symbol.range.end.character == 8
        assert symbol.children is None

    def test_range_counts_utf16_code_units(self) -> None:
        source = '{ "\U0001F600"; let x 1 }'
        symbols = get_document_symbols(parse_source(source), source)

        assert symbols[0].range.start.character == 8
        assert symbols[0].range.end.character == 11
