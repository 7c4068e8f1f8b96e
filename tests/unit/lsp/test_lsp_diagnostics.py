"""Tests for the maxlang LSP diagnostics provider."""

from lsprotocol.types import DiagnosticSeverity

from maxlang.lsp.diagnostics import DiagnosticProvider, get_diagnostics_for_document

URI = "file:///tmp/test.max"


class TestDiagnosticProvider:
    """Test suite for DiagnosticProvider."""

    def test_valid_code_no_errors(self) -> None:
        """Valid code produces no diagnostics."""
        source = "{\n  let x 42;\n  f x `+ 1\n}\n"
        assert get_diagnostics_for_document(source, URI) == []

    def test_parser_error_produces_diagnostic(self) -> None:
        diagnostics = get_diagnostics_for_document("let x", URI)

        assert len(diagnostics) == 1
        diagnostic = diagnostics[0]
        assert diagnostic.severity == DiagnosticSeverity.Error
        assert diagnostic.code == "parser"
        assert diagnostic.source == "maxlang"
        assert "Expected a value for 'x'" in diagnostic.message

    def test_lexer_error_produces_diagnostic(self) -> None:
        diagnostics = get_diagnostics_for_document('f "hello', URI)

        assert len(diagnostics) == 1
        assert diagnostics[0].code == "lexer"
        assert "Unterminated string" in diagnostics[0].message

    def test_diagnostic_range_is_zero_indexed(self) -> None:
        """The range covers the offending token."""
        diagnostics = get_diagnostics_for_document("f x\n  letrec )", URI)

        range_ = diagnostics[0].range
        assert range_.start.line == 1
        assert range_.start.character == 2
        assert range_.end.line == 1
        assert range_.end.character == 8

    def test_range_at_end_of_input_is_not_empty(self) -> None:
        diagnostics = get_diagnostics_for_document("{ a", URI)

        range_ = diagnostics[0].range
        assert range_.end.character == range_.start.character + 1

    def test_provider_can_be_rerun(self) -> None:
        provider = DiagnosticProvider("(", URI)
        assert len(provider.get_diagnostics()) == 1
        assert len(provider.get_diagnostics()) == 1

    def test_range_counts_utf16_code_units(self) -> None:
        """Characters outside the BMP take two columns in LSP positions."""
        diagnostics = get_diagnostics_for_document('"\U0001F600" )', URI)

        range_ = diagnostics[0].range
        assert range_.start.character == 5
        assert range_.end.character == 6
