"""
Unit tests for the maxlang Parser.
"""

import io

import pytest

from maxlang.compiler.ast_nodes import (
    EMPTY,
    Assignment,
    Block,
    Call,
    FunctionDef,
    InfixCall,
    InfixStep,
    Literal,
    NoArgInvoke,
    SymbolRef,
)
from maxlang.compiler.parser import parse as parse_text
from maxlang.utils.errors import LexerError, ParserError


def sym(name: str) -> SymbolRef:
    return SymbolRef(name)


def lit(value) -> Literal:
    return Literal(value)


def step(operator, *extra_args) -> InfixStep:
    return InfixStep(operator, tuple(extra_args))


class TestParserPrimaries:
    """Tests for level-1 operands."""

    def test_symbol(self, parse):
        assert parse("x") == sym("x")

    def test_operator_symbol(self, parse):
        assert parse("+") == sym("+")

    def test_integer(self, parse):
        assert parse("42") == lit(42)

    def test_decimal(self, parse):
        assert parse(".5") == lit(0.5)

    def test_string(self, parse):
        assert parse("'hi there'") == lit("hi there")

    def test_location_is_recorded(self, parse):
        node = parse("\n  x")
        assert node.location.line == 2
        assert node.location.column == 3

    def test_equality_ignores_location(self, parse):
        assert parse("x") == parse("   x")


class TestParserCalls:
    """Tests for juxtaposition calls."""

    def test_single_argument(self, parse):
        assert parse("f x") == Call(sym("f"), (sym("x"),))

    def test_arguments_keep_order(self, parse):
        assert parse("f 1 2 3") == Call(sym("f"), (lit(1), lit(2), lit(3)))

    def test_grouped_argument(self, parse):
        assert parse("f (g x) y") == Call(
            sym("f"),
            (Call(sym("g"), (sym("x"),)), sym("y")),
        )

    def test_grouped_callee(self, parse):
        assert parse("(f x) y") == Call(Call(sym("f"), (sym("x"),)), (sym("y"),))

    def test_call_requires_arguments(self):
        with pytest.raises(ValueError):
            Call(sym("f"), ())


class TestParserPostfix:
    """Tests for postfix no-argument invocation."""

    def test_bang(self, parse):
        assert parse("f!") == NoArgInvoke(sym("f"))

    def test_repeated_bang(self, parse):
        assert parse("f!!") == NoArgInvoke(NoArgInvoke(sym("f")))

    def test_bang_binds_to_last_operand(self, parse):
        assert parse("f x y!") == Call(sym("f"), (sym("x"), NoArgInvoke(sym("y"))))

    def test_bang_on_group(self, parse):
        assert parse("(f x)!") == NoArgInvoke(Call(sym("f"), (sym("x"),)))


class TestParserInfix:
    """Tests for backtick infix chains."""

    def test_simple_infix(self, parse):
        assert parse("2 `+ 3") == InfixCall(lit(2), (step(sym("+"), lit(3)),))

    def test_chain_is_left_to_right(self, parse):
        assert parse("x `+ 1 `* 2") == InfixCall(
            sym("x"),
            (step(sym("+"), lit(1)), step(sym("*"), lit(2))),
        )

    def test_step_takes_every_following_operand(self, parse):
        assert parse("a `f b c `g d") == InfixCall(
            sym("a"),
            (step(sym("f"), sym("b"), sym("c")), step(sym("g"), sym("d"))),
        )

    def test_step_without_extra_arguments(self, parse):
        assert parse("x `inc") == InfixCall(sym("x"), (step(sym("inc")),))

    def test_infix_binds_tighter_than_call(self, parse):
        assert parse("f x `* y") == Call(
            sym("f"),
            (InfixCall(sym("x"), (step(sym("*"), sym("y")),)),),
        )

    def test_bang_binds_tighter_than_infix(self, parse):
        assert parse("f x! `* y") == Call(
            sym("f"),
            (InfixCall(NoArgInvoke(sym("x")), (step(sym("*"), sym("y")),)),),
        )

    def test_grouped_chain_is_continued(self, parse):
        assert parse("(f `g) `h") == InfixCall(
            sym("f"),
            (step(sym("g")), step(sym("h"))),
        )

    def test_grouped_operator(self, parse):
        assert parse("a `(compose f g) b") == InfixCall(
            sym("a"),
            (step(Call(sym("compose"), (sym("f"), sym("g"))), sym("b")),),
        )


class TestParserAssignments:
    """Tests for let and letrec bindings."""

    def test_let(self, parse):
        assert parse("let x 42") == Assignment(False, "x", lit(42))

    def test_letrec(self, parse):
        node = parse("letrec loop fn (n) loop n")
        assert node == Assignment(
            True,
            "loop",
            FunctionDef(("n",), Call(sym("loop"), (sym("n"),))),
        )

    def test_value_is_a_full_expression(self, parse):
        assert parse("let y f x `+ 1") == Assignment(
            False,
            "y",
            Call(sym("f"), (InfixCall(sym("x"), (step(sym("+"), lit(1)),)),)),
        )

    def test_chained_assignment(self, parse):
        assert parse("let a let b 1") == Assignment(False, "a", Assignment(False, "b", lit(1)))


class TestParserBlocks:
    """Tests for brace and parenthesis blocks."""

    def test_scoped_block(self, parse):
        node = parse("{ let x 1; x }")
        assert node == Block(True, (Assignment(False, "x", lit(1)), sym("x")))
        assert node.result == sym("x")

    def test_empty_blocks(self, parse):
        assert parse("{}") == Block(True, ())
        assert parse("()") == Block(False, ())
        assert parse("{}").result is EMPTY

    def test_trailing_semicolon(self, parse):
        assert parse("{ a; b; }") == Block(True, (sym("a"), sym("b")))

    def test_single_statement_brace_block(self, parse):
        assert parse("{ x }") == Block(True, (sym("x"),))

    def test_parenthesis_is_grouping(self, parse):
        assert parse("(x)") == sym("x")
        assert parse("((f x))") == Call(sym("f"), (sym("x"),))

    def test_parenthesis_with_semicolon_is_a_block(self, parse):
        assert parse("(x;)") == Block(False, (sym("x"),))

    def test_parenthesis_with_binding_is_a_block(self, parse):
        assert parse("(let x 1)") == Block(False, (Assignment(False, "x", lit(1)),))

    def test_unscoped_sequence(self, parse):
        assert parse("(a; b)") == Block(False, (sym("a"), sym("b")))

    def test_nested_blocks(self, parse):
        assert parse("{ { a }; (b; c) }") == Block(
            True,
            (Block(True, (sym("a"),)), Block(False, (sym("b"), sym("c")))),
        )

    def test_block_as_callee(self, parse):
        assert parse("{ f } x") == Call(Block(True, (sym("f"),)), (sym("x"),))


class TestParserFunctions:
    """Tests for fn definitions."""

    def test_no_parameters(self, parse):
        assert parse("fn { 42 }") == FunctionDef((), Block(True, (lit(42),)))

    def test_empty_parameter_list(self, parse):
        assert parse("fn () x") == FunctionDef((), sym("x"))

    def test_parameters_and_expression_body(self, parse):
        assert parse("fn (x, y) x `+ y") == FunctionDef(
            ("x", "y"),
            InfixCall(sym("x"), (step(sym("+"), sym("y")),)),
        )

    def test_named_function(self, parse):
        node = parse("fn square (x) { x `* x }")
        assert node.name == "square"
        assert node.parameters == ("x",)
        assert isinstance(node.body, Block)

    def test_symbol_after_fn_is_the_name(self, parse):
        assert parse("fn f x") == FunctionDef((), sym("x"), name="f")

    def test_brace_body_is_one_block(self, parse):
        assert parse("fn () { 1 } 2") == Call(
            FunctionDef((), Block(True, (lit(1),))),
            (lit(2),),
        )

    def test_expression_body_is_greedy(self, parse):
        assert parse("fn (x) f x y") == FunctionDef(
            ("x",),
            Call(sym("f"), (sym("x"), sym("y"))),
        )

    def test_function_as_argument(self, parse):
        assert parse("map fn (x) { x } xs") == Call(
            sym("map"),
            (FunctionDef(("x",), Block(True, (sym("x"),))), sym("xs")),
        )


class TestParserEntryPoints:
    """Tests for the module-level parse function."""

    def test_parse_string(self):
        assert parse_text("f x") == Call(sym("f"), (sym("x"),))

    def test_parse_stream(self):
        assert parse_text(io.StringIO("let x\n  1")) == Assignment(False, "x", lit(1))

    def test_filename_in_locations(self):
        node = parse_text("x", "prog.max")
        assert node.location.filename == "prog.max"


class TestParserErrors:
    """Tests for parser error reporting."""

    def test_empty_program(self, parse):
        with pytest.raises(ParserError, match="Expected an expression") as exc_info:
            parse("")
        error = exc_info.value
        assert error.found.type.name == "EOF"
        assert "symbol" in error.expected
        assert "'let'" in error.expected

    def test_trailing_token(self, parse):
        with pytest.raises(ParserError, match="Unexpected token after expression") as exc_info:
            parse("f )")
        error = exc_info.value
        assert error.expected == ("end of input",)
        assert error.location.column == 3

    def test_unclosed_brace(self, parse):
        with pytest.raises(ParserError, match="Unclosed delimiter '{'") as exc_info:
            parse("{ a b")
        assert exc_info.value.expected == ("';'", "'}'")

    def test_unclosed_paren(self, parse):
        with pytest.raises(ParserError, match=r"Unclosed delimiter '\('"):
            parse("f (a; b")

    def test_mismatched_closer(self, parse):
        with pytest.raises(ParserError, match=r"Expected ';' or '\)' in block") as exc_info:
            parse("(a b }")
        assert exc_info.value.found.lexeme == "}"

    def test_missing_statement(self, parse):
        with pytest.raises(ParserError, match="Expected a statement") as exc_info:
            parse("{ ; }")
        assert "'}'" in exc_info.value.expected

    def test_let_without_name(self, parse):
        with pytest.raises(ParserError, match="Expected a name after 'let'") as exc_info:
            parse("let 1 x")
        assert exc_info.value.expected == ("symbol",)

    def test_let_without_value(self, parse):
        with pytest.raises(ParserError, match="Expected a value for 'x'"):
            parse("let x")

    def test_backtick_without_operator(self, parse):
        with pytest.raises(ParserError, match="Expected an operator after '`'"):
            parse("a `")

    def test_bad_parameter_list(self, parse):
        with pytest.raises(ParserError, match=r"Expected ',' or '\)'") as exc_info:
            parse("fn (x y) x")
        assert exc_info.value.expected == ("')'", "','")

    def test_parameter_must_be_a_symbol(self, parse):
        with pytest.raises(ParserError, match="Expected a parameter name"):
            parse("fn (x,) x")

    def test_missing_function_body(self, parse):
        with pytest.raises(ParserError, match="Expected a function body"):
            parse("fn")

    def test_leading_bang(self, parse):
        with pytest.raises(ParserError, match="Expected an expression"):
            parse("!")

    def test_binding_is_not_an_argument(self, parse):
        with pytest.raises(ParserError, match="Unexpected token after expression"):
            parse("f let x 1")

    def test_lexer_errors_propagate(self, parse):
        with pytest.raises(LexerError, match="Malformed decimal"):
            parse("f 1.")

    def test_message_names_found_token(self, parse):
        with pytest.raises(ParserError) as exc_info:
            parse("let x )")
        assert "found ')'" in exc_info.value.message

    def test_error_shows_source_line(self, parse):
        with pytest.raises(ParserError) as exc_info:
            parse("f x\ng )")
        error = exc_info.value
        assert error.location.line == 2
        assert error.source_line == "g )"
        assert str(error).endswith("^")

    def test_deep_nesting_is_a_parser_error(self, parse):
        depth = 2000
        with pytest.raises(ParserError, match="Expression nested too deeply") as exc_info:
            parse("(" * depth + "x" + ")" * depth)
        assert exc_info.value.location is not None

    def test_moderate_nesting_parses(self, parse):
        assert parse("(" * 50 + "x" + ")" * 50) == sym("x")
        assert parse("{" * 50 + "x" + "}" * 50) is not None


class TestParserLiteralEquality:
    """Literals of different types are different nodes."""

    def test_integer_and_decimal_differ(self, parse):
        assert parse("1") != parse("1.0")
        assert Literal(1) != Literal(1.0)

    def test_equal_literals_hash_alike(self):
        assert Literal(2.5) == Literal(2.5)
        assert hash(Literal("a")) == hash(Literal("a"))
