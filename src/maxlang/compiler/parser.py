"""
maxlang Parser.

A recursive descent parser that pulls tokens from a TokenSource and
builds an Abstract Syntax Tree. The expression grammar has three
precedence levels below the top-level expression:

    expression   := assignment | call
    call         := infix infix*             (two or more => Call)
    infix        := postfix ("`" postfix+)*  (one or more steps => InfixCall)
    postfix      := primary "!"*
    primary      := literal | fn | {block} | (block) | SYMBOL

Juxtaposition binds loosest, then backtick chains, then ``!``.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, TextIO, Union

from maxlang.compiler.ast_nodes import (
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
from maxlang.compiler.source import TokenSource
from maxlang.compiler.tokens import (
    EXPRESSION_START,
    PRIMARY_START,
    Token,
    TokenType,
    describe,
)
from maxlang.utils.errors import ParserError, SourceLocation

logger = logging.getLogger(__name__)

LITERAL_TOKENS = frozenset({TokenType.INTEGER, TokenType.DECIMAL, TokenType.STRING})


class Parser:
    """
    Recursive descent parser for maxlang.

    Parses a single expression (the whole program) from a token source.
    The first error aborts the parse; there is no recovery.

    Usage:
        parser = Parser(TokenSource.from_string(source))
        ast = parser.parse()
    """

    def __init__(self, tokens: TokenSource) -> None:
        """
        Initialize the parser.

        Args:
            tokens: Token source to pull from; owned by this parse
        """
        self.tokens = tokens

    @property
    def _current(self) -> Token:
        """Get the current (not yet consumed) token."""
        return self.tokens.peek()

    def _check(self, *types: TokenType) -> bool:
        """Check if the current token is one of the given types."""
        return self._current.type in types

    def _advance(self) -> Token:
        """Consume and return the current token."""
        return self.tokens.next_token()

    def _match(self, *types: TokenType) -> bool:
        """Consume current token if it matches one of the given types."""
        if self._check(*types):
            self._advance()
            return True
        return False

    def _expect(self, token_type: TokenType, message: str) -> Token:
        """Consume current token if it matches, else raise error."""
        if self._check(token_type):
            return self._advance()
        raise self._error(message, expected=(token_type,))

    def _error(self, message: str, expected: Iterable[TokenType] = ()) -> ParserError:
        """Create a parser error pointing at the current token."""
        token = self._current
        names = tuple(sorted(describe(t) for t in expected))
        if names:
            message = f"{message}; found {token.describe()}, expected {_one_of(names)}"
        else:
            message = f"{message}; found {token.describe()}"
        return ParserError(
            message,
            token.location,
            self.tokens.line_text(token.location.line),
            found=token,
            expected=names,
        )

    def _error_unclosed_delimiter(
        self, delimiter: str, open_loc: SourceLocation, closer: TokenType
    ) -> ParserError:
        """Create an error for an unclosed delimiter."""
        token = self._current
        return ParserError(
            f"Unclosed delimiter '{delimiter}' opened at {open_loc}",
            token.location,
            self.tokens.line_text(token.location.line),
            found=token,
            expected=(describe(TokenType.SEMICOLON), describe(closer)),
        )

    # -------------------------------------------------------------------------
    # Program Parsing
    # -------------------------------------------------------------------------

    def parse(self) -> Expression:
        """
        Parse the entire program.

        Returns:
            The root expression node.
        """
        if not self._check(*EXPRESSION_START):
            raise self._error("Expected an expression", expected=EXPRESSION_START)

        try:
            program = self._parse_expression()
        except RecursionError:
            raise self._error("Expression nested too deeply") from None

        if not self._check(TokenType.EOF):
            raise self._error("Unexpected token after expression", expected=(TokenType.EOF,))

        logger.debug("parsed %s from %s", type(program).__name__, self.tokens.filename or "<input>")
        return program

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def _parse_expression(self) -> Expression:
        """Parse an assignment or a call-level expression."""
        if self._check(TokenType.LET, TokenType.LETREC):
            return self._parse_assignment()
        return self._parse_call()

    def _parse_assignment(self) -> Assignment:
        """
        Parse a binding.

        Handles:
            let name expression
            letrec name expression
        """
        keyword = self._advance()
        name = self._expect(TokenType.SYMBOL, f"Expected a name after {describe(keyword.type)}")
        if not self._check(*EXPRESSION_START):
            raise self._error(f"Expected a value for '{name.value}'", expected=EXPRESSION_START)
        value = self._parse_expression()
        return Assignment(
            recursive=keyword.type == TokenType.LETREC,
            name=name.value,
            value=value,
            location=keyword.location,
        )

    def _parse_call(self) -> Expression:
        """
        Parse juxtaposition: ``f a b``.

        Operands are collected while the next token can start one.
        """
        callee = self._parse_infix()
        arguments: list[Expression] = []
        while self._check(*PRIMARY_START):
            arguments.append(self._parse_infix())

        if not arguments:
            return callee
        return Call(callee=callee, arguments=tuple(arguments), location=callee.location)

    def _parse_infix(self) -> Expression:
        """
        Parse a backtick chain: ``seed `op extra... `op extra...``.

        Each step takes the operator and then every following operand up
        to the next backtick.
        """
        seed = self._parse_postfix()
        if not self._check(TokenType.BACKTICK):
            return seed

        steps: list[InfixStep] = []
        while self._match(TokenType.BACKTICK):
            if not self._check(*PRIMARY_START):
                raise self._error("Expected an operator after '`'", expected=PRIMARY_START)
            operator = self._parse_postfix()
            extra_args: list[Expression] = []
            while self._check(*PRIMARY_START):
                extra_args.append(self._parse_postfix())
            steps.append(InfixStep(operator=operator, extra_args=tuple(extra_args)))

        # (f `g) `h continues the grouped chain
        if isinstance(seed, InfixCall):
            return InfixCall(seed=seed.seed, chain=seed.chain + tuple(steps), location=seed.location)
        return InfixCall(seed=seed, chain=tuple(steps), location=seed.location)

    def _parse_postfix(self) -> Expression:
        """Parse a primary followed by any number of ``!``."""
        expr = self._parse_primary()
        while self._match(TokenType.BANG):
            expr = NoArgInvoke(target=expr, location=expr.location)
        return expr

    def _parse_primary(self) -> Expression:
        """Parse a primary expression (literals, symbols, functions, blocks)."""
        token = self._current

        if token.type in LITERAL_TOKENS:
            self._advance()
            return Literal(value=token.value, location=token.location)

        if token.type == TokenType.SYMBOL:
            self._advance()
            return SymbolRef(name=token.value, location=token.location)

        if token.type == TokenType.FN:
            return self._parse_function_def()

        if token.type == TokenType.LBRACE:
            return self._parse_block(scoped=True)

        if token.type == TokenType.LPAREN:
            return self._parse_block(scoped=False)

        raise self._error("Expected an operand", expected=PRIMARY_START)

    def _parse_function_def(self) -> FunctionDef:
        """
        Parse a function definition.

        Handles:
            fn { body }
            fn (a, b) body
            fn name (a, b) { body }

        A symbol right after ``fn`` is the name and a '(' right after
        ``fn`` or the name is the parameter list. A brace body is one
        block; any other body extends as far as an expression can.
        """
        keyword = self._advance()

        name: Optional[str] = None
        if self._check(TokenType.SYMBOL):
            name = self._advance().value

        parameters: list[str] = []
        if self._match(TokenType.LPAREN):
            parameters = self._parse_parameters()

        if self._check(TokenType.LBRACE):
            body: Expression = self._parse_block(scoped=True)
        elif self._check(*EXPRESSION_START):
            body = self._parse_expression()
        else:
            raise self._error("Expected a function body", expected=EXPRESSION_START)

        return FunctionDef(
            parameters=tuple(parameters),
            body=body,
            name=name,
            location=keyword.location,
        )

    def _parse_parameters(self) -> list[str]:
        """Parse ``a, b, c)`` after the opening parenthesis."""
        parameters: list[str] = []
        if self._match(TokenType.RPAREN):
            return parameters

        while True:
            parameter = self._expect(TokenType.SYMBOL, "Expected a parameter name")
            parameters.append(parameter.value)
            if self._match(TokenType.RPAREN):
                return parameters
            if not self._match(TokenType.COMMA):
                raise self._error(
                    "Expected ',' or ')' in parameter list",
                    expected=(TokenType.COMMA, TokenType.RPAREN),
                )

    def _parse_block(self, scoped: bool) -> Expression:
        """
        Parse a block of statements.

        Handles:
            { stmt; stmt; ... }     scoped
            ( stmt; stmt; ... )     unscoped

        A trailing ';' is allowed. ``(expr)`` with a single non-binding
        statement and no ';' is plain grouping and returns ``expr``.
        """
        open_token = self._advance()
        closer = TokenType.RBRACE if scoped else TokenType.RPAREN

        statements: list[Expression] = []
        separated = False
        if not self._check(closer):
            statements.append(self._parse_statement(closer))
            while self._match(TokenType.SEMICOLON):
                separated = True
                if self._check(closer):
                    break
                statements.append(self._parse_statement(closer))

        if self._check(TokenType.EOF):
            raise self._error_unclosed_delimiter(open_token.lexeme, open_token.location, closer)
        if not self._check(closer):
            raise self._error(
                f"Expected ';' or {describe(closer)} in block",
                expected=(TokenType.SEMICOLON, closer),
            )
        self._advance()

        if (
            not scoped
            and not separated
            and len(statements) == 1
            and not isinstance(statements[0], Assignment)
        ):
            return statements[0]

        return Block(scoped=scoped, statements=tuple(statements), location=open_token.location)

    def _parse_statement(self, closer: TokenType) -> Expression:
        """Parse one block statement (an expression or a binding)."""
        if not self._check(*EXPRESSION_START):
            raise self._error(
                "Expected a statement",
                expected=EXPRESSION_START | {closer},
            )
        return self._parse_expression()


def _one_of(names: tuple[str, ...]) -> str:
    if len(names) == 1:
        return names[0]
    return "one of " + ", ".join(names)


def parse(source: Union[str, TextIO], filename: Optional[str] = None) -> Expression:
    """
    Convenience function to parse source text into an AST.

    Args:
        source: maxlang source text or an open text stream
        filename: Optional filename for error reporting

    Returns:
        The root expression node
    """
    if isinstance(source, str):
        tokens = TokenSource.from_string(source, filename)
    else:
        tokens = TokenSource.open(source, filename)
    return Parser(tokens).parse()
