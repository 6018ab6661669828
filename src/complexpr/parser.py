"""
Recursive descent parser for complexpr expressions.

Grammar (precedence low to high):
    list    → expr ("," expr)*
    expr    → term (("+" | "-") term)*
    term    → factor (("*" | "/") factor)*
    factor  → power ("^" power)*
    power   → ("+" | "-")* base
    base    → NUMBER_REAL | NUMBER_IMAG | VARIABLE
            | function-0 ["(" ")"]
            | function-1 power
            | function-N "(" expr ("," expr)* ")"
            | "(" list ")"

Notes:
    "," is a binary operator returning its right operand.
    "^" is left associative: 2^3^2 == (2^3)^2.
    Signs bind tighter than "^": -2^2 == (-2)^2.
    A one-argument function takes a power, not a parenthesised list, so
    "sin x^2" is (sin x)^2.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from complexpr.config import DEFAULT_MAX_DEPTH
from complexpr.errors import ExpressionDepthError, ExpressionSyntaxError
from complexpr.symbols import Symbol, SymbolKind
from complexpr.tokenizer import Token, Tokenizer, TokenKind
from complexpr.tree import (
    BinaryOp,
    Closure,
    Constant,
    Expr,
    Function,
    VariableRef,
    binary,
    negate,
)


class _Parser:
    """Recursive descent parser over a pull-based tokenizer."""

    def __init__(self, tokenizer: Tokenizer, max_depth: int) -> None:
        self.tokenizer = tokenizer
        self.max_depth = max_depth
        self.depth = 0
        self.current = tokenizer.next_token()

    def advance(self) -> Token:
        tok = self.current
        self.current = self.tokenizer.next_token()
        return tok

    def at_infix(self, *ops: BinaryOp) -> bool:
        return self.current.kind == TokenKind.INFIX and self.current.op in ops

    def error(self, message: str) -> ExpressionSyntaxError:
        """Build a syntax error located just past the lookahead token."""
        return ExpressionSyntaxError(message, self.tokenizer.cursor, self.tokenizer.source)

    def describe(self, tok: Token) -> str:
        if tok.kind == TokenKind.END:
            return "end of expression"
        return repr(self.tokenizer.source[tok.pos : tok.end])

    def expect_close(self, context: str) -> None:
        if self.current.kind != TokenKind.CLOSE:
            raise self.error(f"Expected ')' {context}, got {self.describe(self.current)}")
        self.advance()

    @contextmanager
    def nested(self) -> Iterator[None]:
        self.depth += 1
        if self.depth > self.max_depth:
            raise ExpressionDepthError(
                f"Expression nested deeper than {self.max_depth} levels",
                self.tokenizer.cursor,
                self.tokenizer.source,
            )
        try:
            yield
        finally:
            self.depth -= 1

    # -- Grammar rules --

    def parse_list(self) -> Expr:
        """expr ("," expr)*"""
        left = self.parse_expr()
        while self.current.kind == TokenKind.SEP:
            self.advance()
            right = self.parse_expr()
            left = binary(BinaryOp.COMMA, left, right)
        return left

    def parse_expr(self) -> Expr:
        """term (('+' | '-') term)*"""
        left = self.parse_term()
        while self.at_infix(BinaryOp.ADD, BinaryOp.SUB):
            op = self.advance().op
            right = self.parse_term()
            left = binary(op, left, right)
        return left

    def parse_term(self) -> Expr:
        """factor (('*' | '/') factor)*"""
        left = self.parse_factor()
        while self.at_infix(BinaryOp.MUL, BinaryOp.DIV):
            op = self.advance().op
            right = self.parse_factor()
            left = binary(op, left, right)
        return left

    def parse_factor(self) -> Expr:
        """power ('^' power)*"""
        left = self.parse_power()
        while self.at_infix(BinaryOp.POW):
            self.advance()
            right = self.parse_power()
            left = binary(BinaryOp.POW, left, right)
        return left

    def parse_power(self) -> Expr:
        """('+' | '-')* base"""
        with self.nested():
            negative = False
            while self.at_infix(BinaryOp.ADD, BinaryOp.SUB):
                if self.advance().op == BinaryOp.SUB:
                    negative = not negative
            operand = self.parse_base()
            return negate(operand) if negative else operand

    def parse_base(self) -> Expr:
        """number | variable | call | '(' list ')'"""
        tok = self.current

        if tok.kind == TokenKind.NUMBER_REAL:
            self.advance()
            return Constant(value=complex(tok.value, 0.0))

        if tok.kind == TokenKind.NUMBER_IMAG:
            self.advance()
            return Constant(value=complex(0.0, tok.value))

        if tok.kind == TokenKind.VARIABLE:
            self.advance()
            return VariableRef(name=tok.symbol.name, cell=tok.symbol.target)

        if tok.kind in (TokenKind.FUNCTION, TokenKind.CLOSURE):
            return self._parse_call(tok.symbol)

        if tok.kind == TokenKind.OPEN:
            self.advance()
            expr = self.parse_list()
            self.expect_close("to close '('")
            return expr

        if tok.kind == TokenKind.ERROR:
            raise self.error(f"Unknown symbol {self.describe(tok)}")

        raise self.error(f"Unexpected {self.describe(tok)}")

    def _parse_call(self, symbol: Symbol) -> Expr:
        """Parse the arguments of a function or closure by its arity."""
        self.advance()

        if symbol.arity == 0:
            if self.current.kind == TokenKind.OPEN:
                self.advance()
                self.expect_close(f"after {symbol.name}(")
            return _make_call(symbol, ())

        if symbol.arity == 1:
            return _make_call(symbol, (self.parse_power(),))

        if self.current.kind != TokenKind.OPEN:
            raise self.error(
                f"Expected '(' after {symbol.name}, got {self.describe(self.current)}"
            )

        args: list[Expr] = []
        while True:
            self.advance()  # '(' or ','
            args.append(self.parse_expr())
            if self.current.kind != TokenKind.SEP or len(args) == symbol.arity:
                break

        if self.current.kind != TokenKind.CLOSE or len(args) != symbol.arity:
            raise self.error(
                f"{symbol.name}() takes exactly {symbol.arity} arguments"
            )
        self.advance()
        return _make_call(symbol, tuple(args))


def _make_call(symbol: Symbol, args: tuple[Expr, ...]) -> Expr:
    if symbol.kind == SymbolKind.CLOSURE:
        return Closure(
            name=symbol.name,
            fn=symbol.target,
            context=symbol.context,
            arity=symbol.arity,
            pure=symbol.pure,
            args=args,
        )
    return Function(
        name=symbol.name,
        fn=symbol.target,
        arity=symbol.arity,
        pure=symbol.pure,
        args=args,
    )


def parse_expr(
    source: str,
    bindings: Sequence[Symbol] = (),
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Expr:
    """Parse an expression string into an unoptimized tree.

    Args:
        source: Expression string (e.g., "e^(I*pi) + 1")
        bindings: Caller symbols, checked before builtins
        max_depth: Maximum nesting depth accepted

    Returns:
        Parsed expression tree.

    Raises:
        ExpressionSyntaxError: If the expression is invalid, including any
            input left over after a complete expression.
    """
    parser = _Parser(Tokenizer(source, bindings), max_depth)
    try:
        expr = parser.parse_list()
    except RecursionError as e:
        # max_depth set above what the interpreter stack can hold
        raise ExpressionDepthError(
            "Expression nested too deeply", parser.tokenizer.cursor, source
        ) from e

    # Ensure all input consumed
    if parser.current.kind != TokenKind.END:
        raise parser.error(f"Unexpected {parser.describe(parser.current)} after expression")

    return expr
