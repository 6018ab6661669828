"""
Tokenizer for complexpr expressions.

Pull based: each call to ``Tokenizer.next_token`` scans exactly one token
and advances the cursor. Identifiers are classified against the symbol
table as they are scanned.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from enum import StrEnum, auto

from complexpr.symbols import Symbol, SymbolKind, resolve
from complexpr.tree import BinaryOp


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals
    NUMBER_REAL = auto()
    NUMBER_IMAG = auto()

    # Resolved identifiers
    VARIABLE = auto()
    FUNCTION = auto()
    CLOSURE = auto()

    # Operators and punctuation
    INFIX = auto()
    OPEN = auto()
    CLOSE = auto()
    SEP = auto()

    END = auto()
    ERROR = auto()


class Token:
    """A single token; ``end`` is the cursor position just past it."""

    __slots__ = ("kind", "pos", "end", "value", "symbol", "op")

    def __init__(
        self,
        kind: TokenKind,
        pos: int,
        end: int,
        value: float = 0.0,
        symbol: Symbol | None = None,
        op: BinaryOp | None = None,
    ) -> None:
        self.kind = kind
        self.pos = pos
        self.end = end
        self.value = value
        self.symbol = symbol
        self.op = op

    def __repr__(self) -> str:
        return f"Token({self.kind}, pos={self.pos}, end={self.end})"


# Decimal literal with optional exponent; a lone "." does not match
_NUMBER_RE = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_NUMBER_START = "0123456789."
_IDENT_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*")
_WHITESPACE = " \t\n\r"

_INFIX: dict[str, BinaryOp] = {
    "+": BinaryOp.ADD,
    "-": BinaryOp.SUB,
    "*": BinaryOp.MUL,
    "/": BinaryOp.DIV,
    "^": BinaryOp.POW,
}

_PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.OPEN,
    ")": TokenKind.CLOSE,
    ",": TokenKind.SEP,
}

_SYMBOL_TOKENS: dict[SymbolKind, TokenKind] = {
    SymbolKind.VARIABLE: TokenKind.VARIABLE,
    SymbolKind.FUNCTION: TokenKind.FUNCTION,
    SymbolKind.CLOSURE: TokenKind.CLOSURE,
}


class Tokenizer:
    """Scan tokens from ``source`` one at a time."""

    def __init__(self, source: str, bindings: Sequence[Symbol] = ()) -> None:
        self.source = source
        self.bindings = bindings
        self.cursor = 0

    def next_token(self) -> Token:
        source = self.source
        n = len(source)
        i = self.cursor

        while i < n and source[i] in _WHITESPACE:
            i += 1

        if i >= n:
            self.cursor = n
            return Token(TokenKind.END, n, n)

        c = source[i]

        if c in _NUMBER_START:
            m = _NUMBER_RE.match(source, i)
            if m is None:
                self.cursor = i + 1
                return Token(TokenKind.ERROR, i, i + 1)
            end = m.end()
            value = float(m.group(0))
            if end < n and source[end] == "I":
                self.cursor = end + 1
                return Token(TokenKind.NUMBER_IMAG, i, end + 1, value=value)
            self.cursor = end
            return Token(TokenKind.NUMBER_REAL, i, end, value=value)

        m = _IDENT_RE.match(source, i)
        if m is not None:
            end = m.end()
            self.cursor = end
            symbol = resolve(m.group(0), self.bindings)
            if symbol is None:
                return Token(TokenKind.ERROR, i, end)
            return Token(_SYMBOL_TOKENS[symbol.kind], i, end, symbol=symbol)

        self.cursor = i + 1
        if c in _INFIX:
            return Token(TokenKind.INFIX, i, i + 1, op=_INFIX[c])
        if c in _PUNCTUATION:
            return Token(_PUNCTUATION[c], i, i + 1)
        return Token(TokenKind.ERROR, i, i + 1)

    def __iter__(self):
        """Yield tokens up to and including END or the first ERROR."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.kind in (TokenKind.END, TokenKind.ERROR):
                return


def tokenize(source: str, bindings: Sequence[Symbol] = ()) -> list[Token]:
    """Tokenize a whole expression string into a list of tokens."""
    return list(Tokenizer(source, bindings))
