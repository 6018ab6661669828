"""
Expression tree types for complexpr.

The tree is a closed set of node types:
- Constant: a folded or literal complex value (leaf)
- VariableRef: a live reference to a caller-owned Cell (leaf)
- Function: a native callable applied to exactly ``arity`` children
- Closure: like Function, but the callable also receives a caller context

Every operator in the grammar (``+ - * / ^ ,`` and unary minus) is
represented as a pure Function node, so evaluation and folding only ever
deal with these four shapes.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from complexpr.symbols import MAX_ARITY

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary infix operators."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"
    COMMA = ","


def _add(a: complex, b: complex) -> complex:
    return a + b


def _sub(a: complex, b: complex) -> complex:
    return a - b


def _mul(a: complex, b: complex) -> complex:
    return a * b


def _div(a: complex, b: complex) -> complex:
    return a / b


def _pow(a: complex, b: complex) -> complex:
    return a**b


def _comma(a: complex, b: complex) -> complex:
    return b


def _negate(a: complex) -> complex:
    return -a


BINARY_FUNCTIONS: dict[BinaryOp, Callable[[complex, complex], complex]] = {
    BinaryOp.ADD: _add,
    BinaryOp.SUB: _sub,
    BinaryOp.MUL: _mul,
    BinaryOp.DIV: _div,
    BinaryOp.POW: _pow,
    BinaryOp.COMMA: _comma,
}

NEGATE = "neg"

_INFIX_NAMES = frozenset(op.value for op in BinaryOp)

# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


def _literal(value: complex) -> str:
    if value.imag == 0:
        return f"{value.real:g}"
    return f"({value.real:g}{value.imag:+g}I)"


class Constant(BaseModel):
    """A literal or folded complex value."""

    value: complex

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return _literal(self.value)


class VariableRef(BaseModel):
    """
    Reference to caller-owned storage.

    The cell is read at every evaluation; it must outlive every evaluation
    of any tree holding this node.
    """

    name: str
    cell: Any = Field(description="Object exposing a mutable ``value``")

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def __str__(self) -> str:
        return self.name


class Function(BaseModel):
    """Native callable applied to ``arity`` children, evaluated left to right."""

    name: str
    fn: Callable[..., complex]
    arity: int = Field(ge=0, le=MAX_ARITY)
    pure: bool = False
    args: tuple[Expr, ...] = ()

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_arity(self) -> Function:
        if len(self.args) != self.arity:
            raise ValueError(
                f"{self.name} takes {self.arity} argument(s), got {len(self.args)}"
            )
        return self

    def __str__(self) -> str:
        return _call_str(self.name, self.args)


class Closure(BaseModel):
    """
    Callable receiving ``context`` followed by its evaluated children.

    ``context`` is owned by the caller and is not a child of this node.
    """

    name: str
    fn: Callable[..., complex]
    context: Any = None
    arity: int = Field(ge=0, le=MAX_ARITY)
    pure: bool = False
    args: tuple[Expr, ...] = ()

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def _check_arity(self) -> Closure:
        if len(self.args) != self.arity:
            raise ValueError(
                f"{self.name} takes {self.arity} argument(s), got {len(self.args)}"
            )
        return self

    def __str__(self) -> str:
        return _call_str(self.name, self.args)


def _call_str(name: str, args: tuple[Expr, ...]) -> str:
    if len(args) == 2 and name in _INFIX_NAMES:
        return f"({args[0]} {name} {args[1]})"
    if name == NEGATE:
        return f"-{args[0]}"
    return f"{name}({', '.join(str(a) for a in args)})"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Constant | VariableRef | Function | Closure

Function.model_rebuild()
Closure.model_rebuild()


# ---------------------------------------------------------------------------
# Construction helpers
# ---------------------------------------------------------------------------


def binary(op: BinaryOp, left: Expr, right: Expr) -> Function:
    """Build a pure two-child node for an infix operator."""
    return Function(name=op.value, fn=BINARY_FUNCTIONS[op], arity=2, pure=True, args=(left, right))


def negate(operand: Expr) -> Function:
    """Build the pure unary minus node."""
    return Function(name=NEGATE, fn=_negate, arity=1, pure=True, args=(operand,))


def is_leaf(expr: Expr) -> bool:
    return isinstance(expr, (Constant, VariableRef))


def walk(expr: Expr) -> Iterator[tuple[Expr, int]]:
    """Yield ``(node, depth)`` pairs in pre-order, children left to right."""
    stack: list[tuple[Expr, int]] = [(expr, 0)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        if not is_leaf(node):
            for child in reversed(node.args):
                stack.append((child, depth + 1))


def node_count(expr: Expr) -> int:
    """Number of nodes in the tree."""
    return sum(1 for _ in walk(expr))
