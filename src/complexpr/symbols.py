"""
Symbol table for complexpr.

Identifiers resolve in two tiers: the caller's bindings are scanned first
(in order, first match wins, so a binding may shadow a builtin), then the
statically sorted builtin table is binary searched.

Usage:
    from complexpr.symbols import Cell, variable, function

    x = Cell(2)
    bindings = [variable("x", x), function("twice", lambda z: 2 * z, arity=1)]
"""

from __future__ import annotations

import cmath
import math
from bisect import bisect_left
from collections.abc import Callable, Sequence
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

MAX_ARITY = 6


class SymbolKind(StrEnum):
    """What an identifier is bound to."""

    VARIABLE = "variable"
    FUNCTION = "function"
    CLOSURE = "closure"


class Cell:
    """Caller-owned complex storage referenced by compiled expressions.

    The compiled tree keeps a reference to the cell, not a copy of its
    value, so assigning ``cell.value`` between evaluations is observed by
    the next evaluation.
    """

    __slots__ = ("value",)

    def __init__(self, value: complex = 0j) -> None:
        self.value = complex(value)

    def __repr__(self) -> str:
        return f"Cell({self.value!r})"


class Symbol(BaseModel):
    """
    A named binding: a variable cell, a native function, or a closure.

    Closures receive ``context`` as their first argument, followed by the
    ``arity`` evaluated operands. ``context`` belongs to the caller; the
    compiled tree only holds a reference to it.
    """

    name: str = Field(pattern=r"^[A-Za-z][A-Za-z0-9_]*$", description="Identifier")
    kind: SymbolKind
    target: Any = Field(description="Cell for variables, callable otherwise")
    arity: int = Field(default=0, ge=0, le=MAX_ARITY)
    pure: bool = Field(default=False, description="Eligible for constant folding")
    context: Any = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def _check_target(self) -> Symbol:
        if self.kind == SymbolKind.VARIABLE:
            if self.arity or self.pure:
                raise ValueError(f"variable {self.name!r} cannot have arity or be pure")
            if not hasattr(self.target, "value"):
                raise ValueError(f"variable {self.name!r} must be bound to a Cell")
        elif not callable(self.target):
            raise ValueError(f"{self.kind} {self.name!r} must be bound to a callable")
        return self


def variable(name: str, cell: Cell) -> Symbol:
    """Bind ``name`` to caller-owned storage."""
    return Symbol(name=name, kind=SymbolKind.VARIABLE, target=cell)


def function(
    name: str, fn: Callable[..., complex], arity: int, pure: bool = False
) -> Symbol:
    """Bind ``name`` to a native function taking ``arity`` complex arguments."""
    return Symbol(name=name, kind=SymbolKind.FUNCTION, target=fn, arity=arity, pure=pure)


def closure(
    name: str, fn: Callable[..., complex], context: Any, arity: int, pure: bool = False
) -> Symbol:
    """Bind ``name`` to ``fn(context, *args)``."""
    return Symbol(
        name=name,
        kind=SymbolKind.CLOSURE,
        target=fn,
        context=context,
        arity=arity,
        pure=pure,
    )


# ---------------------------------------------------------------------------
# Builtins
# ---------------------------------------------------------------------------


def _i() -> complex:
    return 1j


def _e() -> complex:
    return complex(math.e)


def _pi() -> complex:
    return complex(math.pi)


def _inf() -> complex:
    return complex(math.inf)


def _abs(z: complex) -> complex:
    return complex(abs(z))


def _arg(z: complex) -> complex:
    return complex(cmath.phase(z))


def _conj(z: complex) -> complex:
    return z.conjugate()


def _real(z: complex) -> complex:
    return complex(z.real)


def _imag(z: complex) -> complex:
    return complex(z.imag)


def _log(z: complex) -> complex:
    return cmath.log(z)


def _pow(a: complex, b: complex) -> complex:
    return a**b


def _builtin(name: str, fn: Callable[..., complex], arity: int) -> Symbol:
    return Symbol(name=name, kind=SymbolKind.FUNCTION, target=fn, arity=arity, pure=True)


# Must stay sorted by name: lookups use binary search.
_BUILTINS: tuple[Symbol, ...] = (
    _builtin("I", _i, 0),
    _builtin("abs", _abs, 1),
    _builtin("acos", cmath.acos, 1),
    _builtin("acosh", cmath.acosh, 1),
    _builtin("arg", _arg, 1),
    _builtin("asin", cmath.asin, 1),
    _builtin("asinh", cmath.asinh, 1),
    _builtin("atan", cmath.atan, 1),
    _builtin("atanh", cmath.atanh, 1),
    _builtin("conj", _conj, 1),
    _builtin("cos", cmath.cos, 1),
    _builtin("cosh", cmath.cosh, 1),
    _builtin("e", _e, 0),
    _builtin("exp", cmath.exp, 1),
    _builtin("imag", _imag, 1),
    _builtin("inf", _inf, 0),
    _builtin("log", _log, 1),
    _builtin("pi", _pi, 0),
    _builtin("pow", _pow, 2),
    _builtin("real", _real, 1),
    _builtin("sin", cmath.sin, 1),
    _builtin("sinh", cmath.sinh, 1),
    _builtin("sqrt", cmath.sqrt, 1),
    _builtin("tan", cmath.tan, 1),
    _builtin("tanh", cmath.tanh, 1),
)

_BUILTIN_NAMES: tuple[str, ...] = tuple(s.name for s in _BUILTINS)

if list(_BUILTIN_NAMES) != sorted(_BUILTIN_NAMES):
    raise RuntimeError("builtin symbol table is not sorted")


def builtin_names() -> tuple[str, ...]:
    """Names of all builtin symbols, in lookup order."""
    return _BUILTIN_NAMES


def find_builtin(name: str) -> Symbol | None:
    """Binary search the builtin table for an exact name match."""
    idx = bisect_left(_BUILTIN_NAMES, name)
    if idx < len(_BUILTIN_NAMES) and _BUILTIN_NAMES[idx] == name:
        return _BUILTINS[idx]
    return None


def find_binding(name: str, bindings: Sequence[Symbol]) -> Symbol | None:
    """Linear scan of caller bindings; the first exact match wins."""
    for symbol in bindings:
        if symbol.name == name:
            return symbol
    return None


def resolve(name: str, bindings: Sequence[Symbol] = ()) -> Symbol | None:
    """Resolve an identifier against caller bindings, then builtins."""
    symbol = find_binding(name, bindings)
    if symbol is None:
        symbol = find_builtin(name)
    return symbol
