"""
Public compile / evaluate / release entry points.

Usage:
    from complexpr import Cell, compile_expr, variable

    x = Cell(2)
    with compile_expr("x + 1", [variable("x", x)]) as expr:
        expr.evaluate()   # (3+0j)
        x.value = 5
        expr.evaluate()   # (6+0j)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from types import TracebackType

from complexpr.config import CompilerConfig
from complexpr.errors import AllocationFailure, CompileError
from complexpr.evaluator import NAN
from complexpr.evaluator import evaluate as evaluate_tree
from complexpr.optimizer import fold_constants
from complexpr.parser import parse_expr
from complexpr.symbols import Symbol
from complexpr.tree import Expr, node_count

logger = logging.getLogger(__name__)


class CompiledExpression:
    """Handle owning a compiled expression tree.

    Bound cells and closure contexts stay owned by the caller and must
    outlive every evaluation of this handle.
    """

    __slots__ = ("source", "root")

    def __init__(self, source: str, root: Expr) -> None:
        self.source = source
        self.root: Expr | None = root

    @property
    def released(self) -> bool:
        return self.root is None

    def evaluate(self) -> complex:
        """Evaluate the tree; NaN once the handle has been released."""
        return evaluate_tree(self.root)

    def release(self) -> None:
        """Drop the tree. Safe to call more than once."""
        self.root = None

    def __enter__(self) -> CompiledExpression:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "released" if self.released else str(self.root)
        return f"CompiledExpression({self.source!r}, {state})"


def compile_expr(
    expression: str,
    bindings: Sequence[Symbol] = (),
    *,
    config: CompilerConfig | None = None,
) -> CompiledExpression:
    """Compile an expression, resolving identifiers against ``bindings``.

    Args:
        expression: Expression text (e.g., "3+2I", "pow(x, 2)")
        bindings: Caller symbols; scanned in order before the builtins
        config: Compiler settings; defaults apply when omitted

    Returns:
        A compiled handle, constant folded unless disabled in ``config``.

    Raises:
        ExpressionSyntaxError: If the expression is invalid.
        AllocationFailure: If memory runs out while building the tree.
    """
    config = config or CompilerConfig()

    try:
        root = parse_expr(expression, bindings, config.max_depth)
        parsed_nodes = node_count(root)
        if config.fold_constants:
            root = fold_constants(root)
    except MemoryError as e:
        raise AllocationFailure(f"Out of memory compiling {expression!r}") from e

    logger.debug(
        "Compiled %r: %d node(s), %d after folding",
        expression,
        parsed_nodes,
        node_count(root),
    )
    return CompiledExpression(expression, root)


def evaluate(handle: CompiledExpression | None) -> complex:
    """Evaluate a compiled handle; NaN for a missing or released handle."""
    if handle is None:
        return NAN
    return handle.evaluate()


def release(handle: CompiledExpression | None) -> None:
    """Release a compiled handle. No-op for None."""
    if handle is not None:
        handle.release()


def interp(expression: str) -> complex:
    """Compile, evaluate and release an expression with no bindings.

    Returns NaN (both components) if the expression does not compile.
    """
    try:
        compiled = compile_expr(expression)
    except CompileError as e:
        logger.debug("interp(%r) failed: %s", expression, e)
        return NAN

    with compiled:
        return compiled.evaluate()
