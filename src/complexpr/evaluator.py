"""
Expression evaluator for complexpr.

Walks a compiled tree depth first, children strictly left to right, and
applies each node's native callable to the evaluated children. Variable
references read their cell at the moment they are visited, so the same
tree observes any change the caller makes to bound storage between calls.

The walk uses an explicit work stack; tree depth is bounded by memory, not
by the interpreter's recursion limit. Does NOT use Python's eval().
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from complexpr.tree import Closure, Constant, Expr, Function, VariableRef

logger = logging.getLogger(__name__)

NAN = complex(math.nan, math.nan)


def is_nan(value: complex) -> bool:
    """True if either component is not-a-number."""
    return math.isnan(value.real) or math.isnan(value.imag)


def apply_node(node: Function | Closure, args: Sequence[complex]) -> complex:
    """Invoke a node's callable on already evaluated arguments.

    Mathematical failures raised by the callable (domain errors, division
    by zero, overflow) are reported as a not-a-number result instead of an
    exception.
    """
    try:
        if isinstance(node, Closure):
            result = node.fn(node.context, *args)
        else:
            result = node.fn(*args)
    except (ArithmeticError, ValueError) as e:
        logger.debug("%s%s is undefined: %s", node.name, tuple(args), e)
        return NAN
    return complex(result)


def evaluate(expr: Expr | None) -> complex:
    """Evaluate an expression tree to a complex number.

    Args:
        expr: Expression tree, or None.

    Returns:
        The computed value; ``NAN`` (both components not-a-number) for a
        missing tree.
    """
    if expr is None:
        return NAN

    stack: list[tuple[Expr, bool]] = [(expr, False)]
    values: list[complex] = []

    while stack:
        node, expanded = stack.pop()

        if isinstance(node, Constant):
            values.append(node.value)
            continue

        if isinstance(node, VariableRef):
            values.append(complex(node.cell.value))
            continue

        if not expanded:
            # Revisit after the children; push them reversed so the
            # leftmost child is evaluated first.
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.args))
            continue

        if node.arity:
            args = values[-node.arity :]
            del values[-node.arity :]
        else:
            args = []
        values.append(apply_node(node, args))

    return values[0]
