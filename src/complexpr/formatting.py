"""
Human-readable rendering of complex values and expression trees.
"""

from __future__ import annotations

from complexpr.compiler import CompiledExpression
from complexpr.tree import Closure, Constant, Expr, Function, VariableRef, walk


def format_complex(value: complex) -> str:
    """Render ``value`` as "re" when purely real, else "re+imI" / "re-imI"."""
    if value.imag == 0:
        return f"{value.real:f}"
    sign = "-" if value.imag < 0 else "+"
    return f"{value.real:f}{sign}{abs(value.imag):f}I"


def _label(node: Expr) -> str:
    if isinstance(node, Constant):
        return format_complex(node.value)
    if isinstance(node, VariableRef):
        return f"bound {node.name}"
    if isinstance(node, Closure):
        return f"c{node.arity} {node.name}"
    if isinstance(node, Function):
        return f"f{node.arity} {node.name}"
    raise TypeError(f"Unknown expression type: {type(node).__name__}")


def dump_tree(expr: Expr | CompiledExpression | None) -> str:
    """Indented trace of the tree, one node per line, one space per level.

    Accepts a bare tree or a compiled handle; a missing or released handle
    renders as an empty string.

    Example for ``x*2+1`` with ``x`` bound::

        f2 +
         f2 *
          bound x
          2.000000
         1.000000
    """
    if isinstance(expr, CompiledExpression):
        expr = expr.root
    if expr is None:
        return ""
    return "\n".join(f"{' ' * depth}{_label(node)}" for node, depth in walk(expr))
