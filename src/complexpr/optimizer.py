"""
Constant folding for complexpr trees.

A single post-order pass: children are folded first, then a node becomes a
Constant if it is pure and all of its children are Constants. Variable
references and impure functions or closures are never folded, though their
children still are.
"""

from __future__ import annotations

from complexpr.evaluator import apply_node
from complexpr.tree import Constant, Expr, is_leaf


def fold_constants(expr: Expr) -> Expr:
    """Return ``expr`` with every pure, fully constant subtree folded.

    Nodes are immutable, so folded subtrees are rebuilt; untouched subtrees
    are shared with the input tree.
    """
    stack: list[tuple[Expr, bool]] = [(expr, False)]
    results: list[Expr] = []

    while stack:
        node, expanded = stack.pop()

        if is_leaf(node):
            results.append(node)
            continue

        if not expanded:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.args))
            continue

        arity = node.arity
        args = tuple(results[len(results) - arity :])
        del results[len(results) - arity :]

        if node.pure and all(isinstance(a, Constant) for a in args):
            results.append(Constant(value=apply_node(node, [a.value for a in args])))
        elif any(new is not old for new, old in zip(args, node.args)):
            results.append(node.model_copy(update={"args": args}))
        else:
            results.append(node)

    return results[0]
