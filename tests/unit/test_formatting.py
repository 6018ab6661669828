"""Tests for value and tree rendering."""

from __future__ import annotations

from complexpr.compiler import compile_expr
from complexpr.config import CompilerConfig
from complexpr.formatting import dump_tree, format_complex
from complexpr.parser import parse_expr
from complexpr.symbols import Cell, closure, variable


class TestFormatComplex:
    def test_real_only(self) -> None:
        assert format_complex(complex(3, 0)) == "3.000000"

    def test_negative_zero_imaginary_is_real(self) -> None:
        assert format_complex(complex(-4, -0.0)) == "-4.000000"

    def test_positive_imaginary(self) -> None:
        assert format_complex(complex(3, 2)) == "3.000000+2.000000I"

    def test_negative_imaginary(self) -> None:
        assert format_complex(complex(3, -2)) == "3.000000-2.000000I"

    def test_nan(self) -> None:
        assert format_complex(complex(float("nan"), float("nan"))) == "nan+nanI"


class TestDumpTree:
    """One node per line, indented one space per level."""

    def test_bound_variable_tree(self, x_binding) -> None:
        expr = compile_expr("x*2+1", x_binding)
        assert dump_tree(expr) == "f2 +\n f2 *\n  bound x\n  2.000000\n 1.000000"

    def test_unfolded_tree(self) -> None:
        expr = compile_expr("-pi", config=CompilerConfig(fold_constants=False))
        assert dump_tree(expr) == "f1 neg\n f0 pi"

    def test_closure_label(self) -> None:
        tree = parse_expr("c(1, 2)", [closure("c", lambda ctx, a, b: a, None, arity=2)])
        assert dump_tree(tree).splitlines()[0] == "c2 c"

    def test_variable_leaf(self) -> None:
        assert dump_tree(parse_expr("y", [variable("y", Cell())])) == "bound y"

    def test_missing_or_released(self) -> None:
        assert dump_tree(None) == ""
        expr = compile_expr("1")
        expr.release()
        assert dump_tree(expr) == ""
