"""Tests for the complexpr evaluator."""

from __future__ import annotations

import cmath
import math

import pytest

from complexpr.evaluator import NAN, evaluate, is_nan
from complexpr.parser import parse_expr
from complexpr.symbols import Cell, closure, function, variable
from complexpr.tree import Constant


def ev(source: str, bindings=()) -> complex:
    return evaluate(parse_expr(source, bindings))


class TestArithmetic:
    """Operators over complex values."""

    def test_basic_operators(self) -> None:
        assert ev("1 + 2 * 3") == 7
        assert ev("(1 + 2) * 3") == 9
        assert ev("7 - 2 - 1") == 4
        assert ev("8 / 4 / 2") == 1

    def test_power_left_associative(self) -> None:
        assert ev("2^3^2") == 64

    def test_negation_before_power(self) -> None:
        assert ev("-2^2") == 4
        assert ev("0-2^2") == -4

    def test_imaginary_literals(self) -> None:
        assert ev("3+2I") == complex(3, 2)
        assert ev("I*I") == complex(-1, 0)
        assert ev("2I*2I") == -4

    def test_comma_returns_right_operand(self) -> None:
        assert ev("1, 2, 3") == 3
        assert ev("(1, 2) + 1") == 3

    def test_euler_identity(self) -> None:
        assert abs(ev("e^(I*pi) + 1")) < 1e-15


class TestBuiltins:
    """Builtin functions evaluate over complex numbers."""

    def test_abs_arg_real_imag_conj(self) -> None:
        assert ev("abs(3+4I)") == 5
        assert ev("arg I") == pytest.approx(math.pi / 2)
        assert ev("real(3+2I)") == 3
        assert ev("imag(3+2I)") == 2
        assert ev("conj(3+2I)") == complex(3, -2)

    def test_sqrt_of_negative(self) -> None:
        assert ev("sqrt(0-4)") == 2j
        # unary minus yields a negative zero imaginary part, below the branch cut
        assert ev("sqrt(-4)") == -2j

    def test_pow_function(self) -> None:
        assert ev("pow(2, 10)") == 1024

    def test_trig_and_hyperbolic(self) -> None:
        for name in ("sin", "cos", "tan", "sinh", "cosh", "tanh", "asin", "acos", "atan", "asinh", "acosh", "atanh", "exp"):
            expected = getattr(cmath, name)(complex(0.5, 0.25))
            assert ev(f"{name}(0.5+0.25I)") == pytest.approx(expected), name

    def test_log_natural(self) -> None:
        assert ev("log e") == pytest.approx(1)
        assert ev("log(0-1)") == pytest.approx(complex(0, math.pi))

    def test_constants(self) -> None:
        assert ev("pi") == complex(math.pi)
        assert ev("inf").real == math.inf


class TestUndefinedResults:
    """Mathematical failures surface as NaN, never as exceptions."""

    def test_log_zero(self) -> None:
        assert is_nan(ev("log 0"))

    def test_division_by_zero(self) -> None:
        assert is_nan(ev("1/0"))

    def test_overflow(self) -> None:
        assert is_nan(ev("exp 1000"))

    def test_nan_propagates(self) -> None:
        assert is_nan(ev("1 + 1/0"))

    def test_binding_domain_error(self) -> None:
        def fails(z: complex) -> complex:
            raise ValueError("outside domain")

        assert is_nan(ev("f 1", [function("f", fails, arity=1)]))

    def test_missing_tree(self) -> None:
        result = evaluate(None)
        assert math.isnan(result.real)
        assert math.isnan(result.imag)
        assert is_nan(NAN)


class TestBindings:
    """Variables, functions and closures."""

    def test_live_variable(self) -> None:
        cell = Cell(2)
        expr = parse_expr("x * 10", [variable("x", cell)])
        assert evaluate(expr) == 20
        cell.value = 3 + 1j
        assert evaluate(expr) == complex(30, 10)

    def test_closure_receives_context_first(self) -> None:
        ctx = {"k": 3}
        scale = closure("scale", lambda c, z: c["k"] * z, ctx, arity=1)
        assert ev("scale 2", [scale]) == 6
        ctx["k"] = 5
        assert ev("scale 2", [scale]) == 10

    def test_closure_arity_zero(self) -> None:
        cell = Cell(7)
        read = closure("read", lambda c: c.value, cell, arity=0)
        assert ev("read() + 1", [read]) == 8

    def test_six_arguments_in_order(self) -> None:
        f6 = function("f6", lambda a, b, c, d, e, f: a - b + c * d - e / f, arity=6)
        assert ev("f6(1, 2, 3, 4, 5, 5)", [f6]) == 1 - 2 + 12 - 1

    def test_real_results_coerced_to_complex(self) -> None:
        result = ev("f 1", [function("f", lambda z: 2, arity=1)])
        assert isinstance(result, complex)
        assert result == 2

    def test_left_to_right_order(self) -> None:
        calls: list[complex] = []

        def record(z: complex) -> complex:
            calls.append(z)
            return z

        rec = function("rec", record, arity=1)
        ev("rec 1 + rec 2 * pow(rec 3, rec 4)", [rec])
        assert calls == [1, 2, 3, 4]

    def test_variable_read_between_siblings(self) -> None:
        cell = Cell(1)

        def bump(z: complex) -> complex:
            cell.value += 1
            return z

        bindings = [variable("x", cell), function("bump", bump, arity=1)]
        # x is read after bump has run
        assert ev("bump 0, x", bindings) == 2


class TestDeepTrees:
    """Evaluation does not depend on the interpreter's recursion limit."""

    def test_long_chain(self) -> None:
        cell = Cell(1)
        expr = parse_expr("+".join(["x"] * 5000), [variable("x", cell)])
        assert evaluate(expr) == 5000

    def test_constant_leaf(self) -> None:
        assert evaluate(Constant(value=3j)) == 3j
