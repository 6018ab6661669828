"""Shared pytest fixtures for complexpr tests."""

import pytest

from complexpr.symbols import Cell, Symbol, variable


@pytest.fixture
def x_cell() -> Cell:
    """Return storage for a variable named x, initially 2."""
    return Cell(2)


@pytest.fixture
def x_binding(x_cell: Cell) -> list[Symbol]:
    """Return bindings exposing ``x_cell`` as ``x``."""
    return [variable("x", x_cell)]
