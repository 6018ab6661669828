"""
complexpr - compile and evaluate arithmetic expressions over complex numbers.

Usage:
    from complexpr import Cell, compile_expr, interp, variable

    interp("e^(I*pi) + 1")          # ~0j

    x = Cell(2)
    expr = compile_expr("x^2 + 1", [variable("x", x)])
    expr.evaluate()                  # (5+0j)
"""

from __future__ import annotations

from complexpr._version import get_version
from complexpr.compiler import CompiledExpression, compile_expr, evaluate, interp, release
from complexpr.config import CompilerConfig, load_config
from complexpr.errors import (
    AllocationFailure,
    CompileError,
    ComplexprError,
    ConfigError,
    ExpressionDepthError,
    ExpressionSyntaxError,
)
from complexpr.formatting import dump_tree, format_complex
from complexpr.symbols import Cell, Symbol, SymbolKind, closure, function, variable

__version__ = get_version()

__all__ = [
    "__version__",
    # Compile / evaluate
    "CompiledExpression",
    "compile_expr",
    "evaluate",
    "interp",
    "release",
    # Bindings
    "Cell",
    "Symbol",
    "SymbolKind",
    "variable",
    "function",
    "closure",
    # Configuration
    "CompilerConfig",
    "load_config",
    # Presentation
    "dump_tree",
    "format_complex",
    # Errors
    "ComplexprError",
    "CompileError",
    "ExpressionSyntaxError",
    "ExpressionDepthError",
    "AllocationFailure",
    "ConfigError",
]
