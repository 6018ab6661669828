"""
complexpr command line interface.

Commands:
- eval: compile and evaluate an expression, printing the result
- tree: print the compiled expression tree
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from complexpr._version import get_version
from complexpr.compiler import CompiledExpression, compile_expr
from complexpr.config import CompilerConfig, load_config
from complexpr.errors import CompileError, ConfigError, ExpressionSyntaxError
from complexpr.formatting import dump_tree, format_complex
from complexpr.symbols import Cell, Symbol, variable

app = typer.Typer(
    help="Compile and evaluate arithmetic expressions over complex numbers.",
    no_args_is_help=True,
)

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

DEFAULT_CONFIG = Path("complexpr.toml")


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"complexpr {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """complexpr - complex-number expression compiler."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )


def _load_config(config_path: Path | None) -> CompilerConfig:
    try:
        return load_config(config_path or DEFAULT_CONFIG)
    except ConfigError as e:
        err_console.print(f"[red]Config error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(code=2) from e


def _parse_bindings(specs: list[str] | None) -> list[Symbol]:
    """Turn ``name=value`` options into variable bindings.

    Values are themselves expressions without bindings, e.g. ``z=1-2I``.
    """
    bindings: list[Symbol] = []
    for spec in specs or []:
        name, sep, value_src = spec.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected name=value, got {spec!r}", param_hint="--var")
        try:
            with compile_expr(value_src) as value_expr:
                value = value_expr.evaluate()
        except CompileError as e:
            raise typer.BadParameter(f"Invalid value for {name.strip()}: {e.message}") from e
        try:
            bindings.append(variable(name.strip(), Cell(value)))
        except ValueError as e:
            raise typer.BadParameter(f"Invalid variable name {name.strip()!r}") from e
    return bindings


def _compile(expression: str, bindings: list[Symbol], config: CompilerConfig) -> CompiledExpression:
    try:
        return compile_expr(expression, bindings, config=config)
    except ExpressionSyntaxError as e:
        err_console.print(f"Syntax error at offset {e.offset}: {e.message}", markup=False, highlight=False)
        if e.context:
            err_console.print(e.context.format(), markup=False, highlight=False)
        raise typer.Exit(code=1) from e
    except CompileError as e:
        err_console.print(f"Compile error: {e.message}", markup=False, highlight=False)
        raise typer.Exit(code=1) from e


@app.command("eval")
def eval_command(
    expression: str = typer.Argument(..., help="Expression, e.g. 'e^(I*pi)+1'"),
    var: list[str] | None = typer.Option(
        None, "--var", "-x", help="Bind a variable: name=value (repeatable)"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="TOML file with a [complexpr] table"
    ),
) -> None:
    """Evaluate an expression and print the result."""
    config = _load_config(config_path)
    bindings = _parse_bindings(var)
    with _compile(expression, bindings, config) as compiled:
        console.print(format_complex(compiled.evaluate()), markup=False, highlight=False)


@app.command("tree")
def tree_command(
    expression: str = typer.Argument(..., help="Expression to compile"),
    var: list[str] | None = typer.Option(
        None, "--var", "-x", help="Bind a variable: name=value (repeatable)"
    ),
    no_fold: bool = typer.Option(False, "--no-fold", help="Skip constant folding"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="TOML file with a [complexpr] table"
    ),
) -> None:
    """Print the compiled expression tree."""
    config = _load_config(config_path)
    if no_fold:
        config = config.model_copy(update={"fold_constants": False})
    bindings = _parse_bindings(var)
    with _compile(expression, bindings, config) as compiled:
        console.print(dump_tree(compiled), markup=False, highlight=False)
