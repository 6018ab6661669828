"""
Compiler configuration.

Parses the [complexpr] section of a TOML file (e.g. ``complexpr.toml`` or
``pyproject.toml``) into a typed configuration model.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from complexpr.errors import ConfigError

DEFAULT_MAX_DEPTH = 100


class CompilerConfig(BaseModel):
    """Settings controlling how expressions are compiled."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        description="Maximum nesting of parentheses, calls and unary signs",
    )
    fold_constants: bool = Field(
        default=True,
        description="Run the constant folding pass after parsing",
    )


def load_config(toml_path: Path) -> CompilerConfig:
    """
    Load compiler configuration from a TOML file.

    Args:
        toml_path: Path to a TOML file with an optional [complexpr] or
            [tool.complexpr] table

    Returns:
        CompilerConfig with parsed values or defaults

    Raises:
        ConfigError: If the file is not valid TOML or holds invalid values
    """
    if not toml_path.exists():
        return CompilerConfig()

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {toml_path}: {e}") from e

    # pyproject.toml keeps tool settings under [tool.complexpr]
    section = data.get("complexpr") or data.get("tool", {}).get("complexpr", {})
    if not section:
        return CompilerConfig()

    try:
        return CompilerConfig(**section)
    except ValidationError as e:
        raise ConfigError(f"Invalid [complexpr] settings in {toml_path}: {e}") from e
