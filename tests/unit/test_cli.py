"""Tests for CLI commands."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from complexpr.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


class TestEvalCommand:
    def test_real_result(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "1+2*3"])
        assert result.exit_code == 0
        assert result.output.strip() == "7.000000"

    def test_complex_result(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "3+2I"])
        assert result.exit_code == 0
        assert "3.000000+2.000000I" in result.output

    def test_variables(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "x*y", "--var", "x=2", "-x", "y=1+I"])
        assert result.exit_code == 0
        assert "2.000000+2.000000I" in result.output

    def test_syntax_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "2+2 3"])
        assert result.exit_code == 1
        assert "Syntax error at offset 5" in result.output
        assert "2+2 3" in result.output

    def test_bad_variable_spec(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "x", "--var", "x"])
        assert result.exit_code == 2

    def test_bad_variable_value(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "x", "--var", "x=1+"])
        assert result.exit_code == 2

    def test_undefined_result_prints_nan(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "log 0"])
        assert result.exit_code == 0
        assert "nan" in result.output


class TestTreeCommand:
    def test_folded(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["tree", "2+3"])
        assert result.exit_code == 0
        assert result.output.strip() == "5.000000"

    def test_no_fold(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["tree", "2+3", "--no-fold"])
        assert result.exit_code == 0
        assert result.output.splitlines()[:3] == ["f2 +", " 2.000000", " 3.000000"]

    def test_with_variable(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["tree", "x*2+1", "--var", "x=4"])
        assert result.exit_code == 0
        assert "  bound x" in result.output


class TestConfigOption:
    def test_max_depth_from_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "complexpr.toml"
        config.write_text("[complexpr]\nmax_depth = 2\n")
        ok = cli_runner.invoke(app, ["eval", "(1)", "--config", str(config)])
        assert ok.exit_code == 0
        deep = cli_runner.invoke(app, ["eval", "((1))", "--config", str(config)])
        assert deep.exit_code == 1

    def test_fold_setting_from_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "complexpr.toml"
        config.write_text("[complexpr]\nfold_constants = false\n")
        result = cli_runner.invoke(app, ["tree", "2+3", "-c", str(config)])
        assert result.exit_code == 0
        assert result.output.startswith("f2 +")

    def test_invalid_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "complexpr.toml"
        config.write_text("[complexpr]\nmax_depth = 0\n")
        result = cli_runner.invoke(app, ["eval", "1", "--config", str(config)])
        assert result.exit_code == 2
        assert "Config error" in result.output


class TestVersion:
    def test_version_flag(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("complexpr ")
