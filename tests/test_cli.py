"""Tests for the command-line interface."""

import pytest
from click.testing import CliRunner

from cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.mark.parametrize("keys,expected", [
    ("7+3=", "10"),
    ("5÷0=", "Error"),
    ("1..5", "1.5"),
    ("1÷3=", "0.33333333"),
    ("3-8=⌫%", "0"),
])
def test_eval(runner, keys, expected):
    result = runner.invoke(cli, ["eval", keys])
    assert result.exit_code == 0
    assert result.output.strip() == expected


def test_eval_raw(runner):
    result = runner.invoke(cli, ["eval", "--raw", "1÷4="])
    assert result.exit_code == 0
    assert result.output.strip() == "0.25"


def test_eval_unknown_key(runner):
    result = runner.invoke(cli, ["eval", "2^8"])
    assert result.exit_code == 1


def test_list_apps(runner):
    result = runner.invoke(cli, ["list-apps"])
    assert result.exit_code == 0
    assert "calculator" in result.output


def test_info(runner):
    result = runner.invoke(cli, ["info", "calculator"])
    assert result.exit_code == 0
    assert "Application: calculator" in result.output
    assert "q: Quit" in result.output


def test_unknown_app(runner):
    assert runner.invoke(cli, ["info", "spreadsheet"]).exit_code == 1
    assert runner.invoke(cli, ["run", "spreadsheet"]).exit_code == 1
