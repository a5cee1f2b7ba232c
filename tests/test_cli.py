"""
Tests for the messen CLI.
"""

import pytest
from typer.testing import CliRunner

from messen import __version__
from messen.cli import commands
from messen.cli.commands import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("MESSEN_TRANSPORT", raising=False)
    monkeypatch.delenv("MESSEN_APPSTATE_FILE", raising=False)
    monkeypatch.setattr(commands.console, "width", 240)
    return tmp_path


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_status_without_config():
    result = runner.invoke(app, ["status"])
    assert result.exit_code == 0
    assert "not cached" in result.output
    assert "not set" in result.output


def test_login_without_transport_fails():
    result = runner.invoke(app, ["login"])
    assert result.exit_code == 1
    assert "No transport configured" in result.output


def test_login_with_unknown_transport_fails(monkeypatch):
    monkeypatch.setenv("MESSEN_TRANSPORT", "no_such_module:Transport")
    result = runner.invoke(app, ["login"])
    assert result.exit_code == 1
    assert "Cannot load transport" in result.output


def test_logout_without_cached_session_does_not_prompt():
    result = runner.invoke(app, ["logout"], input="")
    assert result.exit_code == 0
    assert "No cached session" in result.output
    assert "Password" not in result.output


def test_logout_clears_corrupt_state(isolated_home):
    state = isolated_home / ".messen" / "appstate.json"
    state.parent.mkdir()
    state.write_text("{oops")
    result = runner.invoke(app, ["logout"])
    assert result.exit_code == 0
    assert "No cached session" in result.output
    assert not state.exists()


def test_logout_with_cached_session_needs_transport(isolated_home):
    state = isolated_home / ".messen" / "appstate.json"
    state.parent.mkdir()
    state.write_text('[{"key": "c_user", "value": "1"}]')
    result = runner.invoke(app, ["logout"])
    assert result.exit_code == 1
    assert "No transport configured" in result.output
    assert state.exists()
