"""Tests for the jobretry CLI."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from jobretry import cli as cli_module
from jobretry.cli import cli
from jobretry.settings import reset_settings
from jobretry.storage import AttemptStore, MemoryStore


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.setenv("JOBRETRY_REDIS_URL", "redis://cache:6380/2")
    monkeypatch.setenv("JOBRETRY_MAX_RETRY_DELAY", "900")
    reset_settings()
    with patch("jobretry.cli.setup_logging"):
        yield CliRunner()
    reset_settings()


@pytest.fixture
def attempts(monkeypatch):
    attempts = AttemptStore(MemoryStore())
    monkeypatch.setattr(cli_module, "get_attempts", lambda: attempts)
    return attempts


def test_backoff_default(runner):
    """Test: Default strategy table."""
    result = runner.invoke(cli, ["backoff"])
    assert result.exit_code == 0
    assert "21600" in result.output
    assert "Retry limit: 8" in result.output


def test_backoff_custom(runner):
    """Test: Custom strategy clamps to its last step."""
    result = runner.invoke(cli, ["backoff", "--strategy", "2,4", "--attempts", "4"])
    assert result.exit_code == 0
    rows = [line.split() for line in result.output.splitlines() if line[:1].isdigit()]
    assert rows == [["0", "2"], ["1", "4"], ["2", "4"], ["3", "4"]]


def test_backoff_invalid(runner):
    """Test: Invalid strategy exits with an error."""
    result = runner.invoke(cli, ["backoff", "--strategy", "1,soon"])
    assert result.exit_code == 1


def test_attempts_and_clear(runner, attempts):
    """Test: Show and clear an attempt counter."""
    key = "retry:(Job{mail} | SendEmail | 3f2a)"
    result = runner.invoke(cli, ["attempts", key])
    assert "No failures recorded" in result.output

    attempts.record_attempt(key)
    attempts.record_attempt(key)
    result = runner.invoke(cli, ["attempts", key])
    assert "Attempt: 1" in result.output

    result = runner.invoke(cli, ["clear", key])
    assert result.exit_code == 0
    assert attempts.read_attempt(key) is None


def test_config_show(runner):
    """Test: Settings come from the environment."""
    result = runner.invoke(cli, ["config", "show"])
    assert result.exit_code == 0
    assert "redis://cache:6380/2" in result.output
    assert "max-retry-delay:  900" in result.output


def test_plugins_lists_retry_plugins(runner):
    """Test: The retry plugins are registered by default."""
    result = runner.invoke(cli, ["plugins"])
    assert "Retry" in result.output
    assert "ExponentialRetry" in result.output
