"""Tests for logging setup."""

import json
import logging

import pytest

from jobretry.log import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_lines_to_file(tmp_path):
    """Test: JSON output writes one object per record with renamed fields."""
    log_file = tmp_path / "worker.log"
    setup_logging("DEBUG", json_format=True, log_file=str(log_file))

    logging.getLogger("jobretry.worker").info("Job %s completed", "3f2a")
    for handler in logging.getLogger().handlers:
        handler.flush()

    record = json.loads(log_file.read_text(encoding="utf-8").strip())
    assert record["message"] == "Job 3f2a completed"
    assert record["level"] == "INFO"
    assert record["logger"] == "jobretry.worker"
    assert "timestamp" in record


def test_plain_text_and_level(tmp_path):
    """Test: Plain output uses the text format and the requested level."""
    log_file = tmp_path / "worker.log"
    setup_logging("warning", log_file=str(log_file))

    logging.getLogger("jobretry.retry").info("hidden")
    logging.getLogger("jobretry.retry").warning("shown")
    for handler in logging.getLogger().handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "hidden" not in text
    assert "jobretry.retry - WARNING - shown" in text
    assert logging.getLogger("redis").level == logging.WARNING
