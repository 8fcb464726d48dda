"""Logging setup with optional JSON output."""

import logging
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure root logging.

    Args:
        level: log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: emit one JSON object per line instead of plain text
        log_file: also write to this file when given
    """
    if json_format:
        formatter = JsonFormatter(
            JSON_FIELDS,
            rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
        )
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=handlers,
        force=True,
    )
    logging.getLogger("redis").setLevel(logging.WARNING)
