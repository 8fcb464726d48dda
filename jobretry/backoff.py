"""Retry delay policies."""

import logging
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

# 1s, 5s, 30s, 1m, 10m, 1h, 3h, 6h
DEFAULT_BACKOFF_STRATEGY = (1, 5, 30, 60, 600, 3600, 10800, 21600)


def fixed_delay(retry_delay: Optional[Any]) -> int:
    """Delay for the fixed policy: the configured delay, else 0."""
    if retry_delay is None:
        return 0
    try:
        return max(int(retry_delay), 0)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed retry delay: %r", retry_delay)
        return 0


def normalize_strategy(strategy: Any) -> List[int]:
    """Coerce a configured backoff strategy to a list of delays.

    A strategy that is not a sequence of integers becomes empty, which
    means retry immediately.
    """
    if strategy is None or isinstance(strategy, (str, bytes)):
        return []
    try:
        return [max(int(step), 0) for step in strategy]
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed backoff strategy: %r", strategy)
        return []


def staged_delay(strategy: Any, attempt_number: int) -> int:
    """Delay for the staged policy.

    Attempts past the end of the strategy use its last step.
    """
    steps = normalize_strategy(strategy)
    if not steps:
        return 0
    if attempt_number < len(steps) - 1:
        return steps[max(attempt_number, 0)]
    return steps[-1]


def backoff_schedule(strategy: Any, attempts: int) -> List[int]:
    """Delays for attempts 0 through attempts - 1."""
    return [staged_delay(strategy, attempt) for attempt in range(attempts)]


def parse_strategy(value: str) -> List[int]:
    """Parse a comma separated strategy such as "1,5,30"."""
    return [int(step) for step in value.split(",") if step.strip()]
