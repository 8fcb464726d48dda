"""Tests for retry delay policies."""

import pytest

from jobretry.backoff import (
    DEFAULT_BACKOFF_STRATEGY,
    backoff_schedule,
    fixed_delay,
    normalize_strategy,
    parse_strategy,
    staged_delay,
)


def test_default_strategy():
    """Test: Default strategy runs from one second to six hours."""
    assert DEFAULT_BACKOFF_STRATEGY == (1, 5, 30, 60, 600, 3600, 10800, 21600)


@pytest.mark.parametrize("strategy", [[7], [1, 2], [0, 10, 100, 1000], list(DEFAULT_BACKOFF_STRATEGY)])
def test_staged_delay_clamps_to_last_step(strategy):
    """Test: delay(n) == S[min(n, len(S) - 1)] for any attempt."""
    for attempt in range(len(strategy) + 5):
        assert staged_delay(strategy, attempt) == strategy[min(attempt, len(strategy) - 1)]


def test_staged_delay_empty_strategy_is_zero():
    """Test: Empty strategy retries immediately."""
    assert staged_delay([], 0) == 0
    assert staged_delay([], 12) == 0
    assert staged_delay(None, 3) == 0


def test_staged_delay_malformed_strategy_is_zero():
    """Test: A malformed strategy degrades to no delay."""
    assert staged_delay("1,5,30", 1) == 0
    assert staged_delay([1, "soon"], 0) == 0
    assert staged_delay(42, 0) == 0


def test_negative_steps_clamp_to_zero():
    """Test: Negative steps never produce a negative delay."""
    assert normalize_strategy([-5, 10]) == [0, 10]
    assert staged_delay([-5, 10], 0) == 0


def test_fixed_delay():
    """Test: Fixed delay uses the configured value, else 0."""
    assert fixed_delay(None) == 0
    assert fixed_delay(0) == 0
    assert fixed_delay(45) == 45
    assert fixed_delay("30") == 30
    assert fixed_delay("later") == 0


def test_backoff_schedule():
    """Test: Schedule lists the delay of each attempt."""
    assert backoff_schedule([1, 10], 4) == [1, 10, 10, 10]
    assert backoff_schedule([], 2) == [0, 0]


def test_parse_strategy():
    """Test: Comma separated strategies parse to integers."""
    assert parse_strategy("1, 5,30") == [1, 5, 30]
    assert parse_strategy("") == []
    with pytest.raises(ValueError):
        parse_strategy("1,x")
