"""Backoff calculators.

Each factory returns a pure function mapping the 1-based index of the
attempt that just failed to the number of seconds to wait before the next one.
"""

from catfacts.domain.models.policy import BackoffFunction


def _check_attempt(attempt: int) -> None:
    if attempt < 1:
        raise ValueError(f"Attempt index is 1-based, got {attempt}")


def linear_backoff(base_seconds: float) -> BackoffFunction:
    """Waits `attempt * base_seconds`: 0.3s, 0.6s, 0.9s... for a 0.3s base.

    Args:
        base_seconds: Unit added for every failed attempt. Must be >= 0.
    """
    if base_seconds < 0:
        raise ValueError(f"base_seconds must be non-negative, got {base_seconds}")

    def backoff(attempt: int) -> float:
        _check_attempt(attempt)
        return attempt * base_seconds

    return backoff


def constant_backoff(delay_seconds: float) -> BackoffFunction:
    """Waits the same `delay_seconds` after every failed attempt."""
    if delay_seconds < 0:
        raise ValueError(f"delay_seconds must be non-negative, got {delay_seconds}")

    def backoff(attempt: int) -> float:
        _check_attempt(attempt)
        return delay_seconds

    return backoff
