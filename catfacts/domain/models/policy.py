"""Value Objects describing how a resilience policy behaves.

Both configs are frozen: a policy reads them concurrently from many
executions and never mutates them.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")

# Zero-argument callable producing the awaitable to run (one call per attempt)
Operation = Callable[[], Awaitable[T]]

# Decides whether a failure is transient (handled) or must propagate untouched
FailurePredicate = Callable[[BaseException], bool]

# Maps the 1-based index of the attempt that just failed to seconds of wait
BackoffFunction = Callable[[int], float]

# Called as on_retry(failure, attempt, wait_seconds); may return an awaitable
RetryObserver = Callable[[BaseException, int, float], Any]

# Called as recover(failure, cancellation) once retries are exhausted
RecoveryAction = Callable[[BaseException, Optional[asyncio.Event]], Awaitable[Any]]


@dataclass(frozen=True)
class RetryConfig:
    """Configuration of a RetryPolicy.

    Attributes:
        max_attempts: Total number of attempts, the first one included.
        backoff: Wait duration (seconds) before attempt n+1, given n.
        on_retry: Optional observer invoked before every wait.
    """
    max_attempts: int
    backoff: BackoffFunction
    on_retry: Optional[RetryObserver] = None

    def __post_init__(self) -> None:
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise TypeError(f"max_attempts must be an int, got {type(self.max_attempts).__name__}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if not callable(self.backoff):
            raise TypeError("backoff must be callable")
        if self.on_retry is not None and not callable(self.on_retry):
            raise TypeError("on_retry must be callable")


@dataclass(frozen=True)
class FallbackConfig:
    """Configuration of a FallbackPolicy.

    Attributes:
        recover: Async action whose result replaces the handled failure.
    """
    recover: RecoveryAction

    def __post_init__(self) -> None:
        if not callable(self.recover):
            raise TypeError("recover must be callable")
