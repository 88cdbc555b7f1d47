"""Retry policy for async operations.

Re-invokes an operation after handled (transient) failures, waiting between
attempts according to a backoff function. Unhandled failures propagate on the
spot, and the last handled failure propagates once attempts run out.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional

from catfacts.domain.interfaces.policy import AsyncPolicy
from catfacts.domain.models.policy import FailurePredicate, Operation, RetryConfig

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[Any]]


class RetryPolicy(AsyncPolicy):
    """Executes an operation, retrying handled failures up to `max_attempts` times in total."""

    def __init__(
        self,
        handles: FailurePredicate,
        config: RetryConfig,
        sleep: Sleeper = asyncio.sleep,
        name: str = "retry",
    ):
        """Initializes the RetryPolicy.

        Args:
            handles: Predicate selecting the failures worth retrying.
            config: Attempt bound, backoff function and optional observer.
            sleep: Coroutine used to wait between attempts. Must not block the loop.
            name: Label used in log messages.
        """
        if not callable(handles):
            raise TypeError("handles must be a callable predicate")
        self._handles = handles
        self._config = config
        self._sleep = sleep
        self.name = name
        logger.debug(f"RetryPolicy '{name}' initialized: max_attempts={config.max_attempts}")

    @property
    def config(self) -> RetryConfig:
        return self._config

    def handles(self, failure: BaseException) -> bool:
        return bool(self._handles(failure))

    async def execute(
        self,
        operation: Operation,
        cancellation: Optional[asyncio.Event] = None,
    ) -> Any:
        """Runs `operation` until it succeeds, fails with an unhandled error, or attempts run out.

        The attempt counter is local to this call, so concurrent executions of
        the same policy never see each other's state.

        Returns:
            The first successful result.

        Raises:
            BaseException: The first unhandled failure, or the last handled one
                once `max_attempts` is reached.
        """
        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as e:
                if not self.handles(e):
                    logger.debug(f"[{self.name}] Unhandled {type(e).__name__} on attempt {attempt}; not retrying.")
                    raise
                if attempt >= self._config.max_attempts:
                    logger.debug(f"[{self.name}] Attempts exhausted ({attempt}/{self._config.max_attempts}): {type(e).__name__}")
                    raise

                wait = self._compute_wait(attempt)
                await self._notify(e, attempt, wait)
                await self._sleep(wait)
                attempt += 1

    def _compute_wait(self, attempt: int) -> float:
        wait = float(self._config.backoff(attempt))
        if wait < 0:
            logger.warning(f"[{self.name}] Backoff returned {wait}s for attempt {attempt}; using 0s.")
            wait = 0.0
        return wait

    async def _notify(self, failure: BaseException, attempt: int, wait: float) -> None:
        """Invokes the on_retry observer. Observer errors are logged, never raised."""
        observer = self._config.on_retry
        if observer is None:
            return
        try:
            result = observer(failure, attempt, wait)
            if inspect.isawaitable(result):
                await result
        except Exception as observer_error:
            logger.error(f"[{self.name}] on_retry observer failed on attempt {attempt}: {observer_error}", exc_info=True)
