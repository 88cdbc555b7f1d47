"""In-memory dead-letter queue and the recovery action that feeds it."""

import asyncio
import logging
from typing import Any, List, Optional

from catfacts.domain.events.api_events import FallbackTriggered
from catfacts.domain.models.policy import RecoveryAction

logger = logging.getLogger(__name__)


class DeadLetterQueue:
    """Collects FallbackTriggered events for calls that could not be completed."""

    def __init__(self, maxsize: int = 0):
        self._queue: "asyncio.Queue[FallbackTriggered]" = asyncio.Queue(maxsize=maxsize)

    async def put(self, event: FallbackTriggered) -> None:
        await self._queue.put(event)
        logger.debug(f"Dead-lettered {event.operation}: {event.error_type}")

    def qsize(self) -> int:
        return self._queue.qsize()

    def drain(self) -> List[FallbackTriggered]:
        """Removes and returns every queued event."""
        items = []
        while not self._queue.empty():
            items.append(self._queue.get_nowait())
        return items


def make_dead_letter_recovery(
    queue: DeadLetterQueue,
    default: Any,
    operation_name: str = "operation",
) -> RecoveryAction:
    """Builds a recovery action that logs, dead-letters the failure and returns `default`.

    If the cancellation signal is already set the event is not enqueued; the
    degraded value is still returned.
    """
    async def recover(failure: BaseException, cancellation: Optional[asyncio.Event] = None) -> Any:
        logger.error(f"Policy fallback reached for {operation_name}. Service is down for good: {type(failure).__name__}: {failure}")
        if cancellation is not None and cancellation.is_set():
            logger.warning(f"Cancellation requested; skipping dead-letter enqueue for {operation_name}.")
            return default
        await queue.put(FallbackTriggered(
            operation=operation_name,
            error_type=type(failure).__name__,
            error_message=str(failure),
        ))
        return default

    return recover
