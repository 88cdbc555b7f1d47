"""Logging observers for resilience policies.

The policies only call back with structured data; turning that into log
lines and domain events happens here, at the application boundary.
"""

import logging
from typing import Callable, List, Optional

from catfacts.domain.events.api_events import DomainEvent, RetryScheduled
from catfacts.domain.models.policy import RetryObserver

logger = logging.getLogger(__name__)

EventSink = Callable[[DomainEvent], None]


def make_retry_logger(
    operation_name: str,
    max_attempts: int,
    sink: Optional[EventSink] = None,
    log: logging.Logger = logger,
) -> RetryObserver:
    """Builds an on_retry observer that logs a warning and emits RetryScheduled.

    Args:
        operation_name: Label for the retried operation.
        max_attempts: Attempt bound, only used in the message.
        sink: Optional callable receiving each RetryScheduled event.
        log: Logger to write to.
    """
    def on_retry(failure: BaseException, attempt: int, wait_seconds: float) -> None:
        event = RetryScheduled(
            operation=operation_name,
            attempt_number=attempt,
            delay_seconds=wait_seconds,
            error_type=type(failure).__name__,
            error_message=str(failure),
        )
        log.warning(
            f"Retrying {operation_name} for the {attempt} time "
            f"(attempt {attempt}/{max_attempts} failed with {event.error_type}). "
            f"Waiting {wait_seconds:.2f}s..."
        )
        if sink is not None:
            sink(event)

    return on_retry


class EventRecorder:
    """Event sink keeping every event it receives, in order."""

    def __init__(self):
        self.events: List[DomainEvent] = []

    def __call__(self, event: DomainEvent) -> None:
        logger.debug(f"EVENT: {event}")
        self.events.append(event)

    def of_type(self, event_type: type) -> List[DomainEvent]:
        return [e for e in self.events if isinstance(e, event_type)]
