"""Domain Events related to resilient API calls.

Examples include events for when a retry is scheduled, when the fallback
takes over, and when a fact is fetched.
"""

from dataclasses import dataclass, field
import time


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a failed attempt will be retried after a wait."""
    operation: str
    attempt_number: int
    delay_seconds: float
    error_type: str
    error_message: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class FallbackTriggered(DomainEvent):
    """Event triggered when retries are exhausted and recovery runs instead."""
    operation: str
    error_type: str
    error_message: str
    reason: str = "retries_exhausted"
    timestamp: float = field(default_factory=time.time)


@dataclass
class FactFetched(DomainEvent):
    """Event triggered when the endpoint returned a payload."""
    client_name: str
    path: str
    latency_ms: float
    payload_length: int
    timestamp: float = field(default_factory=time.time)
