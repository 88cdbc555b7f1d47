"""Cat Fact Service: fetches the daily fact under a retry-then-fallback policy.

Transient HTTP failures are retried with linear backoff; once every attempt
has failed the fallback dead-letters the failure and the service returns an
empty fact instead of raising.
"""

import asyncio
import json
import logging
from typing import List, Optional, Tuple

import httpx

from catfacts.domain.interfaces.failure_source import FailureSource
from catfacts.domain.interfaces.policy import AsyncPolicy
from catfacts.domain.models.common import FactText, Payload, RelativePath
from catfacts.domain.models.policy import FallbackConfig, RetryConfig
from catfacts.infrastructure.dead_letter.queue import DeadLetterQueue, make_dead_letter_recovery
from catfacts.infrastructure.fault_injection.failure_source import NeverFail
from catfacts.infrastructure.http.client_factory import HttpClientFactory
from catfacts.infrastructure.monitoring.policy_observers import EventSink, make_retry_logger
from catfacts.infrastructure.resilience.backoff import linear_backoff
from catfacts.infrastructure.resilience.failure_predicates import handle
from catfacts.infrastructure.resilience.fallback_policy import FallbackPolicy
from catfacts.infrastructure.resilience.policy_wrap import retry_then_fallback
from catfacts.infrastructure.resilience.retry_policy import RetryPolicy, Sleeper

logger = logging.getLogger(__name__)

CLIENT_NAME = "CatFacts"
OPERATION_NAME = "get_daily_fact"


class SimulatedTransientError(httpx.TransportError):
    """Raised by the demo before a call to mimic a flaky network."""


class CatFactService:
    """Fetches cat facts through a retry-then-fallback policy."""

    DEFAULT_MAX_ATTEMPTS = 5
    DEFAULT_BACKOFF_SECONDS = 0.3

    def __init__(
        self,
        client_factory: HttpClientFactory,
        failure_source: Optional[FailureSource] = None,
        dead_letter_queue: Optional[DeadLetterQueue] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        fact_path: str = "fact",
        sleep: Sleeper = asyncio.sleep,
        event_sink: Optional[EventSink] = None,
    ):
        """Initializes the CatFactService and builds its policy.

        Args:
            client_factory: Factory with a client registered under "CatFacts".
            failure_source: Decides when to inject a simulated failure. Defaults to NeverFail.
            dead_letter_queue: Receives a record when the fallback runs.
            max_attempts: Total attempts of the retry policy.
            backoff_seconds: Linear backoff unit; attempt n waits n * backoff_seconds.
            fact_path: Path of the fact resource relative to the client's base URL.
            sleep: Coroutine used between attempts.
            event_sink: Optional receiver of RetryScheduled events.
        """
        self.client_factory = client_factory
        self.failure_source = failure_source or NeverFail()
        self.dead_letter_queue = dead_letter_queue or DeadLetterQueue()
        self.fact_path = RelativePath(fact_path)

        handles_http_errors = handle(httpx.HTTPError)
        self.retry_policy = RetryPolicy(
            handles=handles_http_errors,
            config=RetryConfig(
                max_attempts=max_attempts,
                backoff=linear_backoff(backoff_seconds),
                on_retry=make_retry_logger(OPERATION_NAME, max_attempts, sink=event_sink),
            ),
            sleep=sleep,
            name="catfact-retry",
        )
        self.fallback_policy = FallbackPolicy(
            handles=handles_http_errors,
            config=FallbackConfig(
                recover=make_dead_letter_recovery(self.dead_letter_queue, default=FactText(""), operation_name=OPERATION_NAME),
            ),
            name="catfact-fallback",
        )
        self.policy: AsyncPolicy = retry_then_fallback(self.retry_policy, self.fallback_policy)
        logger.info(f"CatFactService initialized: max_attempts={max_attempts}, backoff={backoff_seconds}s (linear)")

    def retry_schedule(self) -> List[Tuple[int, float]]:
        """(failed attempt, wait seconds) for every retry the policy may make."""
        config = self.retry_policy.config
        return [(attempt, config.backoff(attempt)) for attempt in range(1, config.max_attempts)]

    async def get_daily_fact(self, cancellation: Optional[asyncio.Event] = None) -> Payload:
        """Returns the raw payload of the fact endpoint, or "" if every attempt failed.

        Raises:
            Exception: Failures that are not HTTP errors are never retried or recovered.
        """
        async with self.client_factory.create_client(CLIENT_NAME) as client:
            async def fetch() -> Payload:
                if self.failure_source.should_fail():
                    raise SimulatedTransientError("Simulated transient failure")
                return await client.get_string(self.fact_path)

            return await self.policy.execute(fetch, cancellation)

    @staticmethod
    def extract_fact(payload: Payload) -> FactText:
        """Pulls the `fact` field out of a JSON payload; other payloads are returned as-is."""
        if not payload:
            return FactText("")
        try:
            data = json.loads(payload)
        except json.JSONDecodeError:
            logger.debug("Payload is not JSON; using it verbatim.")
            return FactText(payload)
        if isinstance(data, dict) and isinstance(data.get("fact"), str):
            return FactText(data["fact"])
        return FactText(payload)
