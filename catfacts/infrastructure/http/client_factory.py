"""Named HTTP clients backed by httpx.

Client settings (base URL, default headers, timeout, transient-error policy)
are registered once under a name; `create_client(name)` then hands out a
short-lived ResilientHttpClient for use inside an event loop.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx

from catfacts.domain.events.api_events import FactFetched
from catfacts.domain.interfaces.http_client import HttpClient
from catfacts.domain.interfaces.policy import AsyncPolicy
from catfacts.domain.models.common import ClientName, Payload, RelativePath
from catfacts.domain.models.policy import RetryConfig
from catfacts.infrastructure.monitoring.policy_observers import EventSink, make_retry_logger
from catfacts.infrastructure.resilience.backoff import constant_backoff
from catfacts.infrastructure.resilience.failure_predicates import is_transient_http_error
from catfacts.infrastructure.resilience.retry_policy import RetryPolicy, Sleeper

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"Accept": "application/json"}


@dataclass(frozen=True)
class ClientSettings:
    """Settings of one named client."""
    base_url: str
    headers: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HEADERS))
    timeout_seconds: float = 10.0
    policy: Optional[AsyncPolicy] = None


def transient_http_error_policy(
    retry_count: int,
    delay_seconds: float,
    name: str = "http",
    sleep: Sleeper = asyncio.sleep,
) -> RetryPolicy:
    """Retry policy for transient HTTP errors: `retry_count` retries, fixed delay between them."""
    if retry_count < 0:
        raise ValueError(f"retry_count must be non-negative, got {retry_count}")
    max_attempts = retry_count + 1
    return RetryPolicy(
        handles=is_transient_http_error,
        config=RetryConfig(
            max_attempts=max_attempts,
            backoff=constant_backoff(delay_seconds),
            on_retry=make_retry_logger(f"{name} request", max_attempts),
        ),
        sleep=sleep,
        name=name,
    )


class ResilientHttpClient(HttpClient):
    """HttpClient over httpx.AsyncClient, running each request through the client policy."""

    def __init__(
        self,
        name: ClientName,
        settings: ClientSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        event_sink: Optional[EventSink] = None,
    ):
        self.name = name
        self.settings = settings
        self._event_sink = event_sink
        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            headers=settings.headers,
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "ResilientHttpClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_once(self, path: RelativePath) -> Payload:
        start_time = time.perf_counter()
        response = await self._client.get(path)
        response.raise_for_status()
        latency_ms = (time.perf_counter() - start_time) * 1000
        payload = Payload(response.text)
        logger.debug(f"GET {response.url} -> {response.status_code} in {latency_ms:.1f}ms")
        if self._event_sink is not None:
            self._event_sink(FactFetched(
                client_name=self.name,
                path=path,
                latency_ms=latency_ms,
                payload_length=len(payload),
            ))
        return payload

    async def get_string(self, path: RelativePath) -> Payload:
        """Fetches `path` as text.

        Raises:
            httpx.HTTPStatusError: For non-2xx responses that survive the client policy.
            httpx.TransportError: For network failures that survive the client policy.
        """
        if self.settings.policy is None:
            return await self._get_once(path)
        return await self.settings.policy.execute(lambda: self._get_once(path))


class HttpClientFactory:
    """Registry of named client settings, producing configured clients on demand."""

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        event_sink: Optional[EventSink] = None,
    ):
        """Initializes the factory.

        Args:
            transport: Optional httpx transport shared by every client (tests pass a MockTransport).
            event_sink: Optional receiver of FactFetched events.
        """
        self._settings: Dict[str, ClientSettings] = {}
        self._transport = transport
        self._event_sink = event_sink

    def register(self, name: str, settings: ClientSettings) -> None:
        logger.info(f"Registered HTTP client '{name}' -> {settings.base_url}")
        self._settings[name] = settings

    def settings_for(self, name: str) -> ClientSettings:
        try:
            return self._settings[name]
        except KeyError:
            raise KeyError(f"No HTTP client registered under '{name}'") from None

    def create_client(self, name: str) -> ResilientHttpClient:
        """Creates a client for `name`. Close it (or use `async with`) when done.

        Raises:
            KeyError: If no client is registered under `name`.
        """
        return ResilientHttpClient(
            name=ClientName(name),
            settings=self.settings_for(name),
            transport=self._transport,
            event_sink=self._event_sink,
        )
