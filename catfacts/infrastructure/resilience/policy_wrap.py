"""Policy composition.

Nests policies outermost first: `wrap(fallback, retry)` behaves like
`fallback.execute(lambda: retry.execute(op))`. A fallback nested inside a
retry would recover on the first failure and leave nothing to retry, so that
order is rejected when the wrap is built.
"""

import asyncio
import logging
from typing import Any, List, Optional

from catfacts.domain.interfaces.policy import AsyncPolicy
from catfacts.domain.models.policy import Operation
from catfacts.infrastructure.resilience.fallback_policy import FallbackPolicy
from catfacts.infrastructure.resilience.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)


class PolicyWrap(AsyncPolicy):
    """An outer policy whose operation is the inner policy's execution."""

    def __init__(self, outer: AsyncPolicy, inner: AsyncPolicy):
        if not isinstance(outer, AsyncPolicy) or not isinstance(inner, AsyncPolicy):
            raise TypeError("PolicyWrap expects two AsyncPolicy instances")
        if _contains(outer, RetryPolicy) and _contains(inner, FallbackPolicy):
            raise ValueError(
                "Fallback nested inside retry: the fallback would recover on the first failure "
                "and retries would never run. Put the fallback outermost: wrap(fallback, retry)."
            )
        self.outer = outer
        self.inner = inner

    @property
    def policies(self) -> List[AsyncPolicy]:
        """Leaf policies, outermost first."""
        return _flatten(self.outer) + _flatten(self.inner)

    async def execute(
        self,
        operation: Operation,
        cancellation: Optional[asyncio.Event] = None,
    ) -> Any:
        async def run_inner() -> Any:
            return await self.inner.execute(operation, cancellation)

        return await self.outer.execute(run_inner, cancellation)


def _flatten(policy: AsyncPolicy) -> List[AsyncPolicy]:
    if isinstance(policy, PolicyWrap):
        return policy.policies
    return [policy]


def _contains(policy: AsyncPolicy, kind: type) -> bool:
    return any(isinstance(p, kind) for p in _flatten(policy))


def wrap(*policies: AsyncPolicy) -> AsyncPolicy:
    """Composes policies into one, outermost first.

    Raises:
        ValueError: If fewer than two policies are given or a fallback would
            end up nested inside a retry.
    """
    if len(policies) < 2:
        raise ValueError("wrap() needs at least two policies")
    composed = policies[-1]
    for outer in reversed(policies[:-1]):
        composed = PolicyWrap(outer, composed)
    logger.debug(f"Composed policy: {' -> '.join(type(p).__name__ for p in _flatten(composed))}")
    return composed


def retry_then_fallback(retry: RetryPolicy, fallback: FallbackPolicy) -> AsyncPolicy:
    """Retries first; once attempts are exhausted the fallback recovers."""
    return wrap(fallback, retry)
