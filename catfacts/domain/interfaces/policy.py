"""Interface for resilience policies.

A policy executes an async operation and decides what happens when it
fails. Policies are built once and are safe to share between concurrent
executions.
"""

import abc
import asyncio
from typing import Any, Optional

from catfacts.domain.models.policy import Operation


class AsyncPolicy(abc.ABC):
    """Abstract Base Class for an executable resilience policy."""

    @abc.abstractmethod
    async def execute(
        self,
        operation: Operation,
        cancellation: Optional[asyncio.Event] = None,
    ) -> Any:
        """Runs the operation under this policy.

        Args:
            operation: Zero-argument callable returning an awaitable.
            cancellation: Optional signal forwarded to recovery actions.

        Returns:
            The operation's result, or a substitute produced by the policy.

        Raises:
            BaseException: Any failure the policy does not handle.
        """
        pass
