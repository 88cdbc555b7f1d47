"""Fallback policy for async operations.

Substitutes the result of a recovery action for a handled failure. Meant as
the outermost layer, so the recovery only runs after any inner retries have
given up.
"""

import asyncio
import logging
from typing import Any, Optional

from catfacts.domain.interfaces.policy import AsyncPolicy
from catfacts.domain.models.policy import FailurePredicate, FallbackConfig, Operation

logger = logging.getLogger(__name__)


class FallbackPolicy(AsyncPolicy):
    """Executes an operation, replacing a handled failure with the recovery result."""

    def __init__(self, handles: FailurePredicate, config: FallbackConfig, name: str = "fallback"):
        """Initializes the FallbackPolicy.

        Args:
            handles: Predicate selecting the failures to recover from.
            config: Holds the async recovery action.
            name: Label used in log messages.
        """
        if not callable(handles):
            raise TypeError("handles must be a callable predicate")
        self._handles = handles
        self._config = config
        self.name = name

    @property
    def config(self) -> FallbackConfig:
        return self._config

    def handles(self, failure: BaseException) -> bool:
        return bool(self._handles(failure))

    async def execute(
        self,
        operation: Operation,
        cancellation: Optional[asyncio.Event] = None,
    ) -> Any:
        """Runs `operation`; on a handled failure awaits `recover(failure, cancellation)`.

        Raises:
            BaseException: Unhandled failures from the operation, or anything
                the recovery action raises.
        """
        try:
            return await operation()
        except Exception as e:
            if not self.handles(e):
                raise
            logger.debug(f"[{self.name}] Recovering from {type(e).__name__}: {e}")
            return await self._config.recover(e, cancellation)
