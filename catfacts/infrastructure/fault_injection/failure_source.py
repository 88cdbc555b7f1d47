"""FailureSource implementations.

The demo fails calls at random to show the policies at work. The randomness
lives here, behind the FailureSource interface, so production code can use
NeverFail and tests can script failures exactly.
"""

import logging
import random
from typing import Iterable, Iterator, Optional

from catfacts.domain.interfaces.failure_source import FailureSource

logger = logging.getLogger(__name__)


class NeverFail(FailureSource):
    """Never injects a failure."""

    def should_fail(self) -> bool:
        return False


class RandomFailureSource(FailureSource):
    """Fails each call independently with the given probability."""

    def __init__(self, probability: float = 0.5, seed: Optional[int] = None):
        """Initializes the source.

        Args:
            probability: Chance in [0, 1] that a call fails.
            seed: Seed for a private random generator; None for a nondeterministic one.
        """
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"probability must be between 0 and 1, got {probability}")
        self.probability = probability
        self._rng = random.Random(seed)
        logger.debug(f"RandomFailureSource initialized: probability={probability}, seeded={seed is not None}")

    def should_fail(self) -> bool:
        return self._rng.random() < self.probability


class ScriptedFailureSource(FailureSource):
    """Replays a fixed sequence of decisions, then keeps returning `then`."""

    def __init__(self, decisions: Iterable[bool], then: bool = False):
        self._decisions: Iterator[bool] = iter(decisions)
        self._then = then
        self.calls = 0

    def should_fail(self) -> bool:
        self.calls += 1
        return next(self._decisions, self._then)
