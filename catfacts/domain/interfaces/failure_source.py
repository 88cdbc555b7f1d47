"""Interface for injected failure sources.

Lets a caller simulate transient failures before a real call without the
resilience engine knowing anything about it.
"""

import abc


class FailureSource(abc.ABC):
    """Abstract Base Class deciding whether the next call should fail."""

    @abc.abstractmethod
    def should_fail(self) -> bool:
        """Returns True when the upcoming call must raise a simulated failure."""
        pass
