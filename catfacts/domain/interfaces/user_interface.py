"""Interface for interacting with the user (output only).

Defines the contract for displaying facts, raw payloads, errors and retry
schedules, allowing different UI implementations (e.g., console, tests).
"""

import abc
from typing import Any, List, Tuple


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_output(self, output: str, **kwargs: Any) -> None:
        """Displays standard output to the user.

        Args:
            output: The text to display.
            **kwargs: Additional arguments for formatting (e.g., title).
        """
        pass

    @abc.abstractmethod
    def display_raw(self, payload: str) -> None:
        """Writes `payload` unchanged, without decoration, so other programs can read it."""
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_schedule(self, title: str, rows: List[Tuple[int, float]]) -> None:
        """Displays a retry schedule as (attempt, wait seconds) rows.

        Args:
            title: Heading shown above the schedule.
            rows: One row per retry, in attempt order.
        """
        pass
