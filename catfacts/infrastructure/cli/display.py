import logging
from typing import Any, List, Tuple

from rich.box import HEAVY, ROUNDED
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from catfacts.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)

class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Console = None):
        """Initializes the rich Console."""
        self._console = console or Console()

    @property
    def console(self):
        """Get the Rich console instance for direct operations."""
        return self._console

    def display_output(self, output: str, **kwargs: Any) -> None:
        """Displays output text in a rounded panel.

        Args:
            output: The text to display.
            **kwargs: Additional arguments including:
                - title: The panel title (default: "Cat Fact")
        """
        title = kwargs.get("title", "Cat Fact")
        logger.debug(f"display_output called: title={title}, content_length={len(str(output))}")
        panel = Panel(
            Text(str(output), style="white"),
            title=f"[bold green]{title}[/bold green]",
            border_style="green",
            box=ROUNDED,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_raw(self, payload: str) -> None:
        # Verbatim: stdout must stay parseable
        self.console.print(payload, markup=False, emoji=False, highlight=False, soft_wrap=True)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_schedule(self, title: str, rows: List[Tuple[int, float]]) -> None:
        """Displays a retry schedule as a table.

        Args:
            title: Table title.
            rows: (failed attempt, wait seconds) pairs.
        """
        table = Table(title=title, show_header=True, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Failed attempt", style="cyan", justify="right")
        table.add_column("Wait before next", style="bold")
        for attempt, wait_seconds in rows:
            table.add_row(str(attempt), f"{wait_seconds * 1000:.0f} ms")
        if not rows:
            table.add_row("-", "no retries")
        self.console.print(table)
