"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py) and delegates the
work to the CatFactService, reporting results through the UserInterface.
"""

import logging

from catfacts.core.services.fact_service import CatFactService
from catfacts.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2

class CommandHandler:
    """Handles incoming commands and delegates to the fact service."""

    def __init__(self, fact_service: CatFactService, ui: UserInterface):
        self.fact_service = fact_service
        self.ui = ui

    async def handle_fact(self, raw: bool = False) -> int:
        """Handles the 'fact' command.

        Returns:
            EXIT_OK when a fact was shown, EXIT_NOT_FOUND when the fallback
            produced an empty result, EXIT_ERROR on an unexpected failure.
        """
        logger.info("Handling 'fact' command.")
        try:
            payload = await self.fact_service.get_daily_fact()
        except Exception as e:
            logger.error(f"Unexpected error fetching cat fact: {e}", exc_info=True)
            self.ui.display_error(f"Failed to fetch a cat fact: {e}")
            return EXIT_ERROR

        if not payload:
            dead_letters = self.fact_service.dead_letter_queue.qsize()
            logger.warning(f"No cat fact available ({dead_letters} dead-lettered call(s)).")
            self.ui.display_error("No cat fact found: the service is down, the request was dead-lettered.")
            return EXIT_NOT_FOUND

        if raw:
            self.ui.display_raw(payload)
        else:
            self.ui.display_output(self.fact_service.extract_fact(payload))
        return EXIT_OK

    def handle_policy(self) -> int:
        """Handles the 'policy' command: shows the retry schedule."""
        config = self.fact_service.retry_policy.config
        self.ui.display_schedule(
            f"Retry schedule ({config.max_attempts} attempts, then fallback)",
            self.fact_service.retry_schedule(),
        )
        return EXIT_OK
