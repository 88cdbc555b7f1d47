"""Main entry point for the catfacts application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx
import typer
from typing_extensions import Annotated

from catfacts.core.command_handler import CommandHandler
from catfacts.core.services.fact_service import CLIENT_NAME, CatFactService
from catfacts.infrastructure.cli.display import ConsoleDisplay
from catfacts.infrastructure.config.settings import (
    get_base_url,
    get_client_retry_count,
    get_client_retry_delay_seconds,
    get_client_timeout_seconds,
    get_failure_rate,
    get_fact_path,
    get_service_backoff_seconds,
    get_service_max_attempts,
    load_configuration,
)
from catfacts.infrastructure.dead_letter.queue import DeadLetterQueue
from catfacts.infrastructure.fault_injection.failure_source import RandomFailureSource
from catfacts.infrastructure.http.client_factory import ClientSettings, HttpClientFactory, transient_http_error_policy
from catfacts.infrastructure.monitoring.logger_setup import configure_logging
from catfacts.infrastructure.resilience.retry_policy import Sleeper

logger = logging.getLogger(__name__)

# --- Dependency Injection Container (Manual) ---

def create_dependencies(
    failure_rate: Optional[float] = None,
    seed: Optional[int] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    sleep: Sleeper = asyncio.sleep,
) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root.

    Args:
        failure_rate: Overrides the configured fault injection probability.
        seed: Seed for the fault injection generator.
        transport: Optional httpx transport (tests pass a MockTransport).
        sleep: Coroutine used for backoff waits.
    """
    logger.info("Initializing application dependencies...")
    dependencies: Dict[str, Any] = {}

    # 1. Load Configuration First
    load_configuration()
    configure_logging()
    logger.info("Configuration and logging initialized.")

    # 2. Infrastructure
    dependencies['ui'] = ConsoleDisplay()
    dependencies['dead_letter_queue'] = DeadLetterQueue()
    dependencies['client_factory'] = HttpClientFactory(transport=transport)
    dependencies['client_factory'].register(CLIENT_NAME, ClientSettings(
        base_url=get_base_url(),
        timeout_seconds=get_client_timeout_seconds(),
        policy=transient_http_error_policy(
            retry_count=get_client_retry_count(),
            delay_seconds=get_client_retry_delay_seconds(),
            name="catfacts-http",
            sleep=sleep,
        ),
    ))
    rate = get_failure_rate() if failure_rate is None else failure_rate
    dependencies['failure_source'] = RandomFailureSource(probability=rate, seed=seed)

    # 3. Core Services
    dependencies['fact_service'] = CatFactService(
        client_factory=dependencies['client_factory'],
        failure_source=dependencies['failure_source'],
        dead_letter_queue=dependencies['dead_letter_queue'],
        max_attempts=get_service_max_attempts(),
        backoff_seconds=get_service_backoff_seconds(),
        fact_path=get_fact_path(),
        sleep=sleep,
    )

    # 4. Command Handler
    dependencies['command_handler'] = CommandHandler(
        fact_service=dependencies['fact_service'],
        ui=dependencies['ui'],
    )
    logger.info("All dependencies initialized successfully.")
    return dependencies

# --- Typer App Definition ---
app = typer.Typer(
    name="catfacts",
    help="Fetch cat facts from an unreliable endpoint with retries and a fallback.",
    add_completion=False,
)

FailureRateOption = Annotated[
    Optional[float],
    typer.Option("--failure-rate", "-r", min=0.0, max=1.0, help="Probability of a simulated transient failure per attempt. Uses config if not set.")
]

SeedOption = Annotated[
    Optional[int],
    typer.Option("--seed", "-s", help="Seed for the simulated failures (reproducible runs).")
]

@app.command()
def fact(
    raw: Annotated[bool, typer.Option("--raw", help="Print the raw JSON payload instead of the fact text.")] = False,
    failure_rate: FailureRateOption = None,
    seed: SeedOption = None,
):
    """Fetch the daily cat fact. Exits with 1 if the service is down for good."""
    try:
        dependencies = create_dependencies(failure_rate=failure_rate, seed=seed)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=2)
    handler: CommandHandler = dependencies['command_handler']
    exit_code = asyncio.run(handler.handle_fact(raw=raw))
    if exit_code:
        raise typer.Exit(code=exit_code)

@app.command()
def policy():
    """Show the retry schedule used before falling back."""
    try:
        dependencies = create_dependencies()
    except ValueError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=2)
    handler: CommandHandler = dependencies['command_handler']
    handler.handle_policy()

# --- Main Execution Guard ---

def cli_entry_point():
    """Function called by the `catfacts` console script."""
    app()

if __name__ == "__main__":
    cli_entry_point()
