"""Root logger configuration for the catfacts CLI.

Log records go to stderr (and optionally a file) so that stdout carries only
command output, e.g. the payload printed by `catfacts fact --raw`.
"""

import logging
from typing import Optional, TextIO

from catfacts.infrastructure.config.settings import get_config

# Libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def parse_level(name: object, default: int = logging.INFO) -> int:
    """Maps 'debug' / 'WARNING' / 10 to a logging level; unknown names give `default`."""
    if isinstance(name, int) and not isinstance(name, bool):
        return name
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(
    log_level: int = logging.INFO,
    log_format: str = logging.BASIC_FORMAT,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Replaces the root logger's handlers with a stream handler and an optional file handler.

    Args:
        log_level: Minimum level for the root logger and its handlers.
        log_format: Format string shared by all handlers.
        log_file: Also append records to this file when given.
        stream: Stream for the console handler; sys.stderr when None.

    Returns:
        The configured root logger.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)
    handlers = [logging.StreamHandler(stream)]
    file_error = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
        except OSError as e:
            file_error = e

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    if file_error is not None:
        root_logger.error(f"Cannot log to {log_file}, using the console only: {file_error}")
    root_logger.debug(f"Logging configured. Level={logging.getLevelName(log_level)}, file={log_file}")
    return root_logger


def configure_logging(stream: Optional[TextIO] = None) -> logging.Logger:
    """Sets up logging from the `logging.level`, `logging.format` and `logging.file` settings."""
    return setup_logging(
        log_level=parse_level(get_config('logging.level')),
        log_format=str(get_config('logging.format')),
        log_file=get_config('logging.file'),
        stream=stream,
    )
