"""Loguru configuration rendering through a Rich handler."""

import os
import sys

from loguru import logger
from rich.logging import RichHandler

from projectsync.utils.rich_console import get_console

VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _env_level() -> str:
    level = os.getenv("PROJECTSYNC_LOG_LEVEL", "INFO").upper()
    if level not in VALID_LEVELS:
        get_console().print(f"Invalid log level: {level}. Using INFO.", style="bold yellow")
        level = "INFO"
    return level


def configure_logging(
    level: str | None = None, debug: bool | None = None, log_file: str | None = None
) -> list[int]:
    """
    Route loguru output through Rich, optionally mirroring it to a log file.

    Environment variables:
        PROJECTSYNC_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        PROJECTSYNC_DEBUG: Enable file logging (true, 1, yes)
        PROJECTSYNC_LOG_FILE: Log file path (default: projectsync.log)

    Returns:
        list[int]: Identifiers of the sinks that were added
    """
    level = (level or _env_level()).upper()
    if debug is None:
        debug = os.getenv("PROJECTSYNC_DEBUG", "").lower() in ["true", "1", "yes"]

    logger.remove()
    handler = RichHandler(console=get_console(), rich_tracebacks=True, show_path=False)
    sinks = [logger.add(handler, level=level, format="{message}")]

    if debug:
        log_file = log_file or os.getenv("PROJECTSYNC_LOG_FILE", "projectsync.log")
        try:
            sinks.append(
                logger.add(
                    log_file,
                    level=level,
                    format="{time:YYYY-MM-DD HH:mm:ss} - {name} - {level} - {message}",
                )
            )
        except OSError as error:
            print(f"Failed to set up file logging: {error}", file=sys.stderr)
    return sinks
