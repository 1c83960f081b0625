"""Loguru configuration for the engine's human-facing logs (CLI, registry, schemas).

configure_logging() is the single entry point: it sets up loguru and applies
the same level and format to the structlog pipeline used by agents and the
orchestrator, so one setting controls both.
"""

import sys
from typing import Optional

from loguru import logger

from authenticity_system.config.settings import settings
from authenticity_system.utils.logging import configure_structured_logging

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure loguru and structlog from settings, with optional overrides.

    Console format (colorized) is used only on a TTY with log_format=console;
    otherwise records are serialized as JSON. Everything goes to stderr so
    `analyze --json` output on stdout stays machine-readable.

    Args:
        log_level: Overrides settings.log_level
        log_format: Overrides settings.log_format ("console" or "json")
    """
    level = (log_level or settings.log_level).upper()
    fmt = (log_format or settings.log_format).lower()

    logger.remove()
    # Records logged without a bound component still render
    logger.configure(extra={"component": "engine"})

    if sys.stderr.isatty() and fmt == "console":
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)
    else:
        logger.add(sys.stderr, format="{message}", level=level, serialize=True, diagnose=False)

    configure_structured_logging(level, fmt)


def get_logger(component: str):
    """
    Loguru logger bound to a component name.

    Example:
        >>> log = get_logger("cli")
        >>> log.info("Analyze command invoked")
    """
    return logger.bind(component=component)


configure_logging()

__all__ = ["logger", "get_logger", "configure_logging", "CONSOLE_FORMAT"]
