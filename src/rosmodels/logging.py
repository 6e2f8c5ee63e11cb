import logging
import os

from beartype import beartype
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

__all__ = ["configure_logging"]

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@beartype
def configure_logging(logger_name: str = "rosmodels") -> logging.Logger:
    """
    Configure rich logging with a custom theme.

    The log level is read from the ``LOG_LEVEL`` environment variable and
    falls back to ``INFO`` when unset or unrecognized.

    Args:
        logger_name: Name of the logger to return.

    Returns:
        logging.Logger: The configured logger.

    Examples:
        >>> logger = configure_logging("rosmodels.doctest")
        >>> logger.name
        'rosmodels.doctest'
    """
    console_theme = Theme(
        {
            "logging.level.info": "dim cyan",
            "logging.level.warning": "magenta",
            "logging.level.error": "bold red",
            "logging.level.debug": "green",
        }
    )
    console = Console(theme=console_theme)
    rich_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_time=True,
        show_level=True,
        show_path=False,
        markup=True,
        log_time_format="[%X]",
    )
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    if log_level not in VALID_LOG_LEVELS:
        log_level = "INFO"

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[rich_handler],
    )
    logger = logging.getLogger(logger_name)
    logger.setLevel(log_level)
    return logger
