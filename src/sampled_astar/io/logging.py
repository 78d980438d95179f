"""Define utility functions to simplify logging to the CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("sampled_astar")
console = Console()


def configure_logging(level: int = logging.INFO) -> None:
    """Route the package's log records through a Rich handler on the shared console."""
    logger.setLevel(level)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(RichHandler(console=console, show_path=False))


def log_info(message: str) -> None:
    """Log the given string at the INFO level."""
    logger.info(message)


def log_debug(message: str) -> None:
    """Log the given string at the DEBUG level."""
    logger.debug(message)
