"""Logging configuration utilities"""
import logging
import sys
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the whole application.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=DEFAULT_FORMAT,
        stream=sys.stdout,
        force=True  # Force reconfiguration of root logger
    )

    # aiohttp access log is noisy with state polling
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def log_error_with_context(
    logger: logging.Logger,
    error: Exception,
    context: str,
    generation: Optional[int] = None
):
    """
    Log error with context information.

    Args:
        logger: Logger instance
        error: Exception object
        context: Context description
        generation: Optional workflow generation id
    """
    run_info = f"Run {generation} | " if generation is not None else ""
    logger.error(
        f"{run_info}{context}: {type(error).__name__}: {str(error)}",
        exc_info=error
    )
