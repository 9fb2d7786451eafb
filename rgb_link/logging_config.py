"""
Standardized logging configuration for rgb-link

Provides consistent logging setup for applications and CLI tools built on
the connection manager.
"""

import logging
import os
from typing import Optional, Union


DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
VERBOSE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"


def configure_logging(
    level: Union[str, int] = "INFO",
    format_string: Optional[str] = None,
    verbose: bool = False
) -> None:
    """
    Configure standardized logging

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string, uses default if None
        verbose: If True, adds file names and line numbers to each record
    """
    if isinstance(level, str):
        log_level = getattr(logging, level.upper(), logging.INFO)
    else:
        log_level = level

    if format_string is None:
        format_string = VERBOSE_FORMAT if verbose else DEFAULT_FORMAT

    logging.basicConfig(
        level=log_level,
        format=format_string,
        force=True  # Override any existing configuration
    )


def configure_cli_logging(verbose: bool = False, level: Optional[str] = None) -> None:
    """
    Configure logging for CLI tools

    Args:
        verbose: If True, show DEBUG level with source locations
        level: Level to use when not verbose, defaults to $RGB_LINK_LOG_LEVEL or WARNING
    """
    if verbose:
        configure_logging(level="DEBUG", verbose=True)
    else:
        configure_logging(
            level=level or os.getenv("RGB_LINK_LOG_LEVEL", "WARNING"),
            format_string="%(asctime)s - %(levelname)s - %(message)s"
        )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with consistent naming

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
