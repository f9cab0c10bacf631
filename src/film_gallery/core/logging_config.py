"""Centralized logging configuration for film-gallery."""

import os
import sys
import logging
from typing import Optional


def setup_logger(
    name: str = "film-gallery",
    level: Optional[str] = None,
    format_type: str = "simple",
) -> logging.Logger:
    """
    Setup centralized logging with environment variable configuration.

    Args:
        name: Logger name (defaults to "film-gallery")
        level: Log level override (defaults to env var or INFO)
        format_type: Logging format ("structured" or "simple")

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: Set format type ("structured" or "simple")
    """
    logger = logging.getLogger(name)

    # Determine log level from parameter, env var, or default
    if level:
        log_level = getattr(logging, level.upper(), logging.INFO)
    else:
        env_level = os.getenv("LOG_LEVEL", "INFO").upper()
        log_level = getattr(logging, env_level, logging.INFO)

    logger.setLevel(log_level)

    # Avoid duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)

        # Determine format from parameter or env var
        env_format = os.getenv("LOG_FORMAT", format_type).lower()

        if env_format == "structured":
            # Structured logging format with more context
            formatter = logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)-8s | "
                "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        else:
            # Simple format for basic use cases
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Prevent duplicate log messages on the root logger
    logger.propagate = False
    return logger


def get_logger(name: str = "film-gallery") -> logging.Logger:
    """
    Get a logger instance with consistent configuration.

    Component loggers are plain children of "film-gallery": they carry no
    handler or level of their own, so the root's handler and level (including
    ``set_debug_logging``) apply to all of them.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    if name == "film-gallery":
        return setup_logger(name)
    if not name.startswith("film-gallery."):
        name = f"film-gallery.{name}"
    return logging.getLogger(name)


def set_debug_logging() -> None:
    """Switch the film-gallery logger hierarchy to DEBUG."""
    logging.getLogger("film-gallery").setLevel(logging.DEBUG)


# Create default logger instance
logger = setup_logger()
