"""Logging configuration for Alias Platform."""

import logging
import sys
from typing import Optional

from .config import ENV_PROD

LOGGER_NAME = "alias_platform"


def setup_logging(env: str, level: Optional[str] = None) -> logging.Logger:
    """Configure the package logger.

    Args:
        env: Deployment environment ("local", "dev" or "prod"). Production
            logs at INFO, everything else at DEBUG.
        level: Explicit level name; overrides the environment default.

    Returns:
        The configured ``alias_platform`` logger.
    """
    default_level = logging.INFO if env == ENV_PROD else logging.DEBUG
    numeric_level = getattr(logging, level.upper(), default_level) if level else default_level

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    # Repeated app factory calls (tests) must not stack handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    return logging.getLogger(name)
