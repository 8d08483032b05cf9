"""Centralized logging configuration."""

import sys

from loguru import logger

LOG_FORMAT = " | ".join(
    (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>",
        "<level>{level:<8}</level>",
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )
)


def configure_logging(level: str = "INFO") -> None:
    # Replace loguru's default handler so every record goes through one format
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level.upper())
