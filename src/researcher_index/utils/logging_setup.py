"""Loguru sink configuration shared by the CLI and scripts."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from loguru import logger

from researcher_index.utils.config import LoggingConfig

_TEXT_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> | <level>{message}</level>"
)


def setup_logging(config: LoggingConfig | None = None, *, verbose: bool = False) -> None:
    """Replace Loguru's default sink with the configured stderr/file sinks."""
    config = config or LoggingConfig()
    level = "DEBUG" if verbose else os.getenv("RESEARCHER_INDEX_LOG_LEVEL", config.level).upper()
    serialize = config.format == "json"

    logger.remove()
    if serialize:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=_TEXT_FORMAT)

    if config.file:
        target = Path(config.file)
        target.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(target),
            level="DEBUG",
            rotation=config.rotation,
            retention=config.retention,
            serialize=serialize,
        )
