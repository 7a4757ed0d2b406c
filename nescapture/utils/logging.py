"""Logging configuration."""

import logging
import sys
from pathlib import Path
from typing import Optional

from ..config.settings import LoggingConfig


def setup_logging(config: LoggingConfig, level_override: Optional[str] = None) -> None:
    """
    Set up logging configuration.

    Args:
        config: Logging configuration.
        level_override: Level name that replaces config.level (from --verbose/--quiet).
    """
    level_name = (level_override or config.level).upper()
    level = getattr(logging, level_name, logging.INFO)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    root_logger.handlers.clear()

    # File handler
    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        root_logger.addHandler(file_handler)

    # Console handler
    if config.console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(config.format))
        root_logger.addHandler(console_handler)

    logging.debug(f"Logging configured: level={level_name}, file={config.file}")
