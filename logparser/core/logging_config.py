"""
Logging configuration for command-line use.

Library modules only create named loggers; handlers are attached here, on
the package logger, when an application asks for them.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from .config import config


def setup_logging(
    logger_name: str = "logparser",
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        logger_name: Name of the logger (the package logger by default)
        level: Logging level; falls back to config.log_level
        log_file: Optional file for a rotating handler; falls back to config.log_file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)

    # Don't add handlers if logger already configured
    if logger.handlers:
        return logger

    level = (level or config.log_level).upper()
    log_file = log_file or config.log_file
    logger.setLevel(level)

    # Formatter for consistent output
    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler (stderr keeps stdout free for records)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
