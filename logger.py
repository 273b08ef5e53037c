"""
Logging configuration for the PoseNet output decoder.
Provides structured logging with console and optional file output.
"""

import logging
import sys
from config import LogConfig


def setup_logger(name: str = "posenet") -> logging.Logger:
    """
    Set up and return a configured logger instance.

    Args:
        name: Logger name (default: "posenet")

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    level = getattr(logging, LogConfig.LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt=LogConfig.FORMAT,
        datefmt=LogConfig.DATE_FORMAT
    )

    # Console handler (always enabled)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler (optional)
    if LogConfig.FILE:
        file_handler = logging.FileHandler(LogConfig.FILE)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(module_name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        module_name: Name of the module (e.g., "pose.single", "pose.multiple")

    Returns:
        Logger instance for the module
    """
    return setup_logger(f"posenet.{module_name}")
