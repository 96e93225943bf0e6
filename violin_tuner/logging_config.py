"""Centralized logging configuration for the violin tuner.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "violin_tuner": logging.INFO,
    "violin_tuner.session": logging.INFO,
    # Signal processing
    "violin_tuner.dsp": logging.INFO,
    "violin_tuner.detection": logging.INFO,  # Set to DEBUG to log every estimate
    "violin_tuner.tuning": logging.INFO,
    # Collaborators
    "violin_tuner.core": logging.INFO,
    "violin_tuner.audio": logging.INFO,
    "violin_tuner.cli": logging.WARNING,  # CLI output goes through click.echo
    "violin_tuner.logger": logging.WARNING,  # Logger module itself should be quiet
    # Libraries/third-party
    "sounddevice": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'violin_tuner' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a single, shared console handler, again if sys.stdout was replaced
    if _console_handler is None or _console_handler.stream is not sys.stdout:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)

    # Determine log levels
    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("violin_tuner"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels. Child modules (violin_tuner.detection.smoother)
    # inherit from the nearest configured package logger and propagate to it.
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name if module_name else "")
        logger.setLevel(module_level)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        if module_name in ("violin_tuner", "sounddevice", ""):
            logger.addHandler(_console_handler)
            logger.propagate = False
        else:
            logger.propagate = True

    logging.getLogger("violin_tuner").info("Logging configuration complete")
