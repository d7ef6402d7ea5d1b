"""Centralized logging configuration for Note Sight.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "note_sight": logging.INFO,
    "note_sight.cli": logging.INFO,
    "note_sight.core": logging.INFO,
    # Per-frame code is noisy, only lifecycle messages by default
    "note_sight.detection": logging.INFO,
    "note_sight.services": logging.INFO,
    "note_sight.audio": logging.INFO,
    "note_sight.note_utils": logging.WARNING,
    "note_sight.instruments": logging.WARNING,
    "note_sight.logger": logging.WARNING,
    # Libraries/third-party
    "sounddevice": logging.WARNING,
    "soundfile": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'note_sight' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a single, shared console handler if it doesn't exist
    if _console_handler is None:
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
                if module_name.startswith("note_sight"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels. Package children propagate to the
    # "note_sight" logger, so only top-level entries get the handler.
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name if module_name else "")
        logger.setLevel(module_level)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        if "." in module_name:
            logger.propagate = True
            continue
        logger.addHandler(_console_handler)
        logger.propagate = False

    logging.getLogger("note_sight").debug("Logging configuration complete")
