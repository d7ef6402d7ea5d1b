"""Shared logger lookup for Note Sight modules."""
import logging
from typing import Dict

# Loggers handed out so far, by name
_logger_cache: Dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """
    Get the logger for a module, creating it on first use.

    Levels and handlers are applied separately by
    ``logging_config.setup_logging``.

    Args:
        name: The full module name (e.g., 'note_sight.note_utils')

    Returns:
        The logger for ``name``
    """
    logger = _logger_cache.get(name)
    if logger is None:
        logger = _logger_cache[name] = logging.getLogger(name)
    return logger
