"""Centralized logging configuration for Piano Listener.

This module provides a consistent way to configure logging across the application.
Status lines printed by the reporters go to stdout, so log records go to stderr.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "piano_listener": logging.INFO,
    "piano_listener.cli": logging.INFO,
    "piano_listener.core": logging.INFO,
    # Detection pipeline
    "piano_listener.note_table": logging.INFO,
    "piano_listener.note_matcher": logging.INFO,
    "piano_listener.detection": logging.INFO,  # Set to DEBUG to trace harmonic correction
    # Audio plumbing
    "piano_listener.audio": logging.INFO,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'piano_listener' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Replace the shared handler so it always targets the current stderr
    old_handler = _console_handler
    _console_handler = logging.StreamHandler(sys.stderr)
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
                if module_name.startswith("piano_listener"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name if module_name else "")
        logger.setLevel(module_level)

        # Clear existing handlers and add the shared one
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.addHandler(_console_handler)
        logger.propagate = False

    if old_handler is not None:
        old_handler.close()

    # Confirm setup complete
    logging.getLogger("piano_listener").debug("Logging configuration complete")

