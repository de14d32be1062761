"""
Central logging configuration for rrulekit.

Keeps third-party libraries quiet while rrulekit modules log at the requested
level. Debug mode and the root level can be overridden from the environment.
"""

import logging
import os
from typing import Optional

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Third-party loggers that only need to surface problems
_QUIET_LOGGERS = {
    "icalendar": logging.WARNING,
    "dateutil": logging.WARNING,
}


def configure_logging(debug_mode: bool = False, level: Optional[str] = None) -> None:
    """
    Configure logging for rrulekit.

    Args:
        debug_mode: Whether to enable debug logging for rrulekit modules
        level: Root log level name, used when debug mode is off

    Environment Variables:
        RRULEKIT_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        RRULEKIT_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("RRULEKIT_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("RRULEKIT_LOG_LEVEL", "").upper()

    final_debug = debug_mode or env_debug

    root_level = logging.INFO
    if level and level.upper() in _VALID_LEVELS:
        root_level = getattr(logging, level.upper())
    if env_log_level in _VALID_LEVELS:
        root_level = getattr(logging, env_log_level)
    if final_debug:
        root_level = logging.DEBUG

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Only add a handler if none exist, so host applications keep their own setup
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(root_level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)

    for logger_name, logger_level in _QUIET_LOGGERS.items():
        logging.getLogger(logger_name).setLevel(logger_level)

    logging.getLogger("rrulekit").setLevel(logging.DEBUG if final_debug else root_level)

    if final_debug:
        root_logger.debug("Debug logging enabled for rrulekit modules")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in ["rrulekit", *_QUIET_LOGGERS]:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status
