"""
Central logging configuration for cerebro_calendar.

Sets package logger levels, keeps third-party libraries quiet and installs a
colorized console handler when the host application has not configured one.
"""

import logging
import os
import sys
from typing import Optional

from colorlog import ColoredFormatter

PACKAGE_LOGGER = "cerebro_calendar"

PACKAGE_MODULES = [
    PACKAGE_LOGGER,
    "cerebro_calendar.rrule_expander",
    "cerebro_calendar.day_layout",
    "cerebro_calendar.occurrence_edits",
    "cerebro_calendar.reports",
    "cerebro_calendar.config_loader",
    "cerebro_calendar.calendar_utils",
]

# Third-party libraries kept at WARNING unless reset for troubleshooting
SUPPRESSED_LOGGERS = [
    "dateutil",
    "yaml",
]

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


def _build_console_handler(level: int) -> logging.Handler:
    """Create a stderr handler that colorizes only the level name."""
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(level)
    fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
    handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=LOG_COLORS))
    return handler


def configure_logging(
    debug_mode: bool = False,
    force_debug: Optional[bool] = None,
    log_level: Optional[str] = None,
) -> None:
    """
    Configure logging levels for cerebro_calendar.

    Debug mode can be overridden via environment variable for troubleshooting.

    Args:
        debug_mode: Whether to enable debug logging for cerebro_calendar modules
        force_debug: Override debug mode setting (None to use env var detection)
        log_level: Root log level name, usually `Config.log_level`; debug mode
            and CEREBRO_LOG_LEVEL take precedence, and it is ignored
            when not one of DEBUG, INFO, WARNING, ERROR

    Environment Variables:
        CEREBRO_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        CEREBRO_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("CEREBRO_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("CEREBRO_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    configured_level = (log_level or "").upper()
    if not final_debug and configured_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, configured_level)
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Only add a handler if the host application has not configured one
    if not root_logger.handlers:
        root_logger.addHandler(_build_console_handler(root_level))

    logger_config: dict[str, int] = {name: logging.WARNING for name in SUPPRESSED_LOGGERS}
    package_level = logging.DEBUG if final_debug else logging.INFO
    for module in PACKAGE_MODULES:
        logger_config[module] = package_level

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.info("Debug logging enabled for cerebro_calendar modules.")
    else:
        root_logger.info("Production logging configuration applied.")


def reset_logging_to_debug() -> None:
    """
    Reset all loggers to DEBUG level for troubleshooting.
    """
    logging.getLogger().setLevel(logging.DEBUG)

    for logger_name in SUPPRESSED_LOGGERS + PACKAGE_MODULES:
        logging.getLogger(logger_name).setLevel(logging.DEBUG)

    logging.getLogger().info("All loggers reset to DEBUG level for troubleshooting")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in [PACKAGE_LOGGER, "cerebro_calendar.rrule_expander", "dateutil"]:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status
