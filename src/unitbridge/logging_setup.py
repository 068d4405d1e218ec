"""Logging configuration for UnitBridge.

Provides one structured logging setup for the CLI, the MCP server and
library users who want UnitBridge's debug events.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, List, Optional, TextIO

import structlog

from .config import UnitBridgeSettings, get_settings

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Default configuration for different environments
CONFIGS: Dict[str, Dict[str, Any]] = {
    "development": {
        "level": "DEBUG",
        "enable_colors": True,
        "enable_json": False,
    },
    "production": {
        "level": "INFO",
        "enable_colors": False,
        "enable_json": True,
    },
    "testing": {
        "level": "WARNING",
        "enable_colors": False,
        "enable_json": False,
    },
}


def configure_logging(
    level: str = "INFO",
    enable_colors: bool = True,
    enable_json: bool = False,
    extra_processors: List[Any] | None = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure structured logging for UnitBridge.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        enable_colors: Enable colored output for console
        enable_json: Use JSON output format
        extra_processors: Additional structlog processors
        stream: Output stream; the MCP server passes stderr since stdout
            carries the protocol
    """
    stream = stream or sys.stderr
    numeric_level = LOG_LEVELS[level.upper()]

    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
    ]

    if extra_processors:
        processors.extend(extra_processors)

    if enable_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=enable_colors and stream.isatty())
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.WriteLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def configure_from_settings(
    settings: Optional[UnitBridgeSettings] = None,
    stream: Optional[TextIO] = None,
) -> Dict[str, Any]:
    """Apply the preset for the configured environment.

    ``log_level`` in the settings overrides the preset's level.

    Returns:
        The configuration that was applied
    """
    settings = settings or get_settings()
    config = dict(CONFIGS[settings.environment])
    if settings.log_level:
        config["level"] = settings.log_level
    configure_logging(stream=stream, **config)
    return config
