"""Structured logging setup for the engine."""
from __future__ import annotations

import logging
import sys

import structlog

from .config import EngineConfig


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structlog on top of the standard logging module.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_output: Render JSON lines instead of the console renderer
    """
    use_console = sys.stderr.isatty() and not json_output
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer() if use_console else structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger = logging.getLogger("seedbound")
    package_logger.handlers = [handler]
    package_logger.setLevel(level)
    package_logger.propagate = False


def setup_logging_from_config(config: EngineConfig) -> None:
    setup_logging(config.log_level, json_output=config.log_json)

