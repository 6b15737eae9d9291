"""
Module: logger.py
Description: Structured logging configuration for the delivery service.

Configures structlog for JSON output. Deferred deliveries run long after
the request that scheduled them, so correlation data is carried through
structlog contextvars rather than the request.

Key Components:
- JSON output with timestamp and log level processors
- Context binding via structlog.contextvars
- configure_logging() to set the minimum level
- get_logger() helper function

Dependencies: structlog, logging, datetime
Author: Channel Delivery Team
"""

import logging
from datetime import datetime, timezone

import structlog


def _add_timestamp(logger, method_name, event_dict):
    """
    Add ISO 8601 UTC timestamp to log entries.

    Args:
        logger: Logger instance
        method_name: Log method name (info, error, etc.)
        event_dict: Current log event dictionary

    Returns:
        Updated event dictionary with timestamp
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return event_dict


def _add_log_level(logger, method_name, event_dict):
    """Add the upper-cased log level to the event dictionary."""
    event_dict["level"] = method_name.upper()
    return event_dict


def configure_logging(level: str = "INFO") -> None:
    """
    Configure structlog for JSON output at the given minimum level.

    Safe to call more than once; the latest call wins for loggers
    created afterwards.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    structlog.configure(
        processors=[
            # Merge context bound with structlog.contextvars
            structlog.contextvars.merge_contextvars,
            _add_timestamp,
            _add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.WriteLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        cache_logger_on_first_use=False,
    )


configure_logging()


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Delivery scheduled", channel_ref="ch-1", delay_ms=5000)
        {"channel_ref": "ch-1", "delay_ms": 5000, "event": "Delivery scheduled", "timestamp": "...", "level": "INFO"}
    """
    return structlog.get_logger(name)
