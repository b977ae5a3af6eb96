"""
Structured Logging Configuration
Centralized structlog setup shared by every RecordStore
"""
from __future__ import annotations

import logging
import sys
from typing import Any, Optional

import structlog

from recordstore.config import get_settings


def configure_logging(log_level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure structured logging for the application.

    Sets up structlog with processors for:
    - Adding timestamps
    - Adding log levels and logger names
    - Merging bound context (table, operation, correlation ids)
    - JSON formatting (production) or console (development)

    Args:
        log_level: Logging level; defaults to ``Settings.log_level``
        json_logs: JSON output; defaults to ``Settings.json_logs``
    """
    if log_level is None or json_logs is None:
        settings = get_settings()
        log_level = log_level or settings.log_level
        json_logs = settings.json_logs if json_logs is None else json_logs

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **initial_values: Any) -> Any:
    """
    Get a structured logger instance.

    Usage:
        logger = get_logger(__name__, table="items")
        logger.debug("Reading item", id=item_id)
    """
    return structlog.get_logger(name, **initial_values)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables (e.g. request or correlation ids) to all subsequent log entries."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
