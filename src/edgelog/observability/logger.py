"""Structured JSON logging with import_id support.

Uses structlog for structured logging with JSON output.
Every log entry includes an import_id so all row drops, detection
decisions and reconstruction summaries of one import can be correlated.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

import structlog

# Context var for import_id propagation
_import_id: ContextVar[str] = ContextVar("import_id", default="")


def get_import_id() -> str:
    """Get current import ID from context (empty outside an import)."""
    return _import_id.get()


def set_import_id(import_id: str) -> None:
    """Set import ID in context."""
    _import_id.set(import_id)


@contextmanager
def import_scope() -> Iterator[str]:
    """Bind a fresh import ID for the duration of the block.

    The previous value is restored on exit, so log lines written after
    an import finishes do not carry its ID.
    """
    token = _import_id.set(str(uuid.uuid4()))
    try:
        yield _import_id.get()
    finally:
        _import_id.reset(token)


def _add_import_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add import_id when one is active."""
    iid = get_import_id()
    if iid:
        event_dict["import_id"] = iid
    return event_dict


def setup_logging(
    level: str = "INFO",
    format: str = "json",
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for production, "console" for development.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _add_import_id,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route stdlib ``logging.getLogger(__name__)`` records from library
    # modules through the same renderer.
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)
