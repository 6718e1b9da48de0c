"""Correlation ID logging context for tracing availability queries.

Provides a query_id-aware logger that attaches a correlation ID to every
log message, so the roster lookup, booking fetch and slot computation
of one caller request can be read together.

Usage:
    from chairtime.logging_context import get_query_logger, new_query_id

    new_query_id()
    logger = get_query_logger(__name__)
    logger.info("Resolving slots")  # record.query_id == "Q-1a2b3c"
"""

import logging
import uuid
from contextvars import ContextVar

_query_id: ContextVar[str] = ContextVar("query_id", default="NO_QUERY_ID")


def set_query_id(query_id: str) -> None:
    """Set the correlation ID for the current async context."""
    _query_id.set(query_id)


def get_query_id() -> str:
    """Retrieve the current correlation ID."""
    return _query_id.get()


def new_query_id() -> str:
    """Generate, set and return a fresh correlation ID."""
    query_id = f"Q-{uuid.uuid4().hex[:6]}"
    _query_id.set(query_id)
    return query_id


class QueryIdFilter(logging.Filter):
    """Injects query_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.query_id = _query_id.get()  # type: ignore[attr-defined]
        return True


def get_query_logger(name: str) -> logging.Logger:
    """Return a logger with the QueryIdFilter attached.

    The filter adds ``query_id`` to each record so formatters can
    include ``%(query_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, QueryIdFilter) for f in logger.filters):
        logger.addFilter(QueryIdFilter())
    return logger
