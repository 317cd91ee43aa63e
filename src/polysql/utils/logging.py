"""
Logging helpers for polysql.

Every record emitted under the ``polysql`` logger carries a ``correlation_id``
attribute. A client tags its queries with a fixed id through
:func:`correlation_scope`; code outside any scope gets one id per context,
generated on first use.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

ROOT_LOGGER = "polysql"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(correlation_id)s | %(name)s | %(message)s"

_correlation_id: ContextVar[str | None] = ContextVar("polysql_correlation_id", default=None)


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id()
        return True


def configure_logging(level: int = logging.INFO) -> None:
    """Attach a stream handler to the package logger, once."""
    logger = logging.getLogger(ROOT_LOGGER)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(CorrelationIdFilter())
    logger.addHandler(handler)
    logger.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def set_correlation_id(value: Optional[str] = None) -> str:
    token = value or uuid.uuid4().hex
    _correlation_id.set(token)
    return token


def get_correlation_id() -> str:
    current = _correlation_id.get()
    if current is None:
        current = set_correlation_id()
    return current


@contextmanager
def correlation_scope(value: Optional[str] = None) -> Iterator[str]:
    """
    Tag records logged inside the block with ``value``.

    With no value the surrounding id is kept, or a fresh one generated. The
    previous id is restored on exit.
    """
    cid = value or get_correlation_id()
    reset_token = _correlation_id.set(cid)
    try:
        yield cid
    finally:
        _correlation_id.reset(reset_token)


class QueryTimer:
    """
    Context manager logging how long the wrapped block took.

    Elapsed time at or above ``threshold_ms`` is logged at WARNING, anything
    faster at DEBUG. ``extra`` carries the SQL text, the elapsed time, whether
    the block raised, and the correlation id current when it finished.
    """

    def __init__(self, name: str, logger: logging.Logger, sql: str | None, threshold_ms: int) -> None:
        self.name = name
        self.logger = logger
        self.sql = sql
        self.threshold_ms = threshold_ms
        self.elapsed_ms = 0.0
        self._started = 0.0

    def __enter__(self) -> "QueryTimer":
        self._started = time.monotonic()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.elapsed_ms = (time.monotonic() - self._started) * 1000
        level = logging.WARNING if self.elapsed_ms >= self.threshold_ms else logging.DEBUG
        extra = {
            "sql": self.sql,
            "elapsed_ms": self.elapsed_ms,
            "failed": exc_type is not None,
            "correlation_id": get_correlation_id(),
        }
        self.logger.log(level, "%s took %.2fms", self.name, self.elapsed_ms, extra=extra)


def time_call(name: str, logger: logging.Logger, *, sql: str | None = None, threshold_ms: int = 100) -> QueryTimer:
    return QueryTimer(name, logger, sql, threshold_ms)
