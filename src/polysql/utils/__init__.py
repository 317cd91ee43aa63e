"""
Utility helpers shared across polysql packages.
"""

from .logging import (
    configure_logging,
    correlation_scope,
    get_correlation_id,
    get_logger,
    set_correlation_id,
    time_call,
)
from .performance import resolve_slow_query_ms

__all__ = [
    "configure_logging",
    "correlation_scope",
    "get_correlation_id",
    "get_logger",
    "resolve_slow_query_ms",
    "set_correlation_id",
    "time_call",
]
