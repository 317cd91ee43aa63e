"""Security helpers for polysql."""

from .dsns import DSNConfig, parse_dsn
from .redaction import redact_connection_string

__all__ = ["DSNConfig", "parse_dsn", "redact_connection_string"]
