"""Redaction helpers for DSNs, connection strings, and logged SQL."""

from __future__ import annotations

import re

REDACTED_VALUE = "***"

_SENSITIVE_KEY_TOKENS = (
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "apikey",
    "api_key",
    "access_key",
    "secret_key",
    "private_key",
    "sslkey",
    "ssl_key",
)

# Key=value pairs inside ADO-style connection strings ("Password=...;").
_CONNECTION_STRING_PAIR = re.compile(r"(?P<key>[^;=]+)=(?P<value>[^;]*)")


def _compact(value: str) -> str:
    return "".join(ch for ch in value if ch.isalnum())


def is_sensitive_key(key: str) -> bool:
    normalized = key.strip().lower()
    compact = _compact(normalized)
    for token in _SENSITIVE_KEY_TOKENS:
        if token in normalized or _compact(token) in compact:
            return True
    return False


def redact_query_params(query: dict[str, str]) -> dict[str, str]:
    return {key: REDACTED_VALUE if is_sensitive_key(key) else val for key, val in query.items()}


def redact_connection_string(connection_string: str) -> str:
    """
    Mask the values of credential keys in a ``Key=Value;`` connection string.
    """

    def _replace(match: re.Match[str]) -> str:
        key = match.group("key")
        if is_sensitive_key(key):
            return f"{key}={REDACTED_VALUE}"
        return match.group(0)

    return _CONNECTION_STRING_PAIR.sub(_replace, connection_string)
