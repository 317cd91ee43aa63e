"""
Exception hierarchy shared by the compiler, builders, and adapters.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when an engine token, DSN, or connection parameter is invalid."""


class ExpressionError(ValueError):
    """Raised when a filter expression has a malformed operator/value shape."""


class TypeNormalizationError(ValueError):
    """Raised when an engine reports a column type outside the canonical table."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f"Unknown DataType: {type_name}")
        self.type_name = type_name
