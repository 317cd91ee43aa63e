"""
polysql public package initialization.

Exposes the database client together with the expression, schema, and dialect
building blocks it is assembled from.
"""

from .adapters import ConnectionConfig, ResultSet  # noqa: F401
from .client import DatabaseClient  # noqa: F401
from .dialects import Engine, get_dialect  # noqa: F401
from .errors import ConfigurationError, ExpressionError, TypeNormalizationError  # noqa: F401
from .query import (
    Condition,
    ExpressionCompiler,
    Junction,
    Operator,
    StatementBuilder,
    all_of,
    always_true,
    any_of,
)  # noqa: F401
from .schema import Column, DataType, SchemaBuilder, SchemaIntrospector, normalize_type  # noqa: F401

__all__ = [
    "DatabaseClient",
    "ConnectionConfig",
    "ResultSet",
    "Engine",
    "get_dialect",
    "Condition",
    "Junction",
    "Operator",
    "all_of",
    "any_of",
    "always_true",
    "ExpressionCompiler",
    "StatementBuilder",
    "Column",
    "DataType",
    "SchemaBuilder",
    "SchemaIntrospector",
    "normalize_type",
    "ConfigurationError",
    "ExpressionError",
    "TypeNormalizationError",
]
