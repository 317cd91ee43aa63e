"""
Dialect strategy interfaces describing per-engine SQL rendering behaviors.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Protocol

from ..errors import ConfigurationError

if TYPE_CHECKING:
    from ..adapters.base import ConnectionConfig
    from ..schema.column import Column
    from ..schema.types import DataType


class Engine(str, Enum):
    """
    Supported database engines.
    """

    MSSQL = "mssql"
    MYSQL = "mysql"
    PGSQL = "pgsql"

    @classmethod
    def parse(cls, value: "Engine | str | None") -> "Engine":
        if isinstance(value, Engine):
            return value
        if value is None or not str(value).strip():
            raise ConfigurationError("Database engine is required.")
        token = str(value).strip().lower()
        engine = _ENGINE_ALIASES.get(token)
        if engine is None:
            raise ConfigurationError(f"Unsupported database engine '{value}'.")
        return engine


_ENGINE_ALIASES = {
    "mssql": Engine.MSSQL,
    "sqlserver": Engine.MSSQL,
    "mysql": Engine.MYSQL,
    "pgsql": Engine.PGSQL,
    "postgres": Engine.PGSQL,
    "postgresql": Engine.PGSQL,
}


@dataclass(frozen=True)
class DialectCapabilities:
    """
    Feature flags describing how an engine reports statement results.
    """

    returns_inserted_row: bool = False


class Dialect(Protocol):
    """
    Strategy interface consumed across the compiler, builders, and introspector.
    """

    @property
    def engine(self) -> Engine: ...

    @property
    def capabilities(self) -> DialectCapabilities: ...

    def quote_identifier(self, identifier: str) -> str: ...

    def format_table(self, table_name: str) -> str: ...

    def sanitize_string(self, value: str) -> str: ...

    def quote_string_literal(self, value: str) -> str: ...

    def format_timestamp(self, value: datetime | date) -> str: ...

    def select_prefix(self, limit: int | None, offset: int | None) -> str: ...

    def limit_clause(self, limit: int | None, offset: int | None, *, ordered: bool) -> str: ...

    def insert_sql(self, table_name: str, columns: str, values: str) -> str: ...

    def update_sql(self, table_name: str, assignments: str, where: str | None) -> str: ...

    def delete_sql(self, table_name: str, where: str) -> str: ...

    def column_type(self, data_type: "DataType", max_length: int | None) -> str: ...

    def render_column_definition(self, column: "Column") -> str: ...

    def primary_key_clause(self, table_name: str, columns: list[str]) -> str: ...

    def drop_table_sql(self, table_name: str) -> str: ...

    def list_tables_query(self, database: str) -> str: ...

    def list_columns_query(self, database: str, table_name: str) -> str: ...

    def table_name_column(self, database: str) -> str: ...

    def is_primary_key(self, row: Mapping[str, Any]) -> bool: ...

    def connection_string(self, config: "ConnectionConfig") -> str: ...


def is_extended(value: str) -> bool:
    """
    True when ``value`` holds any character outside printable ASCII.
    """
    return any(ord(ch) < 32 or ord(ch) > 126 for ch in value)


def as_datetime(value: datetime | date) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def twelve_hour_timestamp(value: datetime | date) -> str:
    """
    ``MM/dd/yyyy hh:mm:ss.fffffff tt``: 12-hour clock, seven fractional digits.
    """
    ts = as_datetime(value)
    hour = ts.hour % 12 or 12
    marker = "AM" if ts.hour < 12 else "PM"
    return (
        f"{ts.month:02d}/{ts.day:02d}/{ts.year:04d} "
        f"{hour:02d}:{ts.minute:02d}:{ts.second:02d}.{ts.microsecond:06d}0 {marker}"
    )


def iso_timestamp(value: datetime | date) -> str:
    """
    ``yyyy-MM-dd HH:mm:ss.ffffff``: 24-hour clock, six fractional digits.
    """
    ts = as_datetime(value)
    return (
        f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d} "
        f"{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}.{ts.microsecond:06d}"
    )


def split_table(table_name: str) -> tuple[str | None, str]:
    if "." in table_name:
        schema, table = table_name.split(".", 1)
        return schema, table
    return None, table_name


def flag_is(row: Mapping[str, Any], key: str, expected: str) -> bool:
    value = row.get(key)
    if value is None:
        return False
    return str(value).strip().lower() == expected
