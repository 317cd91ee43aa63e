"""
PostgreSQL dialect implementation.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Final, Mapping

from ..schema.types import DataType
from .base import (
    DialectCapabilities,
    Engine,
    flag_is,
    is_extended,
    split_table,
    twelve_hour_timestamp,
)

if TYPE_CHECKING:
    from ..adapters.base import ConnectionConfig
    from ..schema.column import Column


_COLUMN_TYPES: Final[dict[DataType, str]] = {
    DataType.INT: "integer",
    DataType.LONG: "bigint",
    DataType.DECIMAL: "numeric",
    DataType.DATETIME: "timestamp without time zone",
}

_SERIAL_TYPES: Final[dict[DataType, str]] = {
    DataType.INT: "serial",
    DataType.LONG: "bigserial",
}


def _unicode_escape(value: str) -> str:
    """
    Body of a ``U&'...'`` literal: backslash doubled, quote doubled, and every
    character outside printable ASCII written as ``\\XXXX`` or ``\\+XXXXXX``.
    """
    pieces: list[str] = []
    for ch in value:
        code = ord(ch)
        if ch == "\\":
            pieces.append("\\\\")
        elif ch == "'":
            pieces.append("''")
        elif 32 <= code <= 126:
            pieces.append(ch)
        elif code <= 0xFFFF:
            pieces.append(f"\\{code:04X}")
        else:
            pieces.append(f"\\+{code:06X}")
    return "".join(pieces)


class PostgresDialect:
    """
    PostgreSQL dialect using double-quoted identifiers and RETURNING clauses.
    """

    engine: Final[Engine] = Engine.PGSQL
    capabilities: Final[DialectCapabilities] = DialectCapabilities(
        returns_inserted_row=True,
    )

    def quote_identifier(self, identifier: str) -> str:
        escaped = identifier.replace('"', '""')
        return f'"{escaped}"'

    def format_table(self, table_name: str) -> str:
        schema, table = split_table(table_name)
        if schema:
            return f"{self.quote_identifier(schema)}.{self.quote_identifier(table)}"
        return self.quote_identifier(table)

    def sanitize_string(self, value: str) -> str:
        return value.replace("'", "''")

    def quote_string_literal(self, value: str) -> str:
        if is_extended(value):
            return f"U&'{_unicode_escape(value)}'"
        return f"'{self.sanitize_string(value)}'"

    def format_timestamp(self, value: datetime | date) -> str:
        return twelve_hour_timestamp(value)

    def select_prefix(self, limit: int | None, offset: int | None) -> str:
        return ""

    def limit_clause(self, limit: int | None, offset: int | None, *, ordered: bool) -> str:
        parts: list[str] = []
        if limit is not None:
            parts.append(f"LIMIT {limit}")
        if offset is not None:
            parts.append(f"OFFSET {offset}")
        return " ".join(parts)

    def insert_sql(self, table_name: str, columns: str, values: str) -> str:
        table = self.format_table(table_name)
        return f"INSERT INTO {table} ({columns}) VALUES ({values}) RETURNING *"

    def update_sql(self, table_name: str, assignments: str, where: str | None) -> str:
        sql = f"UPDATE {self.format_table(table_name)} SET {assignments}"
        if where:
            sql += f" WHERE {where}"
        return sql + " RETURNING *"

    def delete_sql(self, table_name: str, where: str) -> str:
        return f"DELETE FROM {self.format_table(table_name)} WHERE {where}"

    def column_type(self, data_type: DataType, max_length: int | None) -> str:
        if data_type in _COLUMN_TYPES:
            return _COLUMN_TYPES[data_type]
        if data_type is DataType.NVARCHAR:
            if max_length is None:
                return "character varying"
            return f"character varying({max_length})"
        if max_length is None:
            return "text"
        return f"varchar({max_length})"

    def render_column_definition(self, column: "Column") -> str:
        if column.primary_key and column.type in _SERIAL_TYPES:
            column_type = _SERIAL_TYPES[column.type]
        else:
            column_type = self.column_type(column.type, column.max_length)
        nullable = column.nullable and not column.primary_key
        null_clause = "NULL" if nullable else "NOT NULL"
        return f"{self.quote_identifier(column.name)} {column_type} {null_clause}"

    def primary_key_clause(self, table_name: str, columns: list[str]) -> str:
        keys = ", ".join(self.quote_identifier(name) for name in columns)
        return f"PRIMARY KEY ({keys})"

    def drop_table_sql(self, table_name: str) -> str:
        return f"DROP TABLE IF EXISTS {self.format_table(table_name)}"

    def list_tables_query(self, database: str) -> str:
        return (
            "SELECT * FROM pg_catalog.pg_tables "
            "WHERE schemaname != 'pg_catalog' AND schemaname != 'information_schema'"
        )

    def list_columns_query(self, database: str, table_name: str) -> str:
        schema, table = split_table(table_name)
        schema_filter = self.quote_string_literal(schema) if schema else "current_schema()"
        return (
            'SELECT cols.column_name AS "COLUMN_NAME", cols.is_nullable AS "IS_NULLABLE", '
            'cols.data_type AS "DATA_TYPE", '
            'cols.character_maximum_length AS "CHARACTER_MAXIMUM_LENGTH", '
            "CASE WHEN pk.column_name IS NULL THEN 'NO' ELSE 'YES' END AS \"IS_PRIMARY_KEY\" "
            "FROM information_schema.columns cols "
            "LEFT JOIN (SELECT kcu.table_schema, kcu.table_name, kcu.column_name "
            "FROM information_schema.table_constraints tc "
            "JOIN information_schema.key_column_usage kcu "
            "ON tc.constraint_name = kcu.constraint_name AND tc.table_schema = kcu.table_schema "
            "WHERE tc.constraint_type = 'PRIMARY KEY') pk "
            "ON pk.table_schema = cols.table_schema AND pk.table_name = cols.table_name "
            "AND pk.column_name = cols.column_name "
            f"WHERE cols.table_name = {self.quote_string_literal(table)} "
            f"AND cols.table_schema = {schema_filter} "
            f"AND cols.table_catalog = {self.quote_string_literal(database)} "
            "ORDER BY cols.ordinal_position"
        )

    def table_name_column(self, database: str) -> str:
        return "tablename"

    def is_primary_key(self, row: Mapping[str, Any]) -> bool:
        return flag_is(row, "IS_PRIMARY_KEY", "yes")

    def connection_string(self, config: "ConnectionConfig") -> str:
        parts = [
            f"Server={config.host}",
            f"Port={config.port}",
            f"Database={config.database}",
            f"User ID={config.username or ''}",
            f"Password={config.password or ''}",
        ]
        return ";".join(parts) + ";"