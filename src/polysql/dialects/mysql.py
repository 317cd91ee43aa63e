"""
MySQL dialect implementation.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Final, Mapping

from ..schema.types import DataType
from .base import DialectCapabilities, Engine, flag_is, is_extended, iso_timestamp, split_table

if TYPE_CHECKING:
    from ..adapters.base import ConnectionConfig
    from ..schema.column import Column


DEFAULT_VARCHAR_LENGTH: Final[int] = 255
# Largest row count MySQL accepts; LIMIT has no "unbounded" spelling.
MAX_ROWS: Final[str] = "18446744073709551615"

_COLUMN_TYPES: Final[dict[DataType, str]] = {
    DataType.INT: "int",
    DataType.LONG: "bigint",
    DataType.DECIMAL: "decimal(18,4)",
    DataType.DATETIME: "datetime(6)",
}


class MySQLDialect:
    """
    MySQL dialect using backtick identifiers and LIMIT pagination.
    """

    engine: Final[Engine] = Engine.MYSQL
    capabilities: Final[DialectCapabilities] = DialectCapabilities(
        returns_inserted_row=False,
    )

    def quote_identifier(self, identifier: str) -> str:
        escaped = identifier.replace("`", "``")
        return f"`{escaped}`"

    def format_table(self, table_name: str) -> str:
        schema, table = split_table(table_name)
        if schema:
            return f"{self.quote_identifier(schema)}.{self.quote_identifier(table)}"
        return self.quote_identifier(table)

    def sanitize_string(self, value: str) -> str:
        return value.replace("\\", "\\\\").replace("'", "''")

    def quote_string_literal(self, value: str) -> str:
        literal = f"'{self.sanitize_string(value)}'"
        if is_extended(value):
            return f"N{literal}"
        return literal

    def format_timestamp(self, value: datetime | date) -> str:
        return iso_timestamp(value)

    def select_prefix(self, limit: int | None, offset: int | None) -> str:
        return ""

    def limit_clause(self, limit: int | None, offset: int | None, *, ordered: bool) -> str:
        if limit is None and offset is None:
            return ""
        if offset is None:
            return f"LIMIT {limit}"
        count = MAX_ROWS if limit is None else str(limit)
        return f"LIMIT {offset}, {count}"

    def insert_sql(self, table_name: str, columns: str, values: str) -> str:
        table = self.format_table(table_name)
        return f"INSERT INTO {table} ({columns}) VALUES ({values}); SELECT LAST_INSERT_ID() AS id;"

    def update_sql(self, table_name: str, assignments: str, where: str | None) -> str:
        sql = f"UPDATE {self.format_table(table_name)} SET {assignments}"
        if where:
            sql += f" WHERE {where}"
        return sql

    def delete_sql(self, table_name: str, where: str) -> str:
        return f"DELETE FROM {self.format_table(table_name)} WHERE {where}"

    def column_type(self, data_type: DataType, max_length: int | None) -> str:
        if data_type in _COLUMN_TYPES:
            return _COLUMN_TYPES[data_type]
        length = DEFAULT_VARCHAR_LENGTH if max_length is None else max_length
        if data_type is DataType.NVARCHAR:
            return f"nvarchar({length})"
        return f"varchar({length})"

    def render_column_definition(self, column: "Column") -> str:
        column_type = self.column_type(column.type, column.max_length)
        if column.primary_key and column.type in (DataType.INT, DataType.LONG):
            column_type += " AUTO_INCREMENT"
        nullable = column.nullable and not column.primary_key
        null_clause = "NULL" if nullable else "NOT NULL"
        return f"{self.quote_identifier(column.name)} {column_type} {null_clause}"

    def primary_key_clause(self, table_name: str, columns: list[str]) -> str:
        keys = ", ".join(self.quote_identifier(name) for name in columns)
        return f"PRIMARY KEY ({keys})"

    def drop_table_sql(self, table_name: str) -> str:
        return f"DROP TABLE IF EXISTS {self.format_table(table_name)}"

    def list_tables_query(self, database: str) -> str:
        return "SHOW TABLES"

    def list_columns_query(self, database: str, table_name: str) -> str:
        # MySQL schemas are databases: "shop.users" names the users table in shop.
        schema, table = split_table(table_name)
        return (
            "SELECT * FROM INFORMATION_SCHEMA.COLUMNS "
            f"WHERE TABLE_NAME = {self.quote_string_literal(table)} "
            f"AND TABLE_SCHEMA = {self.quote_string_literal(schema or database)} "
            "ORDER BY ORDINAL_POSITION"
        )

    def table_name_column(self, database: str) -> str:
        return f"Tables_in_{database}"

    def is_primary_key(self, row: Mapping[str, Any]) -> bool:
        return flag_is(row, "COLUMN_KEY", "pri")

    def connection_string(self, config: "ConnectionConfig") -> str:
        parts = [
            f"Server={config.host}",
            f"Port={config.port}",
            f"Database={config.database}",
            f"Uid={config.username or ''}",
            f"Pwd={config.password or ''}",
            "SslMode=none",
        ]
        return ";".join(parts)