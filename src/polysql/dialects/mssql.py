"""
Microsoft SQL Server (T-SQL) dialect implementation.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Final, Mapping

from ..schema.types import DataType
from .base import (
    DialectCapabilities,
    Engine,
    is_extended,
    split_table,
    twelve_hour_timestamp,
)

if TYPE_CHECKING:
    from ..adapters.base import ConnectionConfig
    from ..schema.column import Column


_COLUMN_TYPES: Final[dict[DataType, str]] = {
    DataType.INT: "int",
    DataType.LONG: "bigint",
    DataType.DECIMAL: "decimal(18,4)",
    DataType.DATETIME: "datetime2",
}


class MSSQLDialect:
    """
    SQL Server dialect using bracket identifiers and ``N'...'`` wide strings.
    """

    engine: Final[Engine] = Engine.MSSQL
    capabilities: Final[DialectCapabilities] = DialectCapabilities(
        returns_inserted_row=True,
    )

    def quote_identifier(self, identifier: str) -> str:
        escaped = identifier.replace("]", "]]")
        return f"[{escaped}]"

    def format_table(self, table_name: str) -> str:
        schema, table = split_table(table_name)
        if schema:
            return f"{self.quote_identifier(schema)}.{self.quote_identifier(table)}"
        return self.quote_identifier(table)

    def sanitize_string(self, value: str) -> str:
        return value.replace("'", "''")

    def quote_string_literal(self, value: str) -> str:
        literal = f"'{self.sanitize_string(value)}'"
        if is_extended(value):
            return f"N{literal}"
        return literal

    def format_timestamp(self, value: datetime | date) -> str:
        return twelve_hour_timestamp(value)

    def select_prefix(self, limit: int | None, offset: int | None) -> str:
        if limit is not None and offset is None:
            return f"TOP {limit}"
        return ""

    def limit_clause(self, limit: int | None, offset: int | None, *, ordered: bool) -> str:
        if offset is None:
            return ""
        # OFFSET/FETCH is only legal after an ORDER BY.
        parts: list[str] = [] if ordered else ["ORDER BY (SELECT NULL)"]
        parts.append(f"OFFSET {offset} ROWS")
        if limit is not None:
            parts.append(f"FETCH NEXT {limit} ROWS ONLY")
        return " ".join(parts)

    def insert_sql(self, table_name: str, columns: str, values: str) -> str:
        table = self.format_table(table_name)
        return f"INSERT INTO {table} WITH (ROWLOCK) ({columns}) OUTPUT INSERTED.* VALUES ({values})"

    def update_sql(self, table_name: str, assignments: str, where: str | None) -> str:
        table = self.format_table(table_name)
        sql = f"UPDATE {table} WITH (ROWLOCK) SET {assignments} OUTPUT INSERTED.*"
        if where:
            sql += f" WHERE {where}"
        return sql

    def delete_sql(self, table_name: str, where: str) -> str:
        return f"DELETE FROM {self.format_table(table_name)} WITH (ROWLOCK) WHERE {where}"

    def column_type(self, data_type: DataType, max_length: int | None) -> str:
        if data_type in _COLUMN_TYPES:
            return _COLUMN_TYPES[data_type]
        length = "max" if max_length is None else str(max_length)
        if data_type is DataType.NVARCHAR:
            return f"nvarchar({length})"
        return f"varchar({length})"

    def render_column_definition(self, column: "Column") -> str:
        column_type = self.column_type(column.type, column.max_length)
        if column.primary_key and column.type in (DataType.INT, DataType.LONG):
            column_type += " IDENTITY(1,1)"
        nullable = column.nullable and not column.primary_key
        null_clause = "NULL" if nullable else "NOT NULL"
        return f"{self.quote_identifier(column.name)} {column_type} {null_clause}"

    def primary_key_clause(self, table_name: str, columns: list[str]) -> str:
        _, table = split_table(table_name)
        keys = ", ".join(f"{self.quote_identifier(name)} ASC" for name in columns)
        constraint = self.quote_identifier(f"PK_{table}")
        return f"CONSTRAINT {constraint} PRIMARY KEY CLUSTERED ({keys})"

    def drop_table_sql(self, table_name: str) -> str:
        return f"DROP TABLE IF EXISTS {self.format_table(table_name)}"

    def list_tables_query(self, database: str) -> str:
        return (
            f"SELECT TABLE_NAME FROM {self.quote_identifier(database)}.INFORMATION_SCHEMA.TABLES "
            "WHERE TABLE_TYPE = 'BASE TABLE'"
        )

    def list_columns_query(self, database: str, table_name: str) -> str:
        schema, table = split_table(table_name)
        # Unqualified names resolve against the caller's default schema, as in a SELECT.
        schema_filter = self.quote_string_literal(schema) if schema else "SCHEMA_NAME()"
        return (
            "SELECT col.TABLE_NAME, col.COLUMN_NAME, col.IS_NULLABLE, col.DATA_TYPE, "
            "col.CHARACTER_MAXIMUM_LENGTH, con.CONSTRAINT_NAME "
            f"FROM {self.quote_identifier(database)}.INFORMATION_SCHEMA.COLUMNS col "
            f"LEFT JOIN {self.quote_identifier(database)}.INFORMATION_SCHEMA.KEY_COLUMN_USAGE con "
            "ON con.COLUMN_NAME = col.COLUMN_NAME AND con.TABLE_NAME = col.TABLE_NAME "
            "AND con.TABLE_SCHEMA = col.TABLE_SCHEMA "
            f"WHERE col.TABLE_NAME = {self.quote_string_literal(table)} "
            f"AND col.TABLE_SCHEMA = {schema_filter} "
            f"AND col.TABLE_CATALOG = {self.quote_string_literal(database)} "
            "ORDER BY col.ORDINAL_POSITION"
        )

    def table_name_column(self, database: str) -> str:
        return "TABLE_NAME"

    def is_primary_key(self, row: Mapping[str, Any]) -> bool:
        constraint = row.get("CONSTRAINT_NAME")
        if constraint is None:
            return False
        return str(constraint).lower().startswith("pk")

    def connection_string(self, config: "ConnectionConfig") -> str:
        source = config.host
        if config.instance:
            source += f"\\{config.instance}"
        if config.port:
            source += f",{config.port}"
        parts = [f"Data Source={source}", f"Initial Catalog={config.database}"]
        if config.username:
            parts.append(f"User ID={config.username}")
            parts.append(f"Password={config.password or ''}")
        else:
            parts.append("Integrated Security=SSPI")
        return ";".join(parts) + ";"