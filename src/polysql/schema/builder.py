"""
Schema builder converting column descriptors into DDL statements.
"""

from __future__ import annotations

from typing import List, Sequence

from ..dialects.base import Dialect
from ..utils import get_logger
from .column import Column


class SchemaBuilder:
    """
    Produces dialect-specific SQL for schema manipulation.
    """

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect
        self.logger = get_logger("schema.builder")

    def create_table_sql(self, table_name: str, columns: Sequence[Column]) -> str:
        if not table_name:
            raise ValueError("table_name is required")
        if not columns:
            raise ValueError("columns are required")
        definitions = self._render_columns(columns)
        primary_keys = [column.name for column in columns if column.primary_key]
        if primary_keys:
            definitions.append(self.dialect.primary_key_clause(table_name, primary_keys))
        table = self.dialect.format_table(table_name)
        return f"CREATE TABLE {table} ({', '.join(definitions)})"

    def drop_table_sql(self, table_name: str) -> str:
        if not table_name:
            raise ValueError("table_name is required")
        sql = self.dialect.drop_table_sql(table_name)
        self.logger.warning(
            "DROP TABLE generated for %s; confirm destructive operation before applying.",
            self.dialect.format_table(table_name),
        )
        return sql

    def truncate_table_sql(self, table_name: str) -> str:
        if not table_name:
            raise ValueError("table_name is required")
        table = self.dialect.format_table(table_name)
        self.logger.warning("TRUNCATE TABLE generated for %s; all rows will be removed.", table)
        return f"TRUNCATE TABLE {table}"

    def _render_columns(self, columns: Sequence[Column]) -> List[str]:
        seen: set[str] = set()
        pieces: List[str] = []
        for column in columns:
            if column.name in seen:
                raise ValueError(f"Duplicate column '{column.name}' in table definition.")
            seen.add(column.name)
            pieces.append(self.dialect.render_column_definition(column))
        return pieces
