"""
Schema introspection normalizing engine metadata rows into column descriptors.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping

from ..dialects.base import Dialect, split_table
from ..utils import get_logger
from .column import Column
from .types import normalize_type

RowSource = Callable[[str], Iterable[Mapping[str, Any]]]


def _upper_keys(row: Mapping[str, Any]) -> Dict[str, Any]:
    # Engines disagree on metadata column casing (Postgres folds to lower case).
    return {str(key).upper(): value for key, value in row.items()}


def _max_length(value: Any) -> int | None:
    if value is None:
        return None
    try:
        length = int(str(value).strip())
    except ValueError:
        return None
    # SQL Server reports -1 for varchar(max) / nvarchar(max).
    if length < 0:
        return None
    return length


class SchemaIntrospector:
    """
    Lists tables and describes their columns through a SQL row source.

    ``execute`` receives literal SQL and returns rows as mappings of column name
    to value; anything it raises propagates to the caller.
    """

    def __init__(self, dialect: Dialect, execute: RowSource, database: str) -> None:
        if not database:
            raise ValueError("database is required")
        self.dialect = dialect
        self.execute = execute
        self.database = database
        self.logger = get_logger("schema.introspector")

    def list_tables(self) -> List[str]:
        query = self.dialect.list_tables_query(self.database)
        key = self.dialect.table_name_column(self.database).upper()
        tables: List[str] = []
        for row in self.execute(query):
            value = _upper_keys(row).get(key)
            if value is not None:
                tables.append(str(value))
        return tables

    def table_exists(self, table_name: str) -> bool:
        if not table_name:
            raise ValueError("table_name is required")
        # Table listings carry bare names; a schema prefix is not matched.
        _, table = split_table(table_name)
        return table in self.list_tables()

    def describe_table(self, table_name: str) -> List[Column]:
        if not table_name:
            raise ValueError("table_name is required")
        query = self.dialect.list_columns_query(self.database, table_name)
        columns: Dict[str, Column] = {}
        for raw in self.execute(query):
            row = _upper_keys(raw)
            name = str(row["COLUMN_NAME"])
            column = Column(
                name=name,
                type=normalize_type(row.get("DATA_TYPE")),
                max_length=_max_length(row.get("CHARACTER_MAXIMUM_LENGTH")),
                nullable=str(row.get("IS_NULLABLE") or "").upper() == "YES",
                primary_key=self.dialect.is_primary_key(row),
            )
            existing = columns.get(name)
            if existing is None:
                columns[name] = column
            elif column.primary_key and not existing.primary_key:
                # One row per constraint; any primary-key row marks the column.
                columns[name] = column
        self.logger.debug("Described %s: %d columns", table_name, len(columns))
        return list(columns.values())

    def primary_key_column(self, table_name: str) -> str | None:
        for column in self.describe_table(table_name):
            if column.primary_key:
                return column.name
        return None

    def column_names(self, table_name: str) -> List[str]:
        return [column.name for column in self.describe_table(table_name)]

    def describe_database(self) -> Dict[str, List[Column]]:
        return {table: self.describe_table(table) for table in self.list_tables()}
