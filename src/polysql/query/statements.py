"""
Statement builder assembling complete SELECT/INSERT/UPDATE/DELETE text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Sequence, Union

from ..dialects.base import Dialect
from .compiler import ExpressionCompiler
from .expressions import Condition, Expression, Operator


@dataclass(frozen=True)
class InsertComplete:
    """
    The INSERT statement itself returns the inserted row.
    """


@dataclass(frozen=True)
class NeedsLookup:
    """
    The INSERT only yields the generated identifier (in ``id_column``); the row
    must be read back with a SELECT on the table's primary-key column.
    """

    id_column: str = "id"


InsertFollowUp = Union[InsertComplete, NeedsLookup]


@dataclass(frozen=True)
class InsertStatement:
    sql: str
    follow_up: InsertFollowUp = field(default_factory=InsertComplete)

    @property
    def needs_lookup(self) -> bool:
        return isinstance(self.follow_up, NeedsLookup)


def _require_table(table_name: str) -> None:
    if not table_name or not str(table_name).strip():
        raise ValueError("table_name is required")


def _require_non_negative(name: str, value: int | None) -> None:
    if value is not None and value < 0:
        raise ValueError(f"{name} must be non-negative")


class StatementBuilder:
    """
    Produces dialect-specific DML as literal SQL text.

    Values are inlined using the same rendering rules as the expression
    compiler; no statement here uses bound parameters.
    """

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect
        self.compiler = ExpressionCompiler(dialect)

    # SELECT ------------------------------------------------------------
    def select(
        self,
        table_name: str,
        *,
        index_start: int | None = None,
        max_results: int | None = None,
        fields: Sequence[str] | None = None,
        filter: Expression | None = None,
        order_by: str | None = None,
    ) -> str:
        _require_table(table_name)
        _require_non_negative("index_start", index_start)
        _require_non_negative("max_results", max_results)

        sql_parts: List[str] = ["SELECT"]
        prefix = self.dialect.select_prefix(max_results, index_start)
        if prefix:
            sql_parts.append(prefix)
        sql_parts.append(self._select_list(fields))
        sql_parts.append("FROM")
        sql_parts.append(self.dialect.format_table(table_name))

        if filter is not None:
            sql_parts.append("WHERE")
            sql_parts.append(self.compiler.compile(filter))

        order_clause = self._order_by(order_by)
        if order_clause:
            sql_parts.append(order_clause)

        limit_clause = self.dialect.limit_clause(
            max_results, index_start, ordered=bool(order_clause)
        )
        if limit_clause:
            sql_parts.append(limit_clause)
        return " ".join(sql_parts)

    def select_by_key(self, table_name: str, column: str, value: Any) -> str:
        """
        SELECT at most one row whose ``column`` equals ``value``.
        """
        if not column:
            raise ValueError("column is required")
        if value is None:
            raise ValueError("value is required")
        return self.select(
            table_name,
            max_results=1,
            filter=Condition(column, Operator.EQUALS, value),
        )

    # INSERT ------------------------------------------------------------
    def insert(self, table_name: str, data: Mapping[str, Any]) -> InsertStatement:
        _require_table(table_name)
        columns = ",".join(self.dialect.quote_identifier(key) for key, _ in self._items(data))
        sql = self.dialect.insert_sql(table_name, columns, self.values(data))
        if self.dialect.capabilities.returns_inserted_row:
            return InsertStatement(sql, InsertComplete())
        return InsertStatement(sql, NeedsLookup())

    def lookup_inserted(self, table_name: str, primary_key_column: str, inserted_id: Any) -> str:
        """
        SELECT the row created by an INSERT that only reported its identifier.
        """
        _require_table(table_name)
        if not primary_key_column:
            raise ValueError("primary_key_column is required")
        return self.select(
            table_name,
            filter=Condition(primary_key_column, Operator.EQUALS, inserted_id),
        )

    # UPDATE / DELETE ---------------------------------------------------
    def update(
        self,
        table_name: str,
        data: Mapping[str, Any],
        filter: Expression | None = None,
    ) -> str:
        """
        Build an UPDATE; a ``None`` filter updates every row in the table.
        """
        _require_table(table_name)
        assignments = self.assignments(data)
        where = self.compiler.compile(filter) if filter is not None else None
        return self.dialect.update_sql(table_name, assignments, where)

    def delete(self, table_name: str, filter: Expression) -> str:
        _require_table(table_name)
        if filter is None:
            raise ValueError("filter is required; use always_true() to delete every row")
        return self.dialect.delete_sql(table_name, self.compiler.compile(filter))

    # Helpers -----------------------------------------------------------
    def assignments(self, data: Mapping[str, Any]) -> str:
        return ",".join(
            f"{self.dialect.quote_identifier(key)}={self.compiler.render_value(value)}"
            for key, value in self._items(data)
        )

    def values(self, data: Mapping[str, Any]) -> str:
        return ",".join(self.compiler.render_value(value) for _, value in self._items(data))

    def _items(self, data: Mapping[str, Any] | None) -> List[tuple[str, Any]]:
        if not data:
            raise ValueError("data is required")
        # Blank column names are skipped rather than rendered as empty identifiers.
        items = [(key, value) for key, value in data.items() if key]
        if not items:
            raise ValueError("data must contain at least one named column")
        return items

    def _select_list(self, fields: Iterable[str] | None) -> str:
        if not fields:
            return "*"
        names = [name for name in fields if name]
        if not names:
            return "*"
        return ", ".join(self.dialect.quote_identifier(name) for name in names)

    @staticmethod
    def _order_by(order_by: str | None) -> str:
        if not order_by or not order_by.strip():
            return ""
        clause = order_by.strip()
        if clause.upper().startswith("ORDER BY"):
            return clause
        return f"ORDER BY {clause}"
