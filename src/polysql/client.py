"""
Database client coordinating dialect profiles, statement builders, and adapters.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .adapters import ConnectionConfig, DatabaseAdapter, ResultSet, adapter_for
from .dialects import Dialect, Engine, get_dialect
from .query import Expression, StatementBuilder
from .schema import Column, SchemaBuilder, SchemaIntrospector
from .security import redact_connection_string
from .utils import correlation_scope, get_logger, resolve_slow_query_ms, time_call

LogHook = Callable[[str], None]


class DatabaseClient:
    """
    Builds literal SQL for one engine and runs it through a database adapter.

    The dialect is chosen once, at construction, from the configured engine.
    Statement building is side-effect free; only :meth:`query` (and the methods
    built on it) talk to the adapter. Adapter errors propagate unchanged.

    ``log_hook`` is an optional callable receiving the text of each query when
    ``log_queries`` is set, and a one-line row-count or failure summary when
    ``log_results`` is set. ``correlation_id`` tags the log records of every
    query this client runs; without it queries share the caller's id.
    """

    def __init__(
        self,
        engine: Engine | str,
        host: str,
        port: int | None,
        username: str | None,
        password: str | None,
        instance: str | None,
        database: str,
        *,
        adapter: DatabaseAdapter | None = None,
        log_queries: bool = False,
        log_results: bool = False,
        log_hook: LogHook | None = None,
        slow_query_ms: int | None = None,
        correlation_id: str | None = None,
    ) -> None:
        config = ConnectionConfig(
            engine=Engine.parse(engine),
            host=host,
            database=database,
            port=port,
            username=username,
            password=password,
            instance=instance,
        )
        self._setup(config, adapter, log_queries, log_results, log_hook, slow_query_ms, correlation_id)

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        *,
        adapter: DatabaseAdapter | None = None,
        log_queries: bool = False,
        log_results: bool = False,
        log_hook: LogHook | None = None,
        slow_query_ms: int | None = None,
        correlation_id: str | None = None,
    ) -> "DatabaseClient":
        client = cls.__new__(cls)
        client._setup(config, adapter, log_queries, log_results, log_hook, slow_query_ms, correlation_id)
        return client

    @classmethod
    def from_dsn(cls, dsn: str, **kwargs: Any) -> "DatabaseClient":
        return cls.from_config(ConnectionConfig.from_dsn(dsn), **kwargs)

    def _setup(
        self,
        config: ConnectionConfig,
        adapter: DatabaseAdapter | None,
        log_queries: bool,
        log_results: bool,
        log_hook: LogHook | None,
        slow_query_ms: int | None,
        correlation_id: str | None,
    ) -> None:
        self.config = config
        self.engine: Engine = config.engine
        self.dialect: Dialect = get_dialect(config.engine)
        self.statements = StatementBuilder(self.dialect)
        self.schema = SchemaBuilder(self.dialect)
        self.introspector = SchemaIntrospector(self.dialect, self.query, config.database)
        self.log_queries = log_queries
        self.log_results = log_results
        self.log_hook = log_hook
        self.slow_query_ms = resolve_slow_query_ms(default=200, override=slow_query_ms)
        self.correlation_id = correlation_id
        self.logger = get_logger("client")
        self._adapter = adapter
        self._connected = False

    # ------------------------------------------------------------------ #
    # Context management
    # ------------------------------------------------------------------ #
    def __enter__(self) -> "DatabaseClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._adapter is not None and self._connected:
            self._adapter.close()
        self._connected = False

    @property
    def connection_string(self) -> str:
        return self.dialect.connection_string(self.config)

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #
    def query(self, sql: str) -> ResultSet:
        """
        Execute literal SQL text and return its result set.
        """
        if not sql or not sql.strip():
            raise ValueError("sql is required")
        label = self.engine.value
        if self.log_queries:
            self._emit(f"[{label}] Query: {sql}")

        adapter = self._ensure_adapter()
        try:
            with correlation_scope(self.correlation_id), time_call(
                "client.query", self.logger, sql=sql, threshold_ms=self.slow_query_ms
            ):
                result = adapter.execute(sql)
        except Exception as exc:
            if self.log_results:
                self._emit(f"[{label}] Query failed: {exc}")
            raise

        if self.log_results:
            self._emit(f"[{label}] Query result: {len(result)} rows")
        return result

    # ------------------------------------------------------------------ #
    # CRUD
    # ------------------------------------------------------------------ #
    def select(
        self,
        table_name: str,
        index_start: int | None = None,
        max_results: int | None = None,
        return_fields: Sequence[str] | None = None,
        filter: Expression | None = None,
        order_by: str | None = None,
    ) -> ResultSet:
        sql = self.statements.select(
            table_name,
            index_start=index_start,
            max_results=max_results,
            fields=return_fields,
            filter=filter,
            order_by=order_by,
        )
        return self.query(sql)

    def get_unique_object_by_id(self, table_name: str, column_name: str, value: Any) -> ResultSet:
        """
        Return at most one row whose key or unique ``column_name`` equals ``value``.
        """
        return self.query(self.statements.select_by_key(table_name, column_name, value))

    def insert(self, table_name: str, data: Mapping[str, Any]) -> ResultSet | None:
        """
        Insert one row and return it as stored.

        Engines that only report the generated identifier get a follow-up
        SELECT on the table's primary key. ``None`` is returned when no
        identifier could be recovered from the insert result.
        """
        statement = self.statements.insert(table_name, data)
        result = self.query(statement.sql)
        if not statement.needs_lookup:
            return result

        inserted_id = self._recovered_id(result, statement.follow_up.id_column)
        if inserted_id is None:
            self.logger.warning("INSERT into %s did not report a generated id.", table_name)
            return None
        primary_key = self.get_primary_key_column(table_name)
        if primary_key is None:
            self.logger.warning(
                "Table %s has no primary key; returning the generated id only.", table_name
            )
            return result
        return self.query(self.statements.lookup_inserted(table_name, primary_key, inserted_id))

    def update(
        self,
        table_name: str,
        data: Mapping[str, Any],
        filter: Expression | None = None,
    ) -> ResultSet:
        return self.query(self.statements.update(table_name, data, filter))

    def delete(self, table_name: str, filter: Expression) -> ResultSet:
        return self.query(self.statements.delete(table_name, filter))

    def truncate(self, table_name: str) -> None:
        self.query(self.schema.truncate_table_sql(table_name))

    # ------------------------------------------------------------------ #
    # Schema
    # ------------------------------------------------------------------ #
    def create_table(self, table_name: str, columns: Sequence[Column]) -> None:
        self.query(self.schema.create_table_sql(table_name, columns))

    def drop_table(self, table_name: str) -> None:
        self.query(self.schema.drop_table_sql(table_name))

    def list_tables(self) -> List[str]:
        return self.introspector.list_tables()

    def table_exists(self, table_name: str) -> bool:
        return self.introspector.table_exists(table_name)

    def describe_table(self, table_name: str) -> List[Column]:
        return self.introspector.describe_table(table_name)

    def describe_database(self) -> Dict[str, List[Column]]:
        return self.introspector.describe_database()

    def get_primary_key_column(self, table_name: str) -> Optional[str]:
        return self.introspector.primary_key_column(table_name)

    def get_column_names(self, table_name: str) -> List[str]:
        return self.introspector.column_names(table_name)

    # ------------------------------------------------------------------ #
    # Formatting helpers
    # ------------------------------------------------------------------ #
    def timestamp(self, value: datetime | date) -> str:
        return self.dialect.format_timestamp(value)

    def sanitize_string(self, value: str) -> str:
        if not value:
            return value
        return self.dialect.sanitize_string(value)

    # ------------------------------------------------------------------ #
    def _ensure_adapter(self) -> DatabaseAdapter:
        if self._adapter is None:
            self._adapter = adapter_for(self.engine)
        if not self._connected:
            self.logger.info(
                "Opening %s connection (%s)",
                self.engine.value,
                redact_connection_string(self.connection_string),
            )
            self._adapter.connect(self.config)
            self._connected = True
        return self._adapter

    def _emit(self, message: str) -> None:
        if self.log_hook is not None:
            self.log_hook(message)

    @staticmethod
    def _recovered_id(result: ResultSet | None, id_column: str) -> int | None:
        if result is None:
            return None
        for row in result:
            for key, value in row.items():
                if str(key).lower() != id_column.lower() or value is None:
                    continue
                try:
                    return int(value)
                except (TypeError, ValueError):
                    continue
        return None
