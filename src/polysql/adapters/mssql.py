"""
Microsoft SQL Server database adapter implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..dialects.mssql import MSSQLDialect
from ..utils import get_logger, resolve_slow_query_ms, time_call
from .base import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterExecutionError,
    ConnectionConfig,
    DatabaseAdapter,
    ResultSet,
    fetch_result,
)


def _load_driver():
    try:
        import pymssql  # type: ignore[import-untyped]

        return pymssql
    except ImportError:
        return None


@dataclass
class MSSQLConnectionState:
    connection: Any
    config: ConnectionConfig
    driver: Any


class MSSQLAdapter(DatabaseAdapter):
    """
    Adapter wrapping the pymssql SQL Server driver.
    """

    def __init__(self, slow_query_ms: int | None = None) -> None:
        self.dialect = MSSQLDialect()
        self._state: MSSQLConnectionState | None = None
        self.logger = get_logger("adapters.mssql")
        self.slow_query_ms = resolve_slow_query_ms(default=100, override=slow_query_ms)

    def connect(self, config: ConnectionConfig) -> Any:
        driver = _load_driver()
        if driver is None:
            raise AdapterConfigurationError("pymssql is required to use MSSQLAdapter.")

        options = dict(config.options or {})
        if config.timeout and "login_timeout" not in options:
            options["login_timeout"] = int(config.timeout)

        self.logger.info("Connecting to SQL Server %s", config.descriptive_label())

        connect_kwargs: dict[str, Any] = {
            "user": config.username,
            "password": config.password,
            "database": config.database,
            "autocommit": True,
            **options,
        }
        # A named instance is resolved by the SQL Browser service, not a port.
        if config.instance:
            connect_kwargs["server"] = f"{config.host}\\{config.instance}"
        else:
            connect_kwargs["server"] = config.host
            connect_kwargs["port"] = str(config.port)

        try:
            connection = driver.connect(**connect_kwargs)
        except Exception as exc:
            raise AdapterConnectionError("Failed to connect to SQL Server.") from exc

        self._state = MSSQLConnectionState(connection, config, driver)
        return connection

    def close(self) -> None:
        if self._state:
            try:
                self._state.connection.close()
            finally:
                self._state = None

    def _ensure_connection(self):
        if not self._state:
            raise AdapterConnectionError("MSSQLAdapter is not connected.")
        return self._state.connection

    def execute(self, sql: str) -> ResultSet:
        if not sql or not sql.strip():
            raise AdapterExecutionError("SQL text is required.")
        connection = self._ensure_connection()
        cursor = connection.cursor()
        try:
            with time_call("mssql.execute", self.logger, sql=sql, threshold_ms=self.slow_query_ms):
                cursor.execute(sql)
            return fetch_result(cursor)
        finally:
            cursor.close()
