"""
MySQL database adapter implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..dialects.mysql import MySQLDialect
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
        import pymysql  # type: ignore[import-untyped]

        return pymysql
    except ImportError:
        return None


def _multi_statement_flag(driver: Any) -> int:
    # INSERT batches end with "SELECT LAST_INSERT_ID()", so the session must
    # accept several statements per round trip.
    constants = getattr(driver, "constants", None)
    client = getattr(constants, "CLIENT", None)
    return getattr(client, "MULTI_STATEMENTS", 0)


@dataclass
class MySQLConnectionState:
    connection: Any
    config: ConnectionConfig
    driver: Any


class MySQLAdapter(DatabaseAdapter):
    """
    Adapter wrapping the PyMySQL driver.
    """

    def __init__(self, slow_query_ms: int | None = None) -> None:
        self.dialect = MySQLDialect()
        self._state: MySQLConnectionState | None = None
        self.logger = get_logger("adapters.mysql")
        self.slow_query_ms = resolve_slow_query_ms(default=100, override=slow_query_ms)

    def connect(self, config: ConnectionConfig) -> Any:
        driver = _load_driver()
        if driver is None:
            raise AdapterConfigurationError("PyMySQL is required to use MySQLAdapter.")

        options = dict(config.options or {})
        if config.timeout and "connect_timeout" not in options:
            options["connect_timeout"] = int(config.timeout)
        flag = _multi_statement_flag(driver)
        if flag:
            options["client_flag"] = options.get("client_flag", 0) | flag

        self.logger.info("Connecting to MySQL %s", config.descriptive_label())

        connect_kwargs = {
            "host": config.host,
            "port": config.port,
            "user": config.username,
            "password": config.password or "",
            "database": config.database,
            "autocommit": True,
            **options,
        }
        try:
            connection = driver.connect(**connect_kwargs)
        except Exception as exc:
            raise AdapterConnectionError("Failed to connect to MySQL.") from exc

        self._state = MySQLConnectionState(connection, config, driver)
        return connection

    def close(self) -> None:
        if self._state:
            try:
                self._state.connection.close()
            finally:
                self._state = None

    def _ensure_connection(self):
        if not self._state:
            raise AdapterConnectionError("MySQLAdapter is not connected.")
        conn = self._state.connection
        if getattr(conn, "open", True) is False:
            self.logger.warning("MySQL connection closed; reconnecting.")
            conn = self.connect(self._state.config)
        return conn

    def execute(self, sql: str) -> ResultSet:
        if not sql or not sql.strip():
            raise AdapterExecutionError("SQL text is required.")
        connection = self._ensure_connection()
        cursor = connection.cursor()
        try:
            with time_call("mysql.execute", self.logger, sql=sql, threshold_ms=self.slow_query_ms):
                cursor.execute(sql)
            return fetch_result(cursor)
        finally:
            cursor.close()
