"""
Database adapter interfaces and implementations.
"""

from ..dialects.base import Engine
from .base import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterError,
    AdapterExecutionError,
    ConnectionConfig,
    DatabaseAdapter,
    ResultSet,
)
from .mssql import MSSQLAdapter
from .mysql import MySQLAdapter
from .postgres import PostgresAdapter

_ADAPTERS = {
    Engine.MSSQL: MSSQLAdapter,
    Engine.MYSQL: MySQLAdapter,
    Engine.PGSQL: PostgresAdapter,
}


def adapter_for(engine: "Engine | str", **kwargs) -> DatabaseAdapter:
    """
    Instantiate the driver adapter matching ``engine``.
    """
    return _ADAPTERS[Engine.parse(engine)](**kwargs)


__all__ = [
    "ConnectionConfig",
    "DatabaseAdapter",
    "ResultSet",
    "AdapterError",
    "AdapterConfigurationError",
    "AdapterConnectionError",
    "AdapterExecutionError",
    "MSSQLAdapter",
    "MySQLAdapter",
    "PostgresAdapter",
    "adapter_for",
]
