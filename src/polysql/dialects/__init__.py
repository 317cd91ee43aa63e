"""
Dialect strategy registry.
"""

from .base import Dialect, DialectCapabilities, Engine
from .mssql import MSSQLDialect
from .mysql import MySQLDialect
from .postgres import PostgresDialect

_DIALECTS = {
    Engine.MSSQL: MSSQLDialect,
    Engine.MYSQL: MySQLDialect,
    Engine.PGSQL: PostgresDialect,
}


def get_dialect(engine: "Engine | str") -> Dialect:
    """
    Return the dialect profile for an engine token such as ``"mssql"``.
    """
    return _DIALECTS[Engine.parse(engine)]()


__all__ = [
    "Dialect",
    "DialectCapabilities",
    "Engine",
    "MSSQLDialect",
    "MySQLDialect",
    "PostgresDialect",
    "get_dialect",
]
