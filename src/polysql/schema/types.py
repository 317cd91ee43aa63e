"""
Canonical column types and the engine type-name normalizer.
"""

from __future__ import annotations

from enum import Enum
from typing import Final

from ..errors import TypeNormalizationError


class DataType(str, Enum):
    """
    Canonical data kinds every engine-reported column type collapses into.
    """

    INT = "int"
    LONG = "long"
    DECIMAL = "decimal"
    DATETIME = "datetime"
    VARCHAR = "varchar"
    NVARCHAR = "nvarchar"


# Engine spellings as reported by INFORMATION_SCHEMA.COLUMNS.DATA_TYPE (or the
# pg_catalog equivalent), lower-cased.
TYPE_NAMES: Final[dict[str, DataType]] = {
    "bigserial": DataType.LONG,
    "bigint": DataType.LONG,
    "smallserial": DataType.INT,
    "smallest": DataType.INT,
    "tinyint": DataType.INT,
    "integer": DataType.INT,
    "int": DataType.INT,
    "smallint": DataType.INT,
    "mediumint": DataType.INT,
    "serial": DataType.INT,
    "double precision": DataType.DECIMAL,
    "real": DataType.DECIMAL,
    "float": DataType.DECIMAL,
    "double": DataType.DECIMAL,
    "decimal": DataType.DECIMAL,
    "numeric": DataType.DECIMAL,
    "timestamp without timezone": DataType.DATETIME,
    "timestamp without time zone": DataType.DATETIME,
    "timestamp with timezone": DataType.DATETIME,
    "timestamp with time zone": DataType.DATETIME,
    "time without timezone": DataType.DATETIME,
    "time without time zone": DataType.DATETIME,
    "time with timezone": DataType.DATETIME,
    "time with time zone": DataType.DATETIME,
    "time": DataType.DATETIME,
    "date": DataType.DATETIME,
    "datetime": DataType.DATETIME,
    "datetime2": DataType.DATETIME,
    "timestamp": DataType.DATETIME,
    "character": DataType.VARCHAR,
    "char": DataType.VARCHAR,
    "text": DataType.VARCHAR,
    "varchar": DataType.VARCHAR,
    "character varying": DataType.NVARCHAR,
    "nchar": DataType.NVARCHAR,
    "ntext": DataType.NVARCHAR,
    "nvarchar": DataType.NVARCHAR,
}


def normalize_type(type_name: str | None) -> DataType:
    """
    Map an engine-reported type name onto a canonical ``DataType``.

    Matching is case-insensitive. A length or precision suffix such as
    ``varchar(64)`` is ignored. Unknown names raise ``TypeNormalizationError``
    rather than falling back to a default, since literal rendering depends on
    the resolved kind.
    """
    if type_name is None or not str(type_name).strip():
        raise ValueError("type_name is required")
    normalized = " ".join(str(type_name).strip().lower().split())
    if "(" in normalized:
        normalized = normalized.split("(", 1)[0].strip()
    try:
        return TYPE_NAMES[normalized]
    except KeyError:
        raise TypeNormalizationError(normalized) from None
