import pytest

from polysql.errors import TypeNormalizationError
from polysql.schema import Column, DataType, normalize_type


@pytest.mark.parametrize(
    "name, expected",
    [
        ("int", DataType.INT),
        ("INTEGER", DataType.INT),
        ("tinyint", DataType.INT),
        ("serial", DataType.INT),
        ("bigint", DataType.LONG),
        ("bigserial", DataType.LONG),
        ("numeric", DataType.DECIMAL),
        ("Double Precision", DataType.DECIMAL),
        ("datetime2", DataType.DATETIME),
        ("timestamp without time zone", DataType.DATETIME),
        ("date", DataType.DATETIME),
        ("text", DataType.VARCHAR),
        ("varchar(64)", DataType.VARCHAR),
        ("nvarchar", DataType.NVARCHAR),
        ("character varying", DataType.NVARCHAR),
    ],
)
def test_normalize_type_maps_engine_spellings(name, expected):
    assert normalize_type(name) is expected


def test_normalize_type_collapses_whitespace():
    assert normalize_type("  timestamp   with  time zone ") is DataType.DATETIME


def test_unknown_type_raises_instead_of_defaulting():
    with pytest.raises(TypeNormalizationError) as excinfo:
        normalize_type("geography")
    assert excinfo.value.type_name == "geography"
    assert "Unknown DataType: geography" in str(excinfo.value)


def test_blank_type_name_rejected():
    with pytest.raises(ValueError):
        normalize_type("")
    with pytest.raises(ValueError):
        normalize_type(None)


def test_column_validates_fields():
    column = Column("name", DataType.NVARCHAR, max_length=40)
    assert column.nullable and not column.primary_key
    with pytest.raises(ValueError):
        Column("", DataType.INT)
    with pytest.raises(ValueError):
        Column("age", "int")
    with pytest.raises(ValueError):
        Column("name", DataType.VARCHAR, max_length=-1)
