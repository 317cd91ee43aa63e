from datetime import date, datetime

from polysql.adapters import ConnectionConfig
from polysql.dialects import MSSQLDialect
from polysql.schema import Column, DataType

dialect = MSSQLDialect()


def test_mssql_quotes_identifiers():
    assert dialect.quote_identifier("user]name") == "[user]]name]"
    assert dialect.format_table("dbo.users") == "[dbo].[users]"
    assert dialect.format_table("users") == "[users]"


def test_mssql_string_literals():
    assert dialect.quote_string_literal("O'Brien") == "'O''Brien'"
    assert dialect.quote_string_literal("café") == "N'café'"
    assert dialect.quote_string_literal("line\nbreak") == "N'line\nbreak'"


def test_mssql_timestamp_uses_twelve_hour_clock():
    assert dialect.format_timestamp(datetime(2024, 3, 5, 14, 7, 9, 123456)) == (
        "03/05/2024 02:07:09.1234560 PM"
    )
    assert dialect.format_timestamp(datetime(2024, 1, 1, 0, 0)) == "01/01/2024 12:00:00.0000000 AM"
    assert dialect.format_timestamp(date(2024, 12, 31)) == "12/31/2024 12:00:00.0000000 AM"


def test_mssql_pagination():
    assert dialect.select_prefix(5, None) == "TOP 5"
    assert dialect.select_prefix(5, 10) == ""
    assert dialect.select_prefix(None, None) == ""
    assert dialect.limit_clause(5, None, ordered=False) == ""
    assert dialect.limit_clause(5, 10, ordered=False) == (
        "ORDER BY (SELECT NULL) OFFSET 10 ROWS FETCH NEXT 5 ROWS ONLY"
    )
    assert dialect.limit_clause(5, 10, ordered=True) == "OFFSET 10 ROWS FETCH NEXT 5 ROWS ONLY"
    assert dialect.limit_clause(None, 10, ordered=True) == "OFFSET 10 ROWS"


def test_mssql_dml_returns_rows():
    assert dialect.insert_sql("users", "[name]", "'a'") == (
        "INSERT INTO [users] WITH (ROWLOCK) ([name]) OUTPUT INSERTED.* VALUES ('a')"
    )
    assert dialect.update_sql("users", "[name]='b'", "[id] = 1") == (
        "UPDATE [users] WITH (ROWLOCK) SET [name]='b' OUTPUT INSERTED.* WHERE [id] = 1"
    )
    assert dialect.delete_sql("users", "[id] = 1") == "DELETE FROM [users] WITH (ROWLOCK) WHERE [id] = 1"


def test_mssql_column_definitions():
    assert dialect.column_type(DataType.VARCHAR, None) == "varchar(max)"
    assert dialect.column_type(DataType.NVARCHAR, 64) == "nvarchar(64)"
    assert dialect.column_type(DataType.DATETIME, None) == "datetime2"
    pk = Column("id", DataType.INT, nullable=False, primary_key=True)
    assert dialect.render_column_definition(pk) == "[id] int IDENTITY(1,1) NOT NULL"
    assert dialect.primary_key_clause("dbo.users", ["id"]) == (
        "CONSTRAINT [PK_users] PRIMARY KEY CLUSTERED ([id] ASC)"
    )


def test_mssql_primary_key_detection():
    assert dialect.is_primary_key({"CONSTRAINT_NAME": "PK__users__3213E83F"})
    assert not dialect.is_primary_key({"CONSTRAINT_NAME": "FK_orders_users"})
    assert not dialect.is_primary_key({"CONSTRAINT_NAME": None})
    assert dialect.table_name_column("app") == "TABLE_NAME"


def test_mssql_metadata_queries_target_database_catalog():
    assert "[app].INFORMATION_SCHEMA.TABLES" in dialect.list_tables_query("app")
    query = dialect.list_columns_query("app", "users")
    assert "col.TABLE_NAME = 'users'" in query
    assert query.endswith("ORDER BY col.ORDINAL_POSITION")


def test_mssql_connection_string():
    config = ConnectionConfig(
        engine="mssql",
        host="db",
        database="app",
        username="sa",
        password="pw",
        instance="SQLEXPRESS",
    )
    assert dialect.connection_string(config) == (
        "Data Source=db\\SQLEXPRESS,1433;Initial Catalog=app;User ID=sa;Password=pw;"
    )
    trusted = ConnectionConfig(engine="mssql", host="db", database="app")
    assert "Integrated Security=SSPI" in dialect.connection_string(trusted)


def test_mssql_column_query_scopes_schema():
    qualified = dialect.list_columns_query("app", "sales.users")
    assert "col.TABLE_NAME = 'users' AND col.TABLE_SCHEMA = 'sales'" in qualified
    assert "'sales.users'" not in qualified
    assert "col.TABLE_SCHEMA = SCHEMA_NAME()" in dialect.list_columns_query("app", "users")
