import logging
from datetime import datetime

import pytest

from polysql import Condition, DatabaseClient, Operator, always_true
from polysql.adapters import ConnectionConfig, ResultSet
from polysql.dialects import Engine
from polysql.errors import ConfigurationError
from polysql.utils import correlation_scope, get_correlation_id


class FakeAdapter:
    """Answers SQL with canned result sets chosen by substring."""

    def __init__(self, responses=None, error=None):
        self.responses = responses or []
        self.error = error
        self.executed = []
        self.connects = []
        self.closed = 0

    def connect(self, config):
        self.connects.append(config)
        return object()

    def close(self):
        self.closed += 1

    def execute(self, sql):
        self.executed.append(sql)
        if self.error is not None:
            raise self.error
        for needle, rows in self.responses:
            if needle in sql:
                columns = list(rows[0]) if rows else []
                return ResultSet(columns=columns, rows=list(rows), rowcount=len(rows))
        return ResultSet()


def make_client(engine="mysql", **kwargs):
    adapter = kwargs.pop("adapter", None) or FakeAdapter()
    client = DatabaseClient(engine, "localhost", None, "root", "pw", None, "shop", adapter=adapter, **kwargs)
    return client, adapter


def test_constructor_validates_connection_parameters():
    with pytest.raises(ConfigurationError):
        DatabaseClient("oracle", "localhost", None, None, None, None, "shop")
    with pytest.raises(ValueError):
        DatabaseClient("mysql", "", None, None, None, None, "shop")
    with pytest.raises(ValueError):
        DatabaseClient("mysql", "localhost", None, None, None, None, "")
    with pytest.raises(ValueError):
        DatabaseClient("mysql", "localhost", -1, None, None, None, "shop")


def test_client_picks_dialect_and_default_port():
    client, _ = make_client("postgresql")
    assert client.engine is Engine.PGSQL
    assert client.config.port == 5432
    assert client.connection_string == "Server=localhost;Port=5432;Database=shop;User ID=root;Password=pw;"


def test_connects_lazily_once():
    client, adapter = make_client()
    assert adapter.connects == []
    client.query("SELECT 1")
    client.query("SELECT 2")
    assert len(adapter.connects) == 1
    assert adapter.connects[0].database == "shop"


def test_log_hook_receives_queries_and_results():
    messages = []
    adapter = FakeAdapter(responses=[("FROM `users`", [{"id": 1}, {"id": 2}])])
    client, _ = make_client(adapter=adapter, log_queries=True, log_results=True, log_hook=messages.append)
    result = client.select("users")
    assert len(result) == 2
    assert messages == ["[mysql] Query: SELECT * FROM `users`", "[mysql] Query result: 2 rows"]


def test_failed_query_is_logged_and_reraised():
    messages = []
    adapter = FakeAdapter(error=RuntimeError("server gone"))
    client, _ = make_client(adapter=adapter, log_results=True, log_hook=messages.append)
    with pytest.raises(RuntimeError):
        client.query("SELECT 1")
    assert messages == ["[mysql] Query failed: server gone"]


def test_query_requires_sql():
    client, adapter = make_client()
    with pytest.raises(ValueError):
        client.query(" ")
    assert adapter.executed == []


def test_slow_queries_log_warning(caplog):
    caplog.set_level(logging.DEBUG, logger="polysql.client")
    client, _ = make_client(slow_query_ms=0)
    client.query("SELECT 1")
    assert any(
        "client.query took" in record.message and record.levelno == logging.WARNING
        for record in caplog.records
    )


def test_mysql_insert_reads_back_row_by_primary_key():
    adapter = FakeAdapter(
        responses=[
            ("LAST_INSERT_ID()", [{"id": 42}]),
            ("INFORMATION_SCHEMA.COLUMNS", [
                {"COLUMN_NAME": "user_id", "IS_NULLABLE": "NO", "DATA_TYPE": "int", "COLUMN_KEY": "PRI"},
                {"COLUMN_NAME": "name", "IS_NULLABLE": "YES", "DATA_TYPE": "varchar", "COLUMN_KEY": ""},
            ]),
            ("WHERE `user_id` = 42", [{"user_id": 42, "name": "ada"}]),
        ]
    )
    client, _ = make_client(adapter=adapter)
    result = client.insert("users", {"name": "ada"})
    assert result.first() == {"user_id": 42, "name": "ada"}
    assert adapter.executed[0] == (
        "INSERT INTO `users` (`name`) VALUES ('ada'); SELECT LAST_INSERT_ID() AS id;"
    )
    assert adapter.executed[-1] == "SELECT * FROM `users` WHERE `user_id` = 42"


def test_mysql_insert_into_qualified_table_reads_back_row():
    adapter = FakeAdapter(
        responses=[
            ("LAST_INSERT_ID()", [{"id": 7}]),
            ("TABLE_SCHEMA = 'archive'", [
                {"COLUMN_NAME": "order_id", "IS_NULLABLE": "NO", "DATA_TYPE": "bigint", "COLUMN_KEY": "PRI"},
            ]),
            ("WHERE `order_id` = 7", [{"order_id": 7}]),
        ]
    )
    client, _ = make_client(adapter=adapter)
    result = client.insert("archive.orders", {"total": 10})
    assert result.first() == {"order_id": 7}
    assert adapter.executed[-1] == "SELECT * FROM `archive`.`orders` WHERE `order_id` = 7"


def test_mysql_insert_without_id_returns_none():
    client, adapter = make_client()
    assert client.insert("users", {"name": "ada"}) is None
    assert len(adapter.executed) == 1


def test_returning_insert_is_single_round_trip():
    adapter = FakeAdapter(responses=[("RETURNING *", [{"id": 1, "name": "ada"}])])
    client, _ = make_client("pgsql", adapter=adapter)
    result = client.insert("users", {"name": "ada"})
    assert result.first() == {"id": 1, "name": "ada"}
    assert len(adapter.executed) == 1


def test_delete_requires_filter_before_touching_database():
    client, adapter = make_client("mssql")
    with pytest.raises(ValueError):
        client.delete("users", None)
    assert adapter.executed == []
    client.delete("users", always_true("id"))
    assert adapter.executed == [
        "DELETE FROM [users] WITH (ROWLOCK) WHERE ([id] IS NULL) OR ([id] IS NOT NULL)"
    ]


def test_select_passes_paging_and_filters():
    client, adapter = make_client("mssql")
    client.select(
        "users",
        index_start=10,
        max_results=5,
        return_fields=["id"],
        filter=Condition("age", Operator.GREATER_THAN, 30),
        order_by="id",
    )
    assert adapter.executed == [
        "SELECT [id] FROM [users] WHERE [age] > 30 ORDER BY id OFFSET 10 ROWS FETCH NEXT 5 ROWS ONLY"
    ]


def test_get_unique_object_by_id():
    client, adapter = make_client("pgsql")
    client.get_unique_object_by_id("users", "id", 3)
    assert adapter.executed == ['SELECT * FROM "users" WHERE "id" = 3 LIMIT 1']


def test_schema_operations_route_through_query(caplog):
    caplog.set_level(logging.WARNING, logger="polysql.schema.builder")
    adapter = FakeAdapter(responses=[("SHOW TABLES", [{"Tables_in_shop": "users"}])])
    client, _ = make_client(adapter=adapter)
    assert client.list_tables() == ["users"]
    assert client.table_exists("users")
    client.truncate("users")
    client.drop_table("users")
    assert "TRUNCATE TABLE `users`" in adapter.executed
    assert "DROP TABLE IF EXISTS `users`" in adapter.executed
    assert any("DROP TABLE generated" in record.message for record in caplog.records)


def test_formatting_helpers():
    client, _ = make_client("mssql")
    assert client.timestamp(datetime(2024, 3, 5, 14, 7, 9)) == "03/05/2024 02:07:09.0000000 PM"
    assert client.sanitize_string("O'Brien") == "O''Brien"
    assert client.sanitize_string("") == ""


def test_context_manager_closes_connected_adapter():
    adapter = FakeAdapter()
    with make_client(adapter=adapter)[0] as client:
        client.query("SELECT 1")
    assert adapter.closed == 1


def test_from_dsn_and_from_config():
    adapter = FakeAdapter()
    client = DatabaseClient.from_dsn("pgsql://u:p@db/app", adapter=adapter)
    assert client.engine is Engine.PGSQL
    config = ConnectionConfig(engine="mysql", host="db", database="app")
    assert DatabaseClient.from_config(config, adapter=adapter).dialect.engine is Engine.MYSQL


def test_queries_are_tagged_with_client_correlation_id(caplog):
    caplog.set_level(logging.DEBUG, logger="polysql.client")
    client, _ = make_client(correlation_id="req-7")
    with correlation_scope("outer-request"):
        client.query("SELECT 1")
        assert get_correlation_id() == "outer-request"
    records = [r for r in caplog.records if "client.query took" in r.message]
    assert records[-1].correlation_id == "req-7"


def test_queries_inherit_caller_correlation_id(caplog):
    caplog.set_level(logging.DEBUG, logger="polysql.client")
    client, _ = make_client()
    with correlation_scope("job-3"):
        client.query("SELECT 1")
    records = [r for r in caplog.records if "client.query took" in r.message]
    assert records[-1].correlation_id == "job-3"
