import logging

import pytest

from polysql.utils import (
    correlation_scope,
    get_correlation_id,
    get_logger,
    set_correlation_id,
    time_call,
)


def test_correlation_id_round_trip():
    token = set_correlation_id("test-token")
    assert token == "test-token"
    assert get_correlation_id() == "test-token"


def test_loggers_live_under_package_namespace():
    assert get_logger("client").name == "polysql.client"
    assert logging.getLogger("polysql").handlers


def test_time_call_logs_duration(caplog):
    logger = get_logger("tests.logging")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    with time_call("unit-test", logger, sql="SELECT 1", threshold_ms=0):
        pass
    records = [record for record in caplog.records if record.name == logger.name]
    assert any("unit-test took" in record.message for record in records)
    assert records[-1].levelno == logging.WARNING
    assert records[-1].sql == "SELECT 1"
    assert records[-1].failed is False


def test_time_call_below_threshold_is_debug_and_marks_failure(caplog):
    logger = get_logger("tests.logging")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    with pytest.raises(RuntimeError):
        with time_call("failing", logger, threshold_ms=60_000):
            raise RuntimeError("boom")
    record = [r for r in caplog.records if r.name == logger.name][-1]
    assert record.levelno == logging.DEBUG
    assert record.failed is True


def test_correlation_scope_restores_outer_id():
    set_correlation_id("outer")
    with correlation_scope("inner") as cid:
        assert cid == "inner"
        assert get_correlation_id() == "inner"
    assert get_correlation_id() == "outer"


def test_correlation_scope_without_value_keeps_current_id():
    set_correlation_id("request-1")
    with correlation_scope() as cid:
        assert cid == "request-1"
    assert get_correlation_id() == "request-1"


def test_time_call_records_correlation_id(caplog):
    logger = get_logger("tests.logging")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    with correlation_scope("batch-9"):
        with time_call("tagged", logger, threshold_ms=60_000):
            pass
    record = [r for r in caplog.records if r.name == logger.name][-1]
    assert record.correlation_id == "batch-9"
