"""Structured Logging — JSON formatter fields and analytics log forwarding."""

import json
import logging

from storefront.core.analytics import LoggingReporter
from storefront.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        "storefront.test", logging.WARNING, __file__, 1, "hello %s", ("world",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_core_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "WARNING"
    assert log["logger"] == "storefront.test"
    assert log["message"] == "hello world"
    assert "timestamp" in log


def test_json_formatter_keeps_whitelisted_extras_only():
    log = json.loads(JSONFormatter().format(
        _record(table_name="products", error_code="FORBIDDEN", secret="x"),
    ))
    assert log["table_name"] == "products"
    assert log["error_code"] == "FORBIDDEN"
    assert "secret" not in log


def test_setup_logging_installs_one_handler():
    before = list(logging.root.handlers)
    level = logging.root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("INFO", "text")
        added = [h for h in logging.root.handlers if h not in before]
        assert len(added) == 1
        assert not isinstance(added[0].formatter, JSONFormatter)
        assert logging.root.level == logging.INFO
    finally:
        for handler in list(logging.root.handlers):
            if handler not in before:
                logging.root.removeHandler(handler)
        logging.root.setLevel(level)


def test_logging_reporter_forwards_event(caplog):
    with caplog.at_level(logging.INFO, logger="storefront.core.analytics"):
        LoggingReporter().track("AddToCart", {"product_id": "p1"})
    assert caplog.records[-1].event == "AddToCart"
    assert "p1" in caplog.records[-1].getMessage()
