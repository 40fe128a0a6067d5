from __future__ import annotations

import json
import logging

from sales_ledger.utils.logging import _json_formatter, configure_logging, get_logger

EXPECTED_RECORDS = 10
EXPECTED_LINE_NO = 7


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.records = EXPECTED_RECORDS
    record.sale_id = "SID1000"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["records"] == EXPECTED_RECORDS
    assert payload["sale_id"] == "SID1000"
    assert "pathname" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _record()
    record.extra = {"line_no": EXPECTED_LINE_NO}

    payload = json.loads(_json_formatter(record))

    assert payload["line_no"] == EXPECTED_LINE_NO


def test_configure_logging_sets_root_level() -> None:
    configure_logging(level="WARNING", json_logs=True)
    root = get_logger()

    assert root.level == logging.WARNING
    assert root.handlers
    configure_logging(level="INFO")
