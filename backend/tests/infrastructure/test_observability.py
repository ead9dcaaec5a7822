"""Structured Logging: tests for JSON formatting and page-scoped extras."""

import json
import logging

import pytest

from flowdoc.infrastructure.observability import JSONFormatter, page_log_extra


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("flowdoc.test", logging.INFO, __file__, 1, "hello", None, None)
    record.__dict__.update(extra)
    return record


def test_json_formatter_surfaces_page_fields():
    line = json.loads(JSONFormatter().format(_record(document_id="d1", page_number=2)))
    assert line["message"] == "hello"
    assert line["document_id"] == "d1"
    assert line["page_number"] == 2
    assert "command" not in line


def test_page_log_extra_drops_none():
    assert page_log_extra("d1", None, command="restart") == {
        "document_id": "d1", "command": "restart",
    }


def test_page_log_extra_rejects_unknown_fields():
    with pytest.raises(ValueError):
        page_log_extra("d1", 1, colour="red")
