"""Tests for JSON log formatting and correlation ids"""

import json
import logging

from observability.logging_config import JSONFormatter, RequestIDFilter
from observability.request_id import reset_request_id, set_request_id


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="uploads.service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Document uploaded: document_id=%s",
        args=("doc-1",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_carries_request_id_and_extras():
    token = set_request_id("req-42")
    try:
        record = _record(owner_id=42, queue="documents.ready")
        RequestIDFilter().filter(record)
        line = json.loads(JSONFormatter().format(record))
    finally:
        reset_request_id(token)

    assert line["request_id"] == "req-42"
    assert line["level"] == "INFO"
    assert line["logger"] == "uploads.service"
    assert line["message"] == "Document uploaded: document_id=doc-1"
    assert line["owner_id"] == "42"
    assert line["queue"] == "documents.ready"
    assert line["timestamp"].endswith("Z")


def test_exception_is_included():
    try:
        raise RuntimeError("bucket unreachable")
    except RuntimeError:
        import sys

        record = _record()
        record.exc_info = sys.exc_info()

    line = json.loads(JSONFormatter().format(record))

    assert line["error"] == "bucket unreachable"
    assert "RuntimeError" in line["traceback"]
