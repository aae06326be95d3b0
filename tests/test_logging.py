"""Tests for log setup."""

import json
import logging
import sys

from shortener.core.logging import JSONFormatter, setup_logging


class TestJSONFormatter:
    def test_fields(self):
        record = logging.LogRecord(
            name="shortener.requests",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="← GET /health %s",
            args=(200,),
            exc_info=None,
        )

        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "shortener.requests"
        assert entry["message"] == "← GET /health 200"
        assert "timestamp" in entry
        assert "exception" not in entry

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.getLogger("test").makeRecord(
                "test", logging.ERROR, __file__, 1, "failed", (), exc_info=sys.exc_info()
            )

        entry = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in entry["exception"]


class TestSetupLogging:
    def test_single_root_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("debug", json_format=True)
            setup_logging("debug", json_format=True)

            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
            assert root.level == logging.DEBUG
            assert logging.getLogger("uvicorn.access").propagate is False
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)
