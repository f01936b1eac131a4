"""Unit tests for JSON logging and contextual loggers."""

import json
import logging

from testapp.core.logging import ContextualLogger, JSONFormatter


def _record(msg="hello", **extra):
    record = logging.LogRecord("testapp", logging.WARNING, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_emits_single_line_json(self):
        line = JSONFormatter().format(_record())

        assert "\n" not in line
        payload = json.loads(line)
        assert payload["level"] == "warning"
        assert payload["logger"] == "testapp"
        assert payload["message"] == "hello"

    def test_context_fields_are_top_level(self):
        payload = json.loads(JSONFormatter().format(_record(probe="bucket")))

        assert payload["probe"] == "bucket"


class TestContextualLogger:
    def test_with_context_merges_fields(self):
        base = ContextualLogger(logging.getLogger("testapp.test"), {"context_base": "app"})
        child = base.with_context(probe="kafka")

        _, kwargs = child.process("msg", {"extra": {"operation": "kafka_connect"}})

        assert kwargs["extra"] == {
            "context_base": "app",
            "probe": "kafka",
            "operation": "kafka_connect",
        }
        assert base.extra == {"context_base": "app"}
