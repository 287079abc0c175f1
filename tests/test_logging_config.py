"""
Tests for logging setup and the JSON line format.
"""

from __future__ import annotations

import json
import logging

from update_mirror.logging_config import HumanFormatter, JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "update_mirror.repository.normalizer", logging.ERROR, __file__, 1,
        "write failed", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_sync_extras_included(self):
        line = JSONFormatter().format(_record(stage="normalize", path="pkg/pkg_2_.xml", user="x"))
        entry = json.loads(line)
        assert entry["level"] == "ERROR"
        assert entry["message"] == "write failed"
        assert entry["stage"] == "normalize"
        assert entry["path"] == "pkg/pkg_2_.xml"
        assert "user" not in entry

    def test_no_extras(self):
        entry = json.loads(JSONFormatter().format(_record()))
        assert "stage" not in entry


class TestSetupLogging:

    def test_json_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        monkeypatch.setenv("LOG_LEVEL", "warning")
        setup_logging()

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_unknown_values_fall_back(self):
        setup_logging(level="chatty", format_type="xml")

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, HumanFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING
