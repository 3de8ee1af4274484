"""Tests for Pagesmith logging setup."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pagesmith.logging import (
    LOG_FILE_NAME,
    ConsoleFormatter,
    JSONLFormatter,
    component_for,
    get_recent_logs,
    log_with_context,
    setup_logging,
)


def _record(message: str, level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="pagesmith.compiler.metadata",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    def test_component_for(self) -> None:
        assert component_for("pagesmith.css.aggregator") == "css"
        assert component_for("other") == "other"

    def test_jsonl(self) -> None:
        line = JSONLFormatter().format(_record("Hello", context={"site_id": "acme"}))
        entry = json.loads(line)
        assert entry["level"] == "INFO"
        assert entry["component"] == "compiler"
        assert entry["message"] == "Hello"
        assert entry["context"] == {"site_id": "acme"}
        assert entry["timestamp"].endswith("Z")
        assert "source" not in entry

    def test_jsonl_warning_has_source(self) -> None:
        entry = json.loads(JSONLFormatter().format(_record("Careful", logging.WARNING)))
        assert entry["source"]["line"] == 10

    def test_console_includes_context(self) -> None:
        line = ConsoleFormatter().format(_record("Hello", context={"site_id": "acme"}))
        assert "[compiler]" in line
        assert line.endswith("Hello (site_id=acme)")


class TestSetup:
    def test_file_log(self, tmp_path: Path) -> None:
        log_dir = setup_logging(tmp_path / "logs", level="DEBUG")
        assert log_dir == tmp_path / "logs"

        logger = logging.getLogger("pagesmith.publish.pipeline")
        log_with_context(logger, logging.WARNING, "Theme not publishable", theme_id=7, site_id=None)

        entries = get_recent_logs(level="WARNING")
        assert entries[-1]["message"] == "Theme not publishable"
        assert entries[-1]["context"] == {"theme_id": 7}
        assert (tmp_path / "logs" / LOG_FILE_NAME).exists()

    def test_console_only(self) -> None:
        assert setup_logging(None, level=logging.WARNING) is None
        assert get_recent_logs() == []
        assert logging.getLogger("pagesmith").level == logging.WARNING

    def test_repeated_setup_replaces_handlers(self, tmp_path: Path) -> None:
        setup_logging(tmp_path, level="INFO")
        setup_logging(tmp_path, level="INFO")
        assert len(logging.getLogger("pagesmith").handlers) == 2
