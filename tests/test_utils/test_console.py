"""Tests for log formatters and logging setup."""

import io
import json
import logging
import sys
from pathlib import Path

from ssht.utils.console import COLORS, ColorfulFormatter, JSONFormatter, configure_logging


def make_record(msg: str, *args, name: str = "ssht.report", level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord(name, level, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestColorfulFormatter:
    def test_plain_layout(self) -> None:
        line = ColorfulFormatter(use_colors=False).format(make_record("[%s] Duration: %dms", "web1", 12))

        parts = [p.strip() for p in line.split("|")]
        assert parts[1] == "INFO"
        assert parts[2] == "report"
        assert parts[3] == "[web1] Duration: 12ms"
        assert "\033[" not in line

    def test_colors_highlight_host_and_duration(self) -> None:
        line = ColorfulFormatter(use_colors=True).format(make_record("[web1] Duration: 12ms"))

        assert f"{COLORS['bright_cyan']}[web1]" in line
        assert f"{COLORS['bright_yellow']}12ms" in line

    def test_exception_is_appended(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record("failed", level=logging.ERROR)
            record.exc_info = sys.exc_info()

        line = ColorfulFormatter(use_colors=False).format(record)

        assert "RuntimeError: boom" in line


class TestJSONFormatter:
    def test_fields_and_extras(self) -> None:
        record = make_record("[%s] ok", "web1", host="web1", duration_ms=12)

        payload = json.loads(JSONFormatter().format(record))

        assert payload["level"] == "info"
        assert payload["logger"] == "ssht.report"
        assert payload["message"] == "[web1] ok"
        assert payload["host"] == "web1"
        assert payload["duration_ms"] == 12
        assert "args" not in payload


class TestConfigureLogging:
    def test_text_to_stream(self) -> None:
        stream = io.StringIO()
        configure_logging(level="INFO", stream=stream)

        logging.getLogger("ssht.app").info("hello")
        logging.getLogger("ssht.app").debug("hidden")

        output = stream.getvalue()
        assert "hello" in output
        assert "hidden" not in output
        assert "\033[" not in output

    def test_json_to_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "ssht.log"
        handler = configure_logging(level="DEBUG", log_format="json", log_file=str(log_file))

        logging.getLogger("ssht.app").debug("dispatching")
        handler.flush()

        payload = json.loads(log_file.read_text().strip())
        assert payload["message"] == "dispatching"
        assert logging.getLogger("asyncssh").level == logging.DEBUG

    def test_reconfigure_replaces_handler(self) -> None:
        configure_logging(stream=io.StringIO())
        configure_logging(stream=io.StringIO())

        ssht_logger = logging.getLogger("ssht")
        assert len(ssht_logger.handlers) == 1
        assert ssht_logger.propagate is False
        assert logging.getLogger("asyncssh").level == logging.WARNING
