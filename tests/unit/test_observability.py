"""Unit tests for observability module."""

import json
import logging
from pathlib import Path
import sys

import pytest

from mcp_config_validator.observability import JsonFormatter, configure_logging


def _record(msg="test message", level=logging.INFO, name="mcp_config_validator.validator"):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.mark.unit
class TestJsonFormatter:
    """Tests for structured JSON logging."""

    def test_format_includes_core_fields(self):
        data = json.loads(JsonFormatter().format(_record()))

        assert data["message"] == "test message"
        assert data["level"] == "INFO"
        assert data["logger"] == "mcp_config_validator.validator"
        assert data["component"] == "validator"
        assert "timestamp" in data

    def test_format_includes_extra_fields(self):
        record = _record()
        record.config_path = "claude-config.json"
        record.instance = "sonarqube-prod"

        data = json.loads(JsonFormatter().format(record))

        assert data["config_path"] == "claude-config.json"
        assert data["instance"] == "sonarqube-prod"

    def test_standard_record_attributes_are_not_repeated(self):
        data = json.loads(JsonFormatter().format(_record()))

        assert "msg" not in data
        assert "args" not in data
        assert "lineno" not in data

    def test_format_truncates_and_redacts(self):
        record = _record(msg="x" * 5000)
        record.token = "squ_real_token"
        record.passcode = "1234"

        data = json.loads(JsonFormatter().format(record))

        assert data["message"].endswith("...")
        assert len(data["message"]) == JsonFormatter.MAX_MESSAGE_LEN + 3
        assert data["token"] == "[REDACTED]"
        assert data["passcode"] == "[REDACTED]"

    def test_format_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("test", logging.ERROR, "test.py", 1, "failed", (), sys.exc_info())

        data = json.loads(JsonFormatter().format(record))

        assert "ValueError: boom" in data["exception"]

    def test_json_default_handles_set_path_and_bytes(self):
        formatter = JsonFormatter()

        assert formatter._json_default({3, 1, 2}) == [1, 2, 3]
        assert formatter._json_default(Path("/tmp/a.log")) == "/tmp/a.log"
        assert formatter._json_default(b"ok") == "ok"

    def test_json_default_handles_unorderable_set(self):
        value = JsonFormatter()._json_default({1, "a"})

        assert isinstance(value, list)
        assert len(value) == 2


@pytest.mark.unit
class TestConfigureLogging:
    def test_plain_output_goes_to_stderr(self, capsys):
        configure_logging("info", json_output=False)

        logging.getLogger("mcp_config_validator.test").info("hello stderr")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "INFO [mcp_config_validator.test] hello stderr" in captured.err

    def test_json_output(self, capsys):
        configure_logging("info", json_output=True)

        logging.getLogger("mcp_config_validator.test").info("hello json")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        assert json.loads(line)["message"] == "hello json"

    def test_unknown_level_falls_back_to_warning(self):
        configure_logging("chatty")

        assert logging.getLogger().level == logging.WARNING

    def test_replaces_existing_handlers(self):
        configure_logging("info")
        configure_logging("info")

        stream_handlers = [h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler]
        assert len(stream_handlers) == 1

    def test_logger_level_overrides(self):
        configure_logging("warning", logger_levels={"mcp_config_validator": "debug"})

        assert logging.getLogger("mcp_config_validator").level == logging.DEBUG
        logging.getLogger("mcp_config_validator").setLevel(logging.NOTSET)
