"""Tests for logging configuration."""

import json
import logging

import pytest

from farm_log.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers after setup_logging()."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_format_includes_entity_and_context(self):
        """Test that entity extras and context are serialized."""
        record = logging.LogRecord(
            name="farm_log.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Saved %s",
            args=("log",),
            exc_info=None,
        )
        record.entity_type = "log"
        record.entity_id = 5
        record.context = {"criteria": {"type": "foo"}}

        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "Saved log"
        assert data["level"] == "INFO"
        assert data["entity_type"] == "log"
        assert data["entity_id"] == 5
        assert data["context"] == {"criteria": {"type": "foo"}}


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_writes_json_to_file(self, tmp_path, restore_root_logger):
        """Test that records are written to the log file as JSON."""
        log_file = tmp_path / "logs" / "app.log"
        setup_logging(log_level="debug", log_file=str(log_file), console=False)

        get_logger("farm_log.test").info("Log query built")
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["message"] == "Log query built"
