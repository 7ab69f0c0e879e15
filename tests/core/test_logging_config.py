"""
Tests for logging configuration
"""

import json
import logging

import pytest

from klaviyo_dashboard.core.logging_config import (
    ContextFormatter,
    JSONFormatter,
    get_logger,
    log_with_context,
    setup_logging,
)


def _record(message: str = "Metrics collected", **extra) -> logging.LogRecord:
    record = logging.LogRecord("klaviyo_dashboard.test", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Test structured JSON output"""

    def test_fields(self):
        data = json.loads(JSONFormatter().format(_record(client_id=7, category="campaign")))

        assert data["level"] == "INFO"
        assert data["logger"] == "klaviyo_dashboard.test"
        assert data["message"] == "Metrics collected"
        assert data["client_id"] == 7
        assert data["category"] == "campaign"
        assert data["timestamp"].endswith("Z")

    def test_nested_context_is_flattened(self):
        data = json.loads(JSONFormatter().format(_record(extra_fields={"email": "a@b.com"})))

        assert data["email"] == "a@b.com"
        assert "extra_fields" not in data

    def test_non_serialisable_values(self):
        data = json.loads(JSONFormatter().format(_record(path=object())))

        assert "object" in data["path"]


class TestContextFormatter:
    """Test console output"""

    def test_appends_extra_fields(self):
        formatter = ContextFormatter(fmt="%(levelname)s %(message)s")

        text = formatter.format(_record(client_id=7))

        assert text.endswith("Metrics collected | client_id=7")


class TestSetupLogging:
    """Test setup_logging"""

    def test_sets_level_and_single_handler(self, restore_root_logger):
        setup_logging(level="DEBUG")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1

    def test_json_console(self, restore_root_logger):
        setup_logging(level="INFO", json_output=True)

        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

    def test_log_file(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "app.log"
        setup_logging(level="INFO", log_file=log_file)

        log_with_context(get_logger("klaviyo_dashboard.test"), "info", "Client created", client_id=3)
        for handler in restore_root_logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert entry["message"] == "Client created"
        assert entry["client_id"] == 3

    def test_quiets_http_loggers(self, restore_root_logger):
        setup_logging(level="DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        setup_logging(level="LOUD")

        assert restore_root_logger.level == logging.INFO
