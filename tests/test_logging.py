"""
Structured logging and configuration helpers.
"""

import logging

import pytest

from qa_checkin.core import config
from qa_checkin.util.logging import StructuredLogger, mask_tel_number


@pytest.mark.parametrize("tel_number,expected", [
    ("5551230100", "******0100"),
    ("555-0100", "****0100"),
    ("123", "***"),
    ("", ""),
])
def test_mask_tel_number(tel_number, expected):
    assert mask_tel_number(tel_number) == expected


def test_log_record_operation_masks_number(caplog):
    structured = StructuredLogger("qa_checkin.test")
    with caplog.at_level(logging.INFO, logger="qa_checkin.test"):
        structured.log_record_operation("append", "5551230100", details={"added": 2})

    message = caplog.records[-1].getMessage()
    assert message.startswith("Operation: record.append, Status: success")
    assert "******0100" in message
    assert "5551230100" not in message
    assert "'added': 2" in message


def test_failed_operations_log_at_error(caplog):
    structured = StructuredLogger("qa_checkin.test")
    with caplog.at_level(logging.INFO, logger="qa_checkin.test"):
        structured.log_operation("record.list", "failed", {"error": "boom"})

    assert caplog.records[-1].levelno == logging.ERROR


def test_logger_installs_single_handler():
    first = StructuredLogger("qa_checkin.handlers")
    StructuredLogger("qa_checkin.handlers")
    assert len(first.logger.handlers) == 1


def test_invalid_bucket_name(monkeypatch):
    monkeypatch.setenv("QA_BUCKET", "qa data; drop")
    with pytest.raises(ValueError):
        config.get_bucket_name()
    assert any("QA_BUCKET" in issue for issue in config.validate_config())


def test_db_path_follows_environment(monkeypatch):
    monkeypatch.setenv("QA_DB_PATH", "/tmp/other.db")
    assert config.get_db_path() == "/tmp/other.db"


def test_default_config_is_valid(monkeypatch):
    monkeypatch.delenv("QA_BUCKET", raising=False)
    monkeypatch.delenv("QA_BUSY_TIMEOUT_SEC", raising=False)
    monkeypatch.delenv("QA_LOG_LEVEL", raising=False)
    assert config.validate_config() == []


def test_invalid_log_level_falls_back_and_is_reported(monkeypatch):
    monkeypatch.setenv("QA_LOG_LEVEL", "verbose")

    structured = StructuredLogger("qa_checkin.levels")

    assert structured.logger.level == logging.INFO
    assert not config.log_level_valid()
    assert "Invalid QA_LOG_LEVEL: VERBOSE" in config.validate_config()


def test_log_level_from_config(monkeypatch):
    monkeypatch.setenv("QA_LOG_LEVEL", "warning")
    assert StructuredLogger("qa_checkin.warnings").logger.level == logging.WARNING
