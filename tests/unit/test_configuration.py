# ============================================================================
# FILE: tests/unit/test_configuration.py
# ============================================================================
"""
Unit tests for settings and logging utilities
"""

import json
import logging
import sys

import pytest
from pydantic import ValidationError as SettingsValidationError

from biomarker_ingestion.config import (
    AnonymizationSettings,
    ExtractionSettings,
    ThresholdSettings,
    extraction_settings,
    threshold_settings,
)
from biomarker_ingestion.utils import ConfigurationError, JsonFormatter, log_performance, setup_logging


def test_default_settings():
    """Test shipped defaults"""
    assert extraction_settings.RECORDS_FIELD == "biomarkers"
    assert extraction_settings.MIN_TEXT_LENGTH == 50
    assert extraction_settings.MAX_UPLOAD_BYTES == 10 * 1024 * 1024
    assert extraction_settings.ALLOW_UNANONYMIZED_VISION_FALLBACK is False
    assert threshold_settings.OPTIMAL_MARGIN_RATIO == 0.10
    assert threshold_settings.SUBOPTIMAL_MARGIN_FACTOR == 2.0


def test_env_override(monkeypatch):
    """Test environment variables override defaults"""
    monkeypatch.setenv("MIN_TEXT_LENGTH", "10")
    monkeypatch.setenv("ALLOW_UNANONYMIZED_VISION_FALLBACK", "true")
    monkeypatch.setenv("AGE_MAX", "110")

    assert ExtractionSettings().MIN_TEXT_LENGTH == 10
    assert ExtractionSettings().ALLOW_UNANONYMIZED_VISION_FALLBACK is True
    assert AnonymizationSettings().AGE_MAX == 110


def test_invalid_setting_rejected(monkeypatch):
    """Test Field bounds are enforced"""
    monkeypatch.setenv("OPTIMAL_MARGIN_RATIO", "1.5")

    with pytest.raises(SettingsValidationError):
        ThresholdSettings()


def test_unknown_log_level():
    """Test bad LOG_LEVEL"""
    with pytest.raises(ConfigurationError):
        setup_logging(level="LOUD")


def test_json_formatter():
    """Test JSON log lines"""
    record = logging.LogRecord("biomarker_ingestion.test", logging.WARNING, __file__, 10,
                               "Document %d failed", (2,), None)

    data = json.loads(JsonFormatter().format(record))

    assert data["level"] == "WARNING"
    assert data["logger"] == "biomarker_ingestion.test"
    assert data["message"] == "Document 2 failed"


def test_log_performance(caplog):
    """Test timing decorator logs success and failure"""
    logger = logging.getLogger("biomarker_ingestion.test")

    @log_performance(logger, "Work")
    def work(fail=False):
        if fail:
            raise ValueError("boom")
        return 42

    with caplog.at_level(logging.INFO, logger="biomarker_ingestion.test"):
        assert work() == 42
        with pytest.raises(ValueError):
            work(fail=True)

    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("Work completed in") for m in messages)
    assert any("Work failed after" in m and "ValueError" in m for m in messages)


def test_json_formatter_hides_exception_text():
    """Test exception messages stay out of JSON logs unless asked for"""
    try:
        raise ValueError("Response ends with: 'Pacjent'")
    except ValueError:
        record = logging.LogRecord("biomarker_ingestion.test", logging.ERROR, __file__, 10,
                                   "Extraction failed", None, sys.exc_info())

    plain = json.loads(JsonFormatter().format(record))
    verbose = json.loads(JsonFormatter(include_traceback=True).format(record))

    assert plain["error_type"] == "ValueError"
    assert "traceback" not in plain
    assert "Pacjent" in verbose["traceback"]
