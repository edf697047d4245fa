"""
Tests for logging utilities.

Covers setup_logging (console/file handlers, structlog configuration) and the
structured review log helpers.
"""

import logging
import logging.handlers
from unittest.mock import MagicMock, patch

import pytest
import structlog

from src.utils.logging import get_review_logger, log_review_recorded, setup_logging


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def clean_logging_state():
    """Clean up logging state before and after each test."""
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers.copy()
    original_level = root_logger.level

    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)

    yield

    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)

    review_logger = logging.getLogger("srs.reviews")
    for handler in review_logger.handlers:
        handler.close()
    review_logger.handlers.clear()


def _file_names(logger):
    return sorted(
        h.baseFilename.rsplit("/", 1)[-1]
        for h in logger.handlers
        if isinstance(h, logging.handlers.RotatingFileHandler)
    )


# =============================================================================
# Setup Logging Tests
# =============================================================================


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_creates_logs_directory(self, clean_logging_state, tmp_path):
        logs_dir = tmp_path / "logs"

        setup_logging(log_to_file=True, logs_dir=logs_dir)

        assert logs_dir.is_dir()

    @pytest.mark.parametrize(
        "log_level,expected",
        [
            ("DEBUG", logging.DEBUG),
            ("WARNING", logging.WARNING),
            ("info", logging.INFO),
        ],
    )
    def test_log_level_settings(self, clean_logging_state, log_level, expected):
        setup_logging(log_level=log_level, log_to_file=False)

        root_logger = logging.getLogger()
        assert root_logger.level == expected
        assert root_logger.handlers[0].level == expected

    def test_no_file_handlers_when_disabled(self, clean_logging_state):
        setup_logging(log_to_file=False)

        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert not isinstance(root_logger.handlers[0], logging.FileHandler)

    def test_file_handlers_created(self, clean_logging_state, tmp_path):
        setup_logging(log_to_file=True, logs_dir=tmp_path)

        assert _file_names(logging.getLogger()) == ["app.log", "errors.log"]
        assert _file_names(logging.getLogger("srs.reviews")) == ["reviews.log"]

    def test_error_log_only_takes_errors(self, clean_logging_state, tmp_path):
        setup_logging(log_to_file=True, logs_dir=tmp_path)

        error_handlers = [
            h
            for h in logging.getLogger().handlers
            if isinstance(h, logging.FileHandler) and h.baseFilename.endswith("errors.log")
        ]
        assert error_handlers[0].level == logging.ERROR


class TestStructlogConfiguration:
    def test_structlog_uses_json_renderer_for_file(self, clean_logging_state, tmp_path):
        with patch("src.utils.logging.structlog.configure") as mock_configure:
            setup_logging(log_to_file=True, logs_dir=tmp_path)

        processors = mock_configure.call_args[1]["processors"]
        assert any(isinstance(p, structlog.processors.JSONRenderer) for p in processors)

    def test_structlog_uses_console_renderer_for_no_file(self, clean_logging_state):
        with patch("src.utils.logging.structlog.configure") as mock_configure:
            setup_logging(log_to_file=False)

        processors = mock_configure.call_args[1]["processors"]
        assert any(isinstance(p, structlog.dev.ConsoleRenderer) for p in processors)


# =============================================================================
# Review Log Tests
# =============================================================================


class TestReviewLogging:
    def test_default_logger_name(self):
        with patch("src.utils.logging.structlog.get_logger") as mock_get_logger:
            get_review_logger()
            mock_get_logger.assert_called_once_with("srs.reviews")

    def test_log_review_recorded_includes_context(self):
        logger = MagicMock()

        log_review_recorded(
            session_id="s1",
            card_id="c1",
            rating=4,
            details={"interval_days": 6, "status": "review"},
            logger=logger,
        )

        logger.info.assert_called_once_with(
            "Review recorded",
            session_id="s1",
            card_id="c1",
            rating=4,
            interval_days=6,
            status="review",
        )

    def test_log_review_recorded_uses_review_logger_by_default(self):
        mock_logger = MagicMock()
        with patch("src.utils.logging.get_review_logger", return_value=mock_logger):
            log_review_recorded("s1", "c1", 3, {})

        mock_logger.info.assert_called_once()
