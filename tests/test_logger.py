"""
Tests for logging setup.
"""

import logging

import pytest

from src.geospatial_workflow.core.logger import LoggerContext, parse_log_level, setup_logger


@pytest.fixture
def logger_name(request):
    name = f"geospatial_workflow.test.{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestSetupLogger:
    """Test cases for setup_logger."""

    def test_level_applies_to_logger_and_handlers(self, logger_name, tmp_path):
        log_file = tmp_path / "nested" / "run.log"

        logger = setup_logger(logger_name, log_file=str(log_file), log_level="warning")
        logger.info("hidden")
        logger.warning("shown")

        assert logger.level == logging.WARNING
        assert all(handler.level == logging.WARNING for handler in logger.handlers)
        text = log_file.read_text(encoding="utf-8")
        assert "shown" in text
        assert "hidden" not in text

    def test_file_lines_carry_source_location(self, logger_name, tmp_path):
        log_file = tmp_path / "run.log"

        logger = setup_logger(logger_name, log_file=str(log_file), log_level="DEBUG", console=False)
        logger.debug("flattened")

        assert "test_logger.py:" in log_file.read_text(encoding="utf-8")

    def test_console_only(self, logger_name):
        logger = setup_logger(logger_name, log_file=None)

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)
        assert logger.propagate is False

    def test_no_handlers_propagates(self, logger_name):
        logger = setup_logger(logger_name, log_file=None, console=False)

        assert logger.handlers == []
        assert logger.propagate is True

    def test_repeated_setup_replaces_handlers(self, logger_name, tmp_path):
        setup_logger(logger_name, log_file=str(tmp_path / "a.log"))
        logger = setup_logger(logger_name, log_file=str(tmp_path / "b.log"))

        assert len(logger.handlers) == 2

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="LOUD"):
            parse_log_level("LOUD")


class TestLoggerContext:
    """Test cases for LoggerContext."""

    def test_completion_with_summary(self, caplog):
        logger = logging.getLogger("stage_context_test")

        with caplog.at_level(logging.INFO, logger=logger.name):
            with LoggerContext(logger, "response flattening") as stage:
                stage.summary = "6 records"

        assert "Starting response flattening" in caplog.text
        assert "Completed response flattening" in caplog.text
        assert "(6 records)" in caplog.text
        assert stage.duration is not None

    def test_failure_logged_and_raised(self, caplog):
        logger = logging.getLogger("stage_context_test")

        with caplog.at_level(logging.INFO, logger=logger.name):
            with pytest.raises(RuntimeError):
                with LoggerContext(logger, "file export"):
                    raise RuntimeError("disk full")

        assert "Failed file export" in caplog.text
        assert "disk full" in caplog.text
