"""Tests for logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

from docpaste.config.settings import LoggingConfig
from docpaste.utils.logging import setup_logging


class TestSetupLogging:
    def teardown_method(self) -> None:
        logger = logging.getLogger("docpaste")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def test_repeated_setup_does_not_stack_handlers(self) -> None:
        setup_logging(LoggingConfig(level="DEBUG"))
        setup_logging(LoggingConfig(level="WARNING"))
        logger = logging.getLogger("docpaste")
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_file_handler(self, tmp_path: Path) -> None:
        log_file = tmp_path / "docpaste.log"
        setup_logging(LoggingConfig(file=str(log_file)))
        logging.getLogger("docpaste.test").info("hello file")
        for handler in logging.getLogger("docpaste").handlers:
            handler.flush()
        assert "hello file" in log_file.read_text(encoding="utf-8")
