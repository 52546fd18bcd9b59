"""Logging setup utilities for docpaste.

Configures logging for the entire application based on the logging
configuration settings.
"""

from __future__ import annotations

import logging
import sys

from docpaste.config.settings import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure logging for the docpaste application.

    Sets up the 'docpaste' logger with the specified level, format, and
    optional file handler. Calling it again replaces the handlers it
    installed earlier instead of stacking duplicates.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger("docpaste")
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        if getattr(handler, "_docpaste_handler", False):
            root_logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(config.format)

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler._docpaste_handler = True  # type: ignore[attr-defined]
    root_logger.addHandler(console_handler)

    # File handler (optional)
    if config.file:
        file_handler = logging.FileHandler(config.file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler._docpaste_handler = True  # type: ignore[attr-defined]
        root_logger.addHandler(file_handler)

    root_logger.info("Logging initialized at %s level", config.level)
