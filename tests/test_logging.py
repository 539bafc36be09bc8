"""Tests for logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path

from ci_dokumentor.logging import configure_logging, get_logger


def test_get_logger_nests_under_package() -> None:
    assert get_logger().name == "ci_dokumentor"
    assert get_logger("renderer.file").name == "ci_dokumentor.renderer.file"


def test_configure_logging_replaces_handlers_and_writes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "run.log"

    configure_logging()
    logger = configure_logging(verbose=True, log_file=log_file)
    get_logger("tests").debug("hello from tests")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    for handler in logger.handlers:
        handler.flush()
    assert "DEBUG ci_dokumentor.tests: hello from tests" in log_file.read_text(encoding="utf-8")

    configure_logging()
    assert len(logger.handlers) == 1
