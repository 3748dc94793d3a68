"""Tests for changegen.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from changegen.logging import configure_logging, get_logger


def test_get_logger_nests_under_changegen() -> None:
    assert get_logger().name == "changegen"
    assert get_logger("parser").name == "changegen.parser"


def test_configure_logging_respects_verbose_flag() -> None:
    assert configure_logging().level == logging.INFO
    assert configure_logging(verbose=True).level == logging.DEBUG


def test_configure_logging_writes_debug_records_to_log_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "changegen.log"
    logger = configure_logging(log_file=log_file)
    try:
        get_logger("orchestrator").debug("collected %d scopes", 2)
        console = [h for h in logger.handlers if not isinstance(h, logging.FileHandler)]
        assert console[0].level == logging.INFO
        for handler in logger.handlers:
            handler.flush()
    finally:
        configure_logging()

    text = log_file.read_text(encoding="utf-8")
    assert "DEBUG changegen.orchestrator: collected 2 scopes" in text


def test_reconfiguring_replaces_handlers() -> None:
    configure_logging()
    logger = configure_logging()

    assert len(logger.handlers) == 1
