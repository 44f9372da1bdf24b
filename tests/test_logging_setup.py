"""Tests for CLI logging configuration."""

import io
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from peelfs.config.models import LoggingSettings
from peelfs.logging_setup import configure_logging


def _reset(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True


def test_configure_logging_with_rotating_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "peelfs.log"
    settings = LoggingSettings(level="info", file=str(log_file), max_size_mb=1, backup_count=2)

    logger = configure_logging(settings)
    try:
        assert logger.level == logging.INFO
        handler_types = {type(handler) for handler in logger.handlers}
        assert handler_types == {RichHandler, RotatingFileHandler}

        logging.getLogger("peelfs.unpacking.driver").info("peeled %s", "list.gz")
        for handler in logger.handlers:
            handler.flush()

        assert "peeled list.gz" in log_file.read_text(encoding="utf-8")
    finally:
        _reset(logger)


def test_reconfiguring_replaces_handlers() -> None:
    logger = configure_logging(LoggingSettings(level="DEBUG"))
    logger = configure_logging(LoggingSettings(level="bogus"))
    try:
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
    finally:
        _reset(logger)


def test_records_do_not_reach_root_handlers() -> None:
    seen: list[logging.LogRecord] = []

    class _Collector(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            seen.append(record)

    root = logging.getLogger()
    collector = _Collector(level=logging.DEBUG)
    root.addHandler(collector)
    console = Console(file=io.StringIO())
    logger = configure_logging(LoggingSettings(level="DEBUG"), console=console)
    try:
        assert logger.propagate is False
        logging.getLogger("peelfs.filesystem.cache").warning("cached %s", "/mnt")
        assert seen == []
    finally:
        _reset(logger)
        root.removeHandler(collector)
