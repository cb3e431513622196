# tests/unit/logging/test_logger.py — v2
"""Tests for logging/logger.py and logging/handlers.py."""

from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler

import pytest

from txflow.config.settings import Settings
from txflow.logging.context import clear_context, set_run_context, tool_context
from txflow.logging.handlers import create_rotating_handler, parse_size
from txflow.logging.logger import (
    ROOT_LOGGER,
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
    setup_logging_from_settings,
)


@pytest.fixture(autouse=True)
def _restore_txflow_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    clear_context()
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    clear_context()


def _record(msg: str = "hello %s", args: tuple = ("world",), **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="txflow.pipeline.tool_pipeline",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_basic_fields(self):
        entry = json.loads(JsonFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "txflow.pipeline.tool_pipeline"
        assert entry["message"] == "hello world"
        assert "context" not in entry
        assert "data" not in entry

    def test_context_injected(self):
        set_run_context("run_9", "0xfeed")
        with tool_context("erc20_price_lookup"):
            entry = json.loads(JsonFormatter().format(_record()))
        assert entry["context"] == {
            "run_id": "run_9",
            "tx_hash": "0xfeed",
            "tool": "erc20_price_lookup",
        }

    def test_extra_fields(self):
        record = _record(duration_ms=12, tool_status="completed", data={"tokens": 2})
        entry = json.loads(JsonFormatter().format(record))
        assert entry["data"] == {"tokens": 2, "duration_ms": 12, "tool_status": "completed"}

    def test_exception(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        entry = json.loads(JsonFormatter().format(record))
        assert "ValueError: bad value" in entry["exception"]


class TestTextFormatter:
    def test_format(self):
        set_run_context("run_9")
        with tool_context("token_transfer_extractor"):
            line = TextFormatter().format(_record())
        assert "INFO" in line
        assert "pipeline.tool_pipeline" in line
        assert "<run_9>" in line
        assert "[token_transfer_extractor]" in line
        assert line.endswith("hello world")


class TestSetupLogging:
    def test_get_logger_namespace(self):
        assert get_logger("cache").name == "txflow.cache"

    def test_console_handler(self):
        logger = setup_logging(level="DEBUG", log_format="text")
        assert logger.name == ROOT_LOGGER
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, TextFormatter)

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "txflow.log"
        logger = setup_logging(log_file=str(log_file))
        assert len(logger.handlers) == 2
        logging.getLogger("txflow.test").info("to file")
        for handler in logger.handlers:
            handler.flush()
        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["message"] == "to file"

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_from_settings_verbose_forces_debug(self):
        settings = Settings(_env_file=None, log_level="WARNING")
        assert setup_logging_from_settings(settings).level == logging.WARNING
        assert setup_logging_from_settings(settings, verbose=True).level == logging.DEBUG


class TestHandlers:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("10MB", 10 * 1024**2), ("512kb", 512 * 1024), ("1 GB", 1024**3), ("2048", 2048)],
    )
    def test_parse_size(self, value, expected):
        assert parse_size(value) == expected

    def test_parse_size_invalid(self):
        with pytest.raises(ValueError, match="Invalid size"):
            parse_size("ten megs")

    def test_rotating_handler(self, tmp_path):
        handler = create_rotating_handler(str(tmp_path / "a" / "x.log"), "1KB", 3)
        try:
            assert isinstance(handler, RotatingFileHandler)
            assert handler.maxBytes == 1024
            assert handler.backupCount == 3
        finally:
            handler.close()
