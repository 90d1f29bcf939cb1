"""
Tests for the package logging setup.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tax_receipt.config import ReceiptConfig
from tax_receipt.logging_setup import (
    ROOT_LOGGER_NAME,
    configure_logging,
    get_logger,
)
from tax_receipt.pipeline import ReceiptPipeline
from tax_receipt.schema import SheetRow


class EmptySource:
    def fetch_row(self, record_id: int) -> SheetRow:
        return SheetRow(record_id=record_id, values=[])


def _file_handlers(path: Path) -> list[logging.FileHandler]:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    return [
        h for h in root.handlers
        if isinstance(h, logging.FileHandler) and h.baseFilename == str(path.resolve())
    ]


@pytest.fixture
def log_path(tmp_path: Path) -> Iterator[Path]:
    path = tmp_path / "receipt.log"
    yield path
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in _file_handlers(path):
        root.removeHandler(handler)
        handler.close()


class TestConfigureLogging:
    def test_file_handler_attached(self, log_path: Path) -> None:
        configure_logging(level=logging.INFO, log_file=log_path)
        assert len(_file_handlers(log_path)) == 1

        get_logger("test").info("receipt built for %d", 7)
        for handler in _file_handlers(log_path):
            handler.flush()
        assert "receipt built for 7" in log_path.read_text(encoding="utf-8")

    def test_repeated_calls_do_not_duplicate_handlers(self, log_path: Path) -> None:
        configure_logging(level=logging.INFO, log_file=log_path)
        count = len(logging.getLogger(ROOT_LOGGER_NAME).handlers)

        configure_logging(level=logging.INFO, log_file=str(log_path))
        assert len(logging.getLogger(ROOT_LOGGER_NAME).handlers) == count
        assert len(_file_handlers(log_path)) == 1

    def test_level_updated(self, log_path: Path) -> None:
        configure_logging(level=logging.ERROR, log_file=log_path)
        root = logging.getLogger(ROOT_LOGGER_NAME)
        assert root.level == logging.ERROR
        assert all(h.level == logging.ERROR for h in root.handlers)

    def test_child_logger_namespace(self) -> None:
        assert get_logger("pipeline").name == "tax_receipt.pipeline"


class TestPipelineLogFile:
    def test_config_log_file_reaches_handler(self, log_path: Path) -> None:
        ReceiptPipeline(
            config=ReceiptConfig(log_level=logging.WARNING, log_file=log_path),
            source=EmptySource(),
            with_qr=False,
        )
        assert len(_file_handlers(log_path)) == 1

    def test_no_log_file_by_default(self, log_path: Path) -> None:
        ReceiptPipeline(
            config=ReceiptConfig(log_level=logging.WARNING),
            source=EmptySource(),
            with_qr=False,
        )
        assert _file_handlers(log_path) == []
