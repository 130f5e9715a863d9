from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from mailthread.core.logging import configure_logging, get_logger


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_writes_text_and_json(tmp_path: Path, restore_root_logger) -> None:  # noqa: ANN001
    configure_logging(tmp_path, correlation_id="corr-1")
    get_logger("mailthread.test", "corr-1").info("grouped %s threads", 3)
    for handler in logging.getLogger().handlers:
        handler.flush()

    text_files = list(tmp_path.glob("mailthread-*.log"))
    json_files = list(tmp_path.glob("mailthread-*.jsonl"))
    assert len(text_files) == 1
    assert len(json_files) == 1
    assert "[corr-1] mailthread.test: grouped 3 threads" in text_files[0].read_text(encoding="utf-8")

    record = json.loads(json_files[0].read_text(encoding="utf-8").strip().splitlines()[-1])
    assert record["correlation_id"] == "corr-1"
    assert record["message"] == "grouped 3 threads"


def test_configure_logging_without_directory_only_streams(restore_root_logger) -> None:  # noqa: ANN001
    configure_logging(None, correlation_id="corr-2", console_level=logging.WARNING)

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert handlers[0].level == logging.WARNING


def test_console_lines_are_short(tmp_path: Path, restore_root_logger, capsys) -> None:  # noqa: ANN001
    configure_logging(tmp_path, correlation_id="corr-3", console_level=logging.WARNING)
    get_logger("mailthread.test", "corr-3").warning("merge rejected for %s", "m-7")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert capsys.readouterr().err.strip() == "WARNING mailthread.test: merge rejected for m-7"
    (text_file,) = tmp_path.glob("mailthread-*.log")
    assert "[corr-3] mailthread.test: merge rejected for m-7" in text_file.read_text(encoding="utf-8")
