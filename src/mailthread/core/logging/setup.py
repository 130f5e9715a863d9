from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from pythonjsonlogger import jsonlogger


class CorrelationIdFilter(logging.Filter):
    def __init__(self, correlation_id: str):
        super().__init__()
        self._correlation_id = correlation_id

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = self._correlation_id
        return True


def configure_logging(
    log_dir: Path | None,
    correlation_id: str,
    level: int = logging.INFO,
    console_level: int | str | None = None,
) -> None:
    """Route the root logger to stderr and, when log_dir is set, to daily text and JSONL files."""
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    correlation_filter = CorrelationIdFilter(correlation_id)

    # Console lines omit timestamps and correlation ids; the log files keep them.
    console_formatter = logging.Formatter(fmt="%(levelname)s %(name)s: %(message)s")
    text_formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    json_formatter = jsonlogger.JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(correlation_id)s %(message)s"
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(console_level if console_level is not None else level)
    stream_handler.setFormatter(console_formatter)
    stream_handler.addFilter(correlation_filter)
    root.addHandler(stream_handler)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    utc_day = datetime.now(timezone.utc).strftime("%Y-%m-%d")

    text_handler = logging.FileHandler(log_dir / f"mailthread-{utc_day}.log", encoding="utf-8")
    text_handler.setFormatter(text_formatter)
    text_handler.addFilter(correlation_filter)

    json_handler = logging.FileHandler(log_dir / f"mailthread-{utc_day}.jsonl", encoding="utf-8")
    json_handler.setFormatter(json_formatter)
    json_handler.addFilter(correlation_filter)

    root.addHandler(text_handler)
    root.addHandler(json_handler)


def get_logger(name: str, correlation_id: str) -> logging.LoggerAdapter:
    base_logger = logging.getLogger(name)
    return logging.LoggerAdapter(base_logger, extra={"correlation_id": correlation_id})
