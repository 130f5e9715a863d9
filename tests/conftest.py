from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from itertools import count
from pathlib import Path

import pytest

from mailthread.config import Settings
from mailthread.core.threads import EmailMessage

BASE_TIME = datetime(2026, 2, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture()
def t0() -> datetime:
    return BASE_TIME


@pytest.fixture()
def make_message():
    """Factory for EmailMessage values; ``hours`` offsets receivedAt from BASE_TIME."""
    sequence = count(1)

    def _make(
        id: str | None = None,
        *,
        message_id: str | None = None,
        subject: str = "Hello",
        sender: str = "alice@example.com",
        to: tuple[str, ...] = ("bob@example.com",),
        cc: tuple[str, ...] = (),
        bcc: tuple[str, ...] = (),
        in_reply_to: str | None = None,
        references: tuple[str, ...] = (),
        hours: float = 0,
        received_at: datetime | None = None,
    ) -> EmailMessage:
        number = next(sequence)
        message_key = id or str(number)
        return EmailMessage(
            id=message_key,
            message_id=message_id or f"<m{message_key}@example.com>",
            sender=sender,
            received_at=received_at or BASE_TIME + timedelta(hours=hours),
            subject=subject,
            in_reply_to=in_reply_to,
            references=references,
            to=to,
            cc=cc,
            bcc=bcc,
        )

    return _make


@pytest.fixture()
def counter_ids():
    sequence = count(1)
    return lambda message: f"thread-{next(sequence)}"  # noqa: ARG005


@pytest.fixture()
def settings(tmp_path: Path, monkeypatch) -> Settings:  # noqa: ANN001
    for name in (
        "MAILTHREAD_HOME",
        "MAILTHREAD_CONFIG",
        "MAILTHREAD_LOG_DIR",
        "MAILTHREAD_EXPORT_DIR",
        "MAILTHREAD_SUBJECT_NORMALIZATION",
        "MAILTHREAD_REFERENCES_TRACKING",
        "MAILTHREAD_PARTICIPANT_GROUPING",
        "MAILTHREAD_TIME_WINDOW_HOURS",
    ):
        monkeypatch.delenv(name, raising=False)
    root = tmp_path / "project"
    root.mkdir(parents=True, exist_ok=True)
    s = Settings.load(base_dir=root)
    s.ensure_directories()
    return s


@pytest.fixture()
def test_logger() -> logging.Logger:
    logger = logging.getLogger("mailthread-test")
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.DEBUG)
    return logger
