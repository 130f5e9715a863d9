from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

NO_SUBJECT = "No Subject"

MIN_TIME_WINDOW_HOURS = 1
MAX_TIME_WINDOW_HOURS = 168


def _as_tuple(value) -> tuple:  # noqa: ANN001
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True, slots=True)
class ThreadingOptions:
    """Switches for the matching signals used by the threading engine.

    - subject_normalization: compare subjects with reply/forward markers,
      case and whitespace removed; when off, the subject fallback is off too.
    - references_tracking: match on Message-ID / In-Reply-To / References.
    - participant_grouping: subject matches additionally require shared
      participants and a receive-time distance within time_window_hours.
    """

    subject_normalization: bool = True
    references_tracking: bool = True
    participant_grouping: bool = True
    time_window_hours: float = 24

    def __post_init__(self) -> None:
        if isinstance(self.time_window_hours, bool) or not (
            MIN_TIME_WINDOW_HOURS <= self.time_window_hours <= MAX_TIME_WINDOW_HOURS
        ):
            raise ValueError(
                f"time_window_hours must be between {MIN_TIME_WINDOW_HOURS} and "
                f"{MAX_TIME_WINDOW_HOURS}, got {self.time_window_hours!r}"
            )


@dataclass(frozen=True, slots=True)
class Attachment:
    filename: str | None
    content_type: str | None
    size: int | None = None


@dataclass(frozen=True, slots=True)
class EmailMessage:
    id: str
    message_id: str
    sender: str
    received_at: datetime
    subject: str = ""
    in_reply_to: str | None = None
    references: tuple[str, ...] = ()
    to: tuple[str, ...] = ()
    cc: tuple[str, ...] = ()
    bcc: tuple[str, ...] = ()
    body_text: str | None = None
    body_html: str | None = None
    attachments: tuple[Attachment, ...] = ()

    def __post_init__(self) -> None:
        for name in ("references", "to", "cc", "bcc", "attachments"):
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))
        if self.subject is None:
            object.__setattr__(self, "subject", "")


@dataclass(frozen=True, slots=True)
class EmailThread:
    id: str
    subject: str
    participants: tuple[str, ...]
    messages: tuple[EmailMessage, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "participants", _as_tuple(self.participants))
        object.__setattr__(self, "messages", _as_tuple(self.messages))
        if not self.messages:
            raise ValueError("EmailThread requires at least one message")

    @property
    def message_count(self) -> int:
        return len(self.messages)

    @property
    def last_message_at(self) -> datetime:
        return max(message.received_at for message in self.messages)

    @property
    def message_ids(self) -> list[str]:
        return [message.id for message in self.messages]

    def contains(self, message_id: str) -> bool:
        return any(message.id == message_id for message in self.messages)
