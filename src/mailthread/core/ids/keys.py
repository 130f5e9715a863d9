from __future__ import annotations

import hashlib
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mailthread.core.threads.models import EmailMessage

ThreadIdFactory = Callable[["EmailMessage"], str]


# Message-IDs are case-sensitive, so parts are hashed verbatim.
def _hash_part(part: Any) -> str:
    if part is None:
        return ""
    if isinstance(part, datetime):
        return part.isoformat()
    return str(part)


def stable_hash(*parts: Any) -> str:
    payload = "||".join(_hash_part(part) for part in parts)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def random_thread_id(message: EmailMessage) -> str:  # noqa: ARG001
    return str(uuid.uuid4())


def stable_thread_id(message: EmailMessage) -> str:
    """Deterministic id derived from the thread's first message."""
    if message.message_id:
        return stable_hash("thread", message.message_id)
    return stable_hash("thread", message.id, message.received_at)
