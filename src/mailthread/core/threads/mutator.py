from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from .exceptions import ThreadingError
from .matcher import DEFAULT_OPTIONS, matches_any
from .models import EmailMessage, EmailThread, ThreadingOptions
from .participants import get_participants, merge_participants


def _chronological(messages: Iterable[EmailMessage]) -> tuple[EmailMessage, ...]:
    return tuple(sorted(messages, key=lambda message: message.received_at))


def find_thread_for_message(
    threads: Iterable[EmailThread],
    message: EmailMessage,
    options: ThreadingOptions = DEFAULT_OPTIONS,
) -> EmailThread | None:
    for thread in threads:
        if matches_any(message, thread.messages, options):
            return thread
    return None


def add_message_to_thread(
    thread: EmailThread,
    message: EmailMessage,
    options: ThreadingOptions = DEFAULT_OPTIONS,
) -> EmailThread:
    """Return a copy of ``thread`` with ``message`` inserted in time order.

    Raises ThreadingError when no current member matches the message.
    A message whose id is already present returns ``thread`` itself.
    """
    if not matches_any(message, thread.messages, options):
        raise ThreadingError(
            "Message does not belong to this thread",
            details={"thread_id": thread.id, "message_id": message.id},
        )
    if thread.contains(message.id):
        return thread

    return replace(
        thread,
        messages=_chronological((*thread.messages, message)),
        participants=merge_participants(thread.participants, get_participants(message)),
    )


def merge_threads_if_needed(
    first: EmailThread,
    second: EmailThread,
    options: ThreadingOptions = DEFAULT_OPTIONS,
) -> EmailThread | None:
    """Combine two threads when any message pair across them matches.

    The merged thread keeps the first thread's id and subject. Returns
    None when nothing links the two threads.
    """
    linked = any(matches_any(message, second.messages, options) for message in first.messages)
    if not linked:
        return None

    unique: list[EmailMessage] = []
    seen: set[str] = set()
    for message in _chronological((*first.messages, *second.messages)):
        if message.id not in seen:
            seen.add(message.id)
            unique.append(message)

    return EmailThread(
        id=first.id,
        subject=first.subject,
        participants=merge_participants(first.participants, second.participants),
        messages=tuple(unique),
    )
