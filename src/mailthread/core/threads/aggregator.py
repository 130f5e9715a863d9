from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from mailthread.core.ids import ThreadIdFactory, random_thread_id

from .matcher import DEFAULT_OPTIONS, matches_any
from .models import NO_SUBJECT, EmailMessage, EmailThread, ThreadingOptions
from .participants import get_participants, merge_participants
from .subjects import normalize_subject


def thread_subject(message: EmailMessage, options: ThreadingOptions) -> str:
    return normalize_subject(message.subject, options.subject_normalization) or NO_SUBJECT


@dataclass(slots=True)
class _ThreadBuilder:
    id: str
    subject: str
    messages: list[EmailMessage] = field(default_factory=list)
    participants: list[str] = field(default_factory=list)

    def append(self, message: EmailMessage) -> None:
        self.messages.append(message)
        self.participants = list(merge_participants(self.participants, get_participants(message)))

    def build(self) -> EmailThread:
        return EmailThread(
            id=self.id,
            subject=self.subject,
            participants=tuple(self.participants),
            messages=tuple(self.messages),
        )


def group_messages_into_threads(
    messages: Iterable[EmailMessage],
    options: ThreadingOptions = DEFAULT_OPTIONS,
    id_factory: ThreadIdFactory = random_thread_id,
) -> list[EmailThread]:
    """Partition messages into conversation threads.

    Messages are visited oldest first. Each one joins the first thread (in
    creation order) holding any member it matches, otherwise it starts a
    new thread. A message id is placed at most once. Threads are returned
    most recently active first.
    """
    ordered = sorted(messages, key=lambda message: message.received_at)
    builders: list[_ThreadBuilder] = []
    assigned: set[str] = set()

    for message in ordered:
        if message.id in assigned:
            continue

        target = next(
            (builder for builder in builders if matches_any(message, builder.messages, options)),
            None,
        )
        if target is None:
            target = _ThreadBuilder(id=id_factory(message), subject=thread_subject(message, options))
            builders.append(target)
        target.append(message)
        assigned.add(message.id)

    threads = [builder.build() for builder in builders]
    threads.sort(key=lambda thread: thread.last_message_at, reverse=True)
    return threads
