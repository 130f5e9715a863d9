from __future__ import annotations

import logging
from collections.abc import Iterable

from mailthread.core.ids import ThreadIdFactory, random_thread_id

from .aggregator import group_messages_into_threads
from .exceptions import ThreadingError
from .matcher import messages_match
from .models import EmailMessage, EmailThread, ThreadingOptions
from .mutator import add_message_to_thread, find_thread_for_message, merge_threads_if_needed
from .participants import get_participants
from .references import extract_references
from .subjects import normalize_subject


class ThreadingService:
    def __init__(
        self,
        options: ThreadingOptions | None = None,
        id_factory: ThreadIdFactory = random_thread_id,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        self.options = options or ThreadingOptions()
        self.id_factory = id_factory
        self.logger = logger or logging.getLogger("mailthread.threads")

    def normalize_subject(self, subject: str | None) -> str:
        return normalize_subject(subject, self.options.subject_normalization)

    @staticmethod
    def extract_references(message: EmailMessage) -> list[str]:
        return extract_references(message)

    @staticmethod
    def get_participants(message: EmailMessage) -> list[str]:
        return get_participants(message)

    def messages_match(self, a: EmailMessage, b: EmailMessage) -> bool:
        return messages_match(a, b, self.options)

    def group_messages_into_threads(self, messages: Iterable[EmailMessage]) -> list[EmailThread]:
        messages = list(messages)
        threads = group_messages_into_threads(messages, self.options, self.id_factory)
        self.logger.info("Grouped %s messages into %s threads", len(messages), len(threads))
        return threads

    def find_thread_for_message(
        self, threads: Iterable[EmailThread], message: EmailMessage
    ) -> EmailThread | None:
        thread = find_thread_for_message(threads, message, self.options)
        if thread is None:
            self.logger.debug("No thread found for message %s", message.id)
        else:
            self.logger.debug("Message %s belongs to thread %s", message.id, thread.id)
        return thread

    def add_message_to_thread(self, thread: EmailThread, message: EmailMessage) -> EmailThread:
        try:
            updated = add_message_to_thread(thread, message, self.options)
        except ThreadingError as exc:
            self.logger.warning("Rejected message %s for thread %s: %s", message.id, thread.id, exc)
            raise
        if updated is thread:
            self.logger.debug("Message %s already in thread %s", message.id, thread.id)
        return updated

    def merge_threads_if_needed(self, first: EmailThread, second: EmailThread) -> EmailThread | None:
        merged = merge_threads_if_needed(first, second, self.options)
        if merged is not None:
            self.logger.info(
                "Merged thread %s into %s (%s messages)", second.id, first.id, merged.message_count
            )
        return merged
