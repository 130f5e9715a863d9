from __future__ import annotations

from collections.abc import Iterable
from datetime import timedelta

from .models import EmailMessage, ThreadingOptions
from .participants import get_participants
from .references import extract_references
from .subjects import normalize_subject

DEFAULT_OPTIONS = ThreadingOptions()


def references_match(a: EmailMessage, b: EmailMessage) -> bool:
    refs_a = extract_references(a)
    refs_b = extract_references(b)
    if b.message_id in refs_a or a.message_id in refs_b:
        return True
    return not set(refs_a).isdisjoint(refs_b)


def within_time_window(a: EmailMessage, b: EmailMessage, hours: float) -> bool:
    return abs(a.received_at - b.received_at) <= timedelta(hours=hours)


def subject_match(a: EmailMessage, b: EmailMessage, options: ThreadingOptions) -> bool:
    subject_a = normalize_subject(a.subject, options.subject_normalization)
    subject_b = normalize_subject(b.subject, options.subject_normalization)
    if not subject_a or subject_a != subject_b:
        return False
    if not options.participant_grouping:
        return True
    if set(get_participants(a)).isdisjoint(get_participants(b)):
        return False
    return within_time_window(a, b, options.time_window_hours)


def messages_match(
    a: EmailMessage,
    b: EmailMessage,
    options: ThreadingOptions = DEFAULT_OPTIONS,
) -> bool:
    """Decide whether two messages belong to the same conversation.

    Header references win whenever they link the messages. Otherwise an
    equal normalized subject is used as a fallback, constrained by shared
    participants and the time window when participant grouping is on.
    """
    if options.references_tracking and references_match(a, b):
        return True
    if options.subject_normalization:
        return subject_match(a, b, options)
    return False


def matches_any(
    message: EmailMessage,
    candidates: Iterable[EmailMessage],
    options: ThreadingOptions = DEFAULT_OPTIONS,
) -> bool:
    return any(messages_match(message, candidate, options) for candidate in candidates)
