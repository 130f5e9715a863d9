from .aggregator import group_messages_into_threads, thread_subject
from .exceptions import EmailProcessingError, MessageValidationError, ThreadingError
from .matcher import matches_any, messages_match
from .models import NO_SUBJECT, Attachment, EmailMessage, EmailThread, ThreadingOptions
from .mutator import add_message_to_thread, find_thread_for_message, merge_threads_if_needed
from .participants import get_participants
from .references import extract_references
from .service import ThreadingService
from .subjects import normalize_subject

__all__ = [
    "NO_SUBJECT",
    "Attachment",
    "EmailMessage",
    "EmailThread",
    "ThreadingOptions",
    "EmailProcessingError",
    "MessageValidationError",
    "ThreadingError",
    "extract_references",
    "normalize_subject",
    "get_participants",
    "messages_match",
    "matches_any",
    "group_messages_into_threads",
    "thread_subject",
    "find_thread_for_message",
    "add_message_to_thread",
    "merge_threads_if_needed",
    "ThreadingService",
]
