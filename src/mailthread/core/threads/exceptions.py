"""Exceptions raised by the threading engine and the payload decoder."""

from __future__ import annotations

from typing import Any


class EmailProcessingError(Exception):
    """Base class for mailthread errors.

    Carries a machine-readable ``code`` and a ``details`` mapping so callers
    can report the offending identifiers without parsing the message.
    """

    code = "EMAIL_PROCESSING_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = dict(details or {})
        super().__init__(message)


class ThreadingError(EmailProcessingError):
    """Raised when a message is added to a thread it does not belong to."""

    code = "THREADING_ERROR"


class MessageValidationError(EmailProcessingError):
    """Raised when a message payload lacks required fields or has bad values."""

    code = "VALIDATION_ERROR"
