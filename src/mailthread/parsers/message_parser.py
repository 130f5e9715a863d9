from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from dateutil import parser as dt_parser

from mailthread.core.threads import Attachment, EmailMessage, MessageValidationError

from .utils import split_addresses, split_references

# Payload keys accepted for each EmailMessage field, camelCase first.
FIELD_ALIASES = {
    "id": ("id",),
    "message_id": ("messageId", "message_id", "Message-Id"),
    "in_reply_to": ("inReplyTo", "in_reply_to", "In-Reply-To"),
    "references": ("references", "References"),
    "sender": ("from", "sender"),
    "to": ("to",),
    "cc": ("cc",),
    "bcc": ("bcc",),
    "subject": ("subject",),
    "body_text": ("bodyText", "body_text", "body-plain"),
    "body_html": ("bodyHtml", "body_html", "body-html"),
    "received_at": ("receivedAt", "received_at", "timestamp"),
    "attachments": ("attachments",),
}

REQUIRED_FIELDS = ("id", "message_id", "sender", "received_at")


def _pick(payload: Mapping[str, Any], field_name: str) -> Any:
    for key in FIELD_ALIASES[field_name]:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def _parse_received_at(value: Any, message_ref: str) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str) and value.strip().isdigit():
        parsed = datetime.fromtimestamp(int(value.strip()), tz=timezone.utc)
    else:
        try:
            parsed = dt_parser.parse(str(value))
        except (ValueError, OverflowError) as exc:
            raise MessageValidationError(
                f"Invalid receivedAt value: {value!r}",
                details={"message_id": message_ref, "received_at": value},
            ) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_attachments(value: Any) -> tuple[Attachment, ...]:
    if not value:
        return ()
    attachments = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        size = item.get("size")
        attachments.append(
            Attachment(
                filename=item.get("filename"),
                content_type=item.get("contentType") or item.get("content_type"),
                size=int(size) if size is not None else None,
            )
        )
    return tuple(attachments)


def parse_message(payload: Mapping[str, Any]) -> EmailMessage:
    """Decode one message payload (camelCase or snake_case keys) into an EmailMessage."""
    if not isinstance(payload, Mapping):
        raise MessageValidationError(
            "Message payload must be an object",
            details={"type": type(payload).__name__},
        )

    values = {name: _pick(payload, name) for name in FIELD_ALIASES}
    message_ref = str(values["message_id"] or values["id"] or "")

    missing = [name for name in REQUIRED_FIELDS if values[name] in (None, "")]
    if missing:
        raise MessageValidationError(
            "Message missing required fields",
            details={"message_id": message_ref, "missing": missing},
        )

    senders = split_addresses(values["sender"])
    if not senders:
        raise MessageValidationError(
            "Message sender is empty",
            details={"message_id": message_ref},
        )

    in_reply_to = str(values["in_reply_to"] or "").strip() or None
    return EmailMessage(
        id=str(values["id"]),
        message_id=str(values["message_id"]).strip(),
        sender=senders[0],
        received_at=_parse_received_at(values["received_at"], message_ref),
        subject=str(values["subject"] or ""),
        in_reply_to=in_reply_to,
        references=tuple(split_references(values["references"])),
        to=tuple(split_addresses(values["to"])),
        cc=tuple(split_addresses(values["cc"])),
        bcc=tuple(split_addresses(values["bcc"])),
        body_text=values["body_text"],
        body_html=values["body_html"],
        attachments=_parse_attachments(values["attachments"]),
    )


def parse_messages(payloads: Iterable[Mapping[str, Any]]) -> list[EmailMessage]:
    return [parse_message(payload) for payload in payloads]


def messages_from_json(text: str, source: str = "<data>") -> list[EmailMessage]:
    """Decode a JSON document holding a list of payloads or {"messages": [...]}."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MessageValidationError(
            f"Invalid JSON: {exc.msg}",
            details={"source": source, "line": exc.lineno, "column": exc.colno},
        ) from exc
    return parse_messages(_message_payloads(payload, source=source))


def load_messages(path: Path) -> list[EmailMessage]:
    return messages_from_json(path.read_text(encoding="utf-8-sig"), source=str(path))


def _message_payloads(payload: Any, source: str) -> list[Any]:
    if isinstance(payload, Mapping) and "messages" in payload:
        payload = payload["messages"]
    if not isinstance(payload, list):
        raise MessageValidationError(
            "Expected a list of messages",
            details={"source": source},
        )
    return payload
