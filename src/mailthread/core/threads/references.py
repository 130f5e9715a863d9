from __future__ import annotations

from .models import EmailMessage


def extract_references(message: EmailMessage) -> list[str]:
    """In-Reply-To followed by References, deduplicated in first-seen order."""
    candidates: list[str] = []
    if message.in_reply_to:
        candidates.append(message.in_reply_to)
    candidates.extend(message.references)

    deduped: list[str] = []
    seen: set[str] = set()
    for ref in candidates:
        if ref and ref not in seen:
            seen.add(ref)
            deduped.append(ref)
    return deduped
