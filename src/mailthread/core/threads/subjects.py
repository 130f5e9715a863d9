from __future__ import annotations

import re

# One marker layer only: "Re: Fwd: x" keeps the inner "Fwd:".
REPLY_PREFIX_PATTERN = re.compile(r"^(?:re|fwd|fw):\s*", flags=re.IGNORECASE)
WHITESPACE_PATTERN = re.compile(r"\s+")


def normalize_subject(subject: str | None, enabled: bool = True) -> str:
    if not enabled:
        return subject or ""
    if not subject:
        return ""
    stripped = REPLY_PREFIX_PATTERN.sub("", subject, count=1)
    return WHITESPACE_PATTERN.sub(" ", stripped).strip().lower()
