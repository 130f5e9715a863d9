from __future__ import annotations

import re
from collections.abc import Iterable

WHITESPACE_PATTERN = re.compile(r"\s+")


def _dedupe(values: Iterable[str]) -> list[str]:
    deduped = []
    seen = set()
    for value in values:
        if value and value not in seen:
            seen.add(value)
            deduped.append(value)
    return deduped


def split_addresses(value: str | Iterable[str] | None) -> list[str]:
    """Comma-separated string or list of addresses -> trimmed, lowercased, unique."""
    if value is None:
        return []
    parts = value.split(",") if isinstance(value, str) else value
    return _dedupe(str(part).strip().lower() for part in parts if part is not None)


def split_references(value: str | Iterable[str] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return _dedupe(WHITESPACE_PATTERN.split(value.strip()))
    return _dedupe(str(part).strip() for part in value if part is not None)
