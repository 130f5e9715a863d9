from __future__ import annotations

from .models import EmailMessage


def get_participants(message: EmailMessage) -> list[str]:
    """Sender, To and Cc addresses without duplicates. Bcc is never included."""
    participants: list[str] = []
    seen: set[str] = set()
    for address in (message.sender, *message.to, *message.cc):
        if address and address not in seen:
            seen.add(address)
            participants.append(address)
    return participants


def merge_participants(*groups) -> tuple[str, ...]:  # noqa: ANN002
    merged: list[str] = []
    seen: set[str] = set()
    for group in groups:
        for address in group:
            if address and address not in seen:
                seen.add(address)
                merged.append(address)
    return tuple(merged)
