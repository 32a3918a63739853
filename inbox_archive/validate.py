"""Gatekeeping for inbound emails: secret recipient and allowed senders."""

from __future__ import annotations

from collections.abc import Collection

from .forwarded import extract_email_address


def validate_recipient(to_address: str | None, inbox_secret: str | None, prefix: str = "notion") -> bool:
    """True when the recipient's local part is ``<prefix>-<secret>``.

    Display names (``"Archive" <notion-abc@example.com>``) are accepted;
    comparison is case-insensitive.
    """
    if not to_address or not inbox_secret:
        return False

    address = extract_email_address(to_address)
    if not address:
        return False

    local_part = address.split("@", 1)[0]
    return local_part == f"{prefix}-{inbox_secret}".lower()


def validate_sender(from_address: str | None, allowed_senders: Collection[str]) -> bool:
    """True when the sender's address is one of *allowed_senders*."""
    if not from_address or not allowed_senders:
        return False

    address = extract_email_address(from_address)
    if not address:
        return False

    return address in {sender.strip().lower() for sender in allowed_senders}
