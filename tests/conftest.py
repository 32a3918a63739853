"""Shared test fixtures for the inbox-archive test suite."""

from __future__ import annotations

import pytest

from inbox_archive.config import ArchiveConfig
from inbox_archive.pipeline import EmailArchiver

SELF_ADDRESS = "me@example.com"
INBOX_ADDRESS = "notion-abc123@inbox.example.com"


@pytest.fixture
def archive_config() -> ArchiveConfig:
    return ArchiveConfig(
        allowed_senders=[SELF_ADDRESS, "Assistant@Example.com"],
        inbox_secret="abc123",
        max_span_length=2000,
    )


@pytest.fixture
def archiver(archive_config: ArchiveConfig) -> EmailArchiver:
    return EmailArchiver(archive_config)


# ------------------------------------------------------------------
# Sample threads
# ------------------------------------------------------------------

GMAIL_FORWARD = """\
---------- Forwarded message ---------
From: Client Person <client@company.com>
Date: Mon, Dec 9, 2024 at 10:00 AM
Subject: Project Update
To: me@example.com

Hello, this is the email body.
"""

SELF_REPLY_THREAD = """\
---------- Forwarded message ---------
From: Me <me@example.com>
Date: Tue, Dec 10, 2024 at 9:00 AM
Subject: Re: Project Update
To: client@company.com

Thanks for the update!

---------- Forwarded message ---------
From: Client Person <client@company.com>
Date: Mon, Dec 9, 2024 at 10:00 AM
Subject: Project Update
To: me@example.com

Here is the original message.
"""


# ------------------------------------------------------------------
# Sample inbound webhook payload
# ------------------------------------------------------------------


def make_inbound_email(
    *,
    from_address: str = "Me <me@example.com>",
    to_address: str = INBOX_ADDRESS,
    subject: str | None = "#acme: Fwd: Project Update",
    date: str | None = "Wed, 11 Dec 2024 08:00:00 +0000",
    text_body: str | None = GMAIL_FORWARD,
    html_body: str | None = None,
    attachments: list[dict] | None = None,
) -> dict:
    """Build a webhook payload dict using the transport's field names."""
    return {
        "From": from_address,
        "To": to_address,
        "Subject": subject,
        "Date": date,
        "TextBody": text_body,
        "HtmlBody": html_body,
        "Attachments": attachments or [],
    }
