"""Subject-line parsing: client tag extraction and prefix normalization."""

from __future__ import annotations

import re

from .models import MISSING_TAG, ParsedSubject

MAX_TAG_LENGTH = 50

_TAG_RE = re.compile(r"^#(\w+):?\s*")
_PREFIX_RE = re.compile(r"^(?:fwd|fw|re|reply):\s*", re.IGNORECASE)
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def parse_subject(subject: str | None) -> ParsedSubject:
    """Split ``#tag: Fwd: Re: Subject`` into a tag and a clean subject.

    Never raises: a missing or unusable tag yields the ``"missing"``
    sentinel and the subject passes through with prefixes stripped.
    """
    subject = subject or ""

    match = _TAG_RE.match(subject)
    if match:
        tag = sanitize_tag(match.group(1))
        remainder = subject[match.end():]
    else:
        tag = MISSING_TAG
        remainder = subject

    return ParsedSubject(tag=tag, clean_subject=strip_reply_prefixes(remainder).strip())


def sanitize_tag(raw: str) -> str:
    """Lowercase, keep ``[a-z0-9]`` only, truncate; empty becomes the sentinel."""
    tag = _NON_ALNUM_RE.sub("", raw.lower())[:MAX_TAG_LENGTH]
    return tag or MISSING_TAG


def strip_reply_prefixes(text: str) -> str:
    """Remove any chain of ``Fwd:``/``Fw:``/``Re:``/``Reply:`` prefixes."""
    while True:
        stripped = _PREFIX_RE.sub("", text, count=1)
        if stripped == text:
            return text
        text = stripped
