"""Recover the original sender and date from a forwarded thread.

When the archiving user forwards a thread they replied to last, the
top-most ``From:`` is their own address.  The extractor walks the
forwarding header blocks in document order and returns the first one
whose sender is *not* a self address, together with that same block's
date.
"""

from __future__ import annotations

import email.utils
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

from .models import ForwardInfo

logger = structlog.get_logger()

# ------------------------------------------------------------------
# Line recognizers
# ------------------------------------------------------------------

# Evaluated top to bottom; the first match names the marker.
MARKER_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("gmail", re.compile(r"^[ \t]*-{5,}\s*Forwarded message\s*-{5,}[ \t]*$", re.IGNORECASE)),
    ("original_message", re.compile(r"^[ \t]*-{3,}\s*Original Message\s*-{3,}[ \t]*$", re.IGNORECASE)),
    ("outlook", re.compile(r"^[ \t]*_{5,}[ \t]*$")),
    ("apple_mail", re.compile(r"^[ \t]*Begin forwarded message:[ \t]*$", re.IGNORECASE)),
    ("reply", re.compile(r"^[ \t]*On\s.+\swrote:[ \t]*$", re.IGNORECASE)),
)

# Tolerates quote prefixes (``> From:``) and bold markup (``**From:**``).
HEADER_LINE_RE = re.compile(
    r"^[ \t>]*\**(?P<name>From|Date|Sent|Subject|To|Cc)\**:\**[ \t]*(?P<value>.*?)[ \t]*$",
    re.IGNORECASE,
)

_BRACKET_ADDRESS_RE = re.compile(r"<([^>]+)>")
_BARE_ADDRESS_RE = re.compile(r"([^\s<>\[\]():;,\"]+@[^\s<>\[\]():;,\"]+)")


def marker_kind(line: str) -> str | None:
    """Return the name of the forwarding marker on *line*, if any."""
    for kind, pattern in MARKER_PATTERNS:
        if pattern.match(line):
            return kind
    return None


def match_header_line(line: str) -> tuple[str, str] | None:
    """Return ``(name, value)`` for a ``Name: value`` header line."""
    match = HEADER_LINE_RE.match(line)
    if not match:
        return None
    return match.group("name").lower(), match.group("value")


# ------------------------------------------------------------------
# Header blocks
# ------------------------------------------------------------------


@dataclass
class HeaderBlock:
    """One forwarding marker plus the header lines that follow it."""

    kind: str
    line_number: int
    sender: str | None = None
    date: str | None = None
    headers: dict[str, str] = field(default_factory=dict)


def find_header_blocks(text: str) -> list[HeaderBlock]:
    """Scan *text* for forwarding header blocks, in document order.

    A block starts at a marker line.  Blank lines directly after the
    marker are skipped when header lines follow them (Apple Mail puts
    one there); the block then runs until the next blank line or marker.
    """
    lines = text.splitlines()
    blocks: list[HeaderBlock] = []
    i = 0

    while i < len(lines):
        kind = marker_kind(lines[i])
        if kind is None:
            i += 1
            continue

        block = HeaderBlock(kind=kind, line_number=i)
        j = i + 1
        k = j
        while k < len(lines) and not lines[k].strip():
            k += 1
        if k < len(lines) and match_header_line(lines[k]):
            j = k

        while j < len(lines) and lines[j].strip() and marker_kind(lines[j]) is None:
            header = match_header_line(lines[j])
            if header:
                name, value = header
                block.headers.setdefault(name, value)
                if name == "from" and block.sender is None and value.strip():
                    block.sender = value
                elif name in ("date", "sent") and block.date is None:
                    block.date = value
            j += 1

        blocks.append(block)
        i = max(j, i + 1)

    return blocks


# ------------------------------------------------------------------
# Extraction
# ------------------------------------------------------------------


def extract_forward_info(text: str | None, self_addresses: Iterable[str] = ()) -> ForwardInfo:
    """Find the externally authored message's sender and date.

    Parameters
    ----------
    text:
        Plain-text email body.
    self_addresses:
        Addresses of the archiving user; header blocks sent from one of
        these are skipped.  Compared case-insensitively.
    """
    if not text:
        return ForwardInfo()

    selves = {address.strip().lower() for address in self_addresses if address}

    for block in find_header_blocks(text):
        if block.sender is None or is_self_address(block.sender, selves):
            continue
        logger.debug("forward_block_matched", kind=block.kind, line=block.line_number)
        return ForwardInfo(
            original_sender=block.sender,
            original_date=parse_date_string(block.date),
        )

    return _scan_loose_headers(text.splitlines(), selves)


def _scan_loose_headers(lines: list[str], selves: set[str]) -> ForwardInfo:
    """Fallback: first non-self ``From:`` line, then the nearest date after it."""
    for index, line in enumerate(lines):
        header = match_header_line(line)
        if not header or header[0] != "from" or not header[1].strip():
            continue
        sender = header[1]
        if is_self_address(sender, selves):
            continue

        for following in lines[index + 1:]:
            date_header = match_header_line(following)
            if date_header and date_header[0] in ("date", "sent"):
                return ForwardInfo(original_sender=sender, original_date=parse_date_string(date_header[1]))
        return ForwardInfo(original_sender=sender)

    return ForwardInfo()


def is_self_address(header_value: str, selves: set[str]) -> bool:
    address = extract_email_address(header_value)
    return address is not None and address in selves


def extract_email_address(value: str | None) -> str | None:
    """Extract a lowercased address from ``Name <addr>`` or bare ``addr``."""
    if not value:
        return None

    match = _BRACKET_ADDRESS_RE.search(value)
    if match:
        return match.group(1).strip().lower()

    match = _BARE_ADDRESS_RE.search(value)
    if match:
        return match.group(1).lower()

    return None


# ------------------------------------------------------------------
# Dates
# ------------------------------------------------------------------

_AT_RE = re.compile(r"\s+at\s+", re.IGNORECASE)
_WEEKDAY_RE = re.compile(r"^(?:mon|tue|wed|thu|fri|sat|sun)[a-z]*\.?,?\s*", re.IGNORECASE)
_TRAILING_ZONE_RE = re.compile(r"\s+\(?(?!AM\b|PM\b)[A-Z]{2,5}\)?$")

_DATE_PARTS = (
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d.%m.%Y",
)
_TIME_PARTS = (
    "%I:%M %p",
    "%I:%M:%S %p",
    "%H:%M",
    "%H:%M:%S",
    "%H:%M %z",
    "%H:%M:%S %z",
    "%I:%M %p %z",
)
DATE_FORMATS: tuple[str, ...] = (
    *(f"{d}{sep}{t}" for d in _DATE_PARTS for sep in (" ", ", ") for t in _TIME_PARTS),
    *_DATE_PARTS,
)


def parse_date_string(value: str | None) -> datetime | None:
    """Best-effort parse of a mail-client date header into UTC.

    Handles Gmail's ``Mon, Dec 9, 2024 at 10:30 AM``, Outlook's
    ``Monday, December 9, 2024 10:30 AM``, RFC 2822 and ISO 8601.
    Returns ``None`` instead of raising when nothing matches.
    """
    if not value:
        return None

    normalized = " ".join(_AT_RE.sub(" ", value).split())
    if not normalized:
        return None

    for candidate in _date_candidates(normalized):
        parsed = _try_formats(candidate)
        if parsed is not None:
            return _as_utc(parsed)

    try:
        parsed = email.utils.parsedate_to_datetime(normalized)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None
    return _as_utc(parsed)


def _date_candidates(normalized: str) -> list[str]:
    candidates = [normalized]
    without_weekday = _WEEKDAY_RE.sub("", normalized, count=1)
    if without_weekday and without_weekday != normalized:
        candidates.append(without_weekday)
    for candidate in list(candidates):
        without_zone = _TRAILING_ZONE_RE.sub("", candidate)
        if without_zone != candidate:
            candidates.append(without_zone)
    return candidates


def _try_formats(candidate: str) -> datetime | None:
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt)
        except ValueError:
            continue
    return None


def _as_utc(dt: datetime) -> datetime | None:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        # Offsets that push the instant past year 1 or 9999.
        return None
