"""Remove forwarding-header noise from email bodies."""

from __future__ import annotations

import re

from .forwarded import marker_kind, match_header_line

_HEADER_LINES = r"(?:[ \t]*(?:From|Date|Sent|Subject|To|Cc):.*(?:\n|$))*"
_BLANK_LINES = r"(?:[ \t]*\n)*"

# Each pattern removes a marker line plus the header block after it.
HEADER_BLOCK_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(marker + r"[ \t]*(?:\n|$)" + _BLANK_LINES + _HEADER_LINES, re.IGNORECASE | re.MULTILINE)
    for marker in (
        r"^[ \t]*-{5,}[ \t]*Forwarded message[ \t]*-{5,}",
        r"^[ \t]*_{5,}",
        r"^[ \t]*Begin forwarded message:",
        r"^[ \t]*-{3,}[ \t]*Original Message[ \t]*-{3,}",
    )
)

REPLY_MARKER_RE = re.compile(r"^[ \t]*On[ \t].+[ \t]wrote:[ \t]*$", re.IGNORECASE | re.MULTILINE)

# Checked in this order; the first kind present wins, wherever it occurs.
PREAMBLE_MARKER_KINDS = ("gmail", "apple_mail", "original_message", "outlook")


def strip_forwarding_headers(text: str | None) -> str:
    """Strip Gmail, Outlook, Apple Mail and "Original Message" header blocks.

    Also drops every ``On ... wrote:`` line.  Applying it twice gives
    the same result as applying it once.
    """
    if not text:
        return ""

    result = text.replace("\r\n", "\n").replace("\r", "\n")
    for pattern in HEADER_BLOCK_PATTERNS:
        result = pattern.sub("", result)
    result = REPLY_MARKER_RE.sub("", result)

    return result.strip()


def strip_forwarder_preamble(markup: str) -> str:
    """Drop the forwarder's own text above the first forwarding marker.

    Everything up to and including the marker line goes, then the
    header lines (plain or ``**bold**``) directly below it.  Text
    without a marker is returned unchanged.
    """
    if not markup:
        return ""

    lines = markup.splitlines()
    cut = _find_preamble_marker(lines)
    if cut is None:
        return markup

    remainder = lines[cut + 1:]
    start = 0
    while start < len(remainder) and (not remainder[start].strip() or match_header_line(remainder[start])):
        start += 1

    return "\n".join(remainder[start:]).strip()


def _find_preamble_marker(lines: list[str]) -> int | None:
    kinds = [marker_kind(line) for line in lines]
    for wanted in PREAMBLE_MARKER_KINDS:
        if wanted in kinds:
            return kinds.index(wanted)
    return None
