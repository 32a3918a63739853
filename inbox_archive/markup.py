"""HTML / plain-text body to lightweight markdown markup."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Comment
from markdownify import markdownify as md

# Dropped with their content before conversion; images never survive.
DROPPED_TAGS = ["img", "picture", "svg", "script", "style", "head", "title"]

_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_FENCE_RE = re.compile(r"^\s*```")
_MARKDOWN_LINK_RE = re.compile(r"\[[^\]]*\]\([^)]*\)")
_ANGLE_URL_RE = re.compile(r"<(https?://[^\s<>]+)>")
_BARE_URL_RE = re.compile(r"(?<!\]\()(?<![\[<])(https?://[^\s\[\]()<>]+)")
_TRAILING_PUNCTUATION = ".,;:!?'\""


def html_to_markup(html: str | None) -> str:
    """Convert an HTML email body to markdown.

    Preserves headings, lists, emphasis, links, quotes and code.
    Strips images, tables, scripts, styles and HTML comments.
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    for comment in soup.find_all(string=lambda node: isinstance(node, Comment)):
        comment.extract()
    for tag in soup.find_all(DROPPED_TAGS):
        # Nested matches (an img inside a picture) are already gone.
        if not tag.decomposed:
            tag.decompose()

    markup = md(
        str(soup),
        heading_style="atx",
        bullets="-",
        autolinks=False,
        escape_misc=False,
        strip=["table"],
    )

    markup = _EXCESS_NEWLINES_RE.sub("\n\n", markup)
    return markup.strip()


def linkify_urls(text: str | None) -> str:
    """Turn bare ``http(s)://`` URLs into ``[url](url)`` links.

    Existing markdown links and fenced code are left alone.
    """
    if not text:
        return ""

    out: list[str] = []
    in_fence = False
    for line in text.split("\n"):
        if _FENCE_RE.match(line):
            in_fence = not in_fence
            out.append(line)
        elif in_fence:
            out.append(line)
        else:
            out.append(_linkify_line(line))
    return "\n".join(out)


def _linkify_line(line: str) -> str:
    pieces: list[str] = []
    last = 0
    for match in _MARKDOWN_LINK_RE.finditer(line):
        pieces.append(_linkify_plain(line[last:match.start()]))
        pieces.append(match.group(0))
        last = match.end()
    pieces.append(_linkify_plain(line[last:]))
    return "".join(pieces)


def _linkify_plain(text: str) -> str:
    text = _ANGLE_URL_RE.sub(r"\1", text)
    return _BARE_URL_RE.sub(_link_replacement, text)


def _link_replacement(match: re.Match[str]) -> str:
    url = match.group(1)
    trimmed = url.rstrip(_TRAILING_PUNCTUATION)
    trailing = url[len(trimmed):]
    if not trimmed.split("://", 1)[1]:
        return url
    return f"[{trimmed}]({trimmed}){trailing}"


def normalize_body(html: str | None, plain_text: str | None) -> str:
    """Produce markup from the HTML body, or the plain body when there is none.

    Either way bare URLs are linkified afterwards.
    """
    if html:
        markup = html_to_markup(html)
    else:
        markup = plain_text or ""
    return linkify_urls(markup)
