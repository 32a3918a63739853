"""Inline markdown to rich-text spans.

A deliberately shallow recognizer: links are split out first, then each
run gets at most one formatting category.  Nested or overlapping styles
inside one run are not composed; the first category found (bold,
italic, strikethrough, code) wins and applies to the whole run.
"""

from __future__ import annotations

import re

from .models import Annotation, RichTextSpan

_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

FORMAT_RULES: tuple[tuple[Annotation, tuple[re.Pattern[str], ...]], ...] = (
    (Annotation.BOLD, (re.compile(r"\*\*(.+?)\*\*"), re.compile(r"__(.+?)__"))),
    (Annotation.ITALIC, (re.compile(r"\*(.+?)\*"), re.compile(r"(?<!\w)_(.+?)_(?!\w)"))),
    (Annotation.STRIKETHROUGH, (re.compile(r"~~(.+?)~~"),)),
    (Annotation.CODE, (re.compile(r"`(.+?)`"),)),
)

# Backslash-escaped punctuation is swapped for private-use code points
# while markers are matched, then restored as the literal character.
_ESCAPABLE = "\\`*_{}[]()#+-.!~>|"
_PLACEHOLDER_BASE = 0xE000
_ESCAPE_RE = re.compile(r"\\([" + re.escape(_ESCAPABLE) + r"])")
_RESTORE = {chr(_PLACEHOLDER_BASE + i): char for i, char in enumerate(_ESCAPABLE)}
_RESTORE_RE = re.compile("[" + "".join(_RESTORE) + "]")


def parse_rich_text(text: str | None) -> list[RichTextSpan]:
    """Split a line of markup into spans: links first, then formatted runs."""
    if not text:
        return []

    protected = _ESCAPE_RE.sub(lambda m: chr(_PLACEHOLDER_BASE + _ESCAPABLE.index(m.group(1))), text)

    spans: list[RichTextSpan] = []
    last = 0
    for match in _LINK_RE.finditer(protected):
        spans.extend(format_run(protected[last:match.start()]))
        spans.extend(format_run(match.group(1), link=_link_target(match.group(2))))
        last = match.end()
    spans.extend(format_run(protected[last:]))

    return spans


def format_run(text: str, link: str | None = None) -> list[RichTextSpan]:
    """Detect one formatting category in *text* and strip its markers."""
    if not text:
        return []

    content = text
    annotations: frozenset[Annotation] = frozenset()
    for annotation, patterns in FORMAT_RULES:
        if any(pattern.search(content) for pattern in patterns):
            for pattern in patterns:
                content = pattern.sub(r"\1", content)
            annotations = frozenset({annotation})
            break

    content = _restore(content)
    if not content:
        return []
    return [RichTextSpan(content=content, annotations=annotations, link=link)]


def _link_target(raw: str) -> str | None:
    # ``[text](url "title")`` keeps only the URL.
    parts = _restore(raw).split()
    return parts[0] if parts else None


def _restore(text: str) -> str:
    return _RESTORE_RE.sub(lambda m: _RESTORE[m.group(0)], text)
