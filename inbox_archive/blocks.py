"""Markup to typed content blocks.

A single left-to-right scan over lines.  Each line is offered to an
ordered list of recognizers; the first whose pattern matches produces
zero or more blocks.  A text line is parsed into spans first; spans
longer than the store's limit are split with their formatting and
link carried onto every piece, and one long line becomes several
consecutive blocks of the same type whose text fits the limit.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import replace

from .chunker import DEFAULT_MAX_LENGTH, chunk_text
from .inline import parse_rich_text
from .models import (
    Block,
    BulletItem,
    Code,
    Divider,
    Heading,
    NumberedItem,
    Paragraph,
    Quote,
    RichTextSpan,
    TextBlock,
)

BLANK_RE = re.compile(r"^\s*$")
HEADING_RE = re.compile(r"^(#{1,3})\s+(.+)$")
EMPTY_QUOTE_RE = re.compile(r"^[\s>]+$")
DIVIDER_RE = re.compile(r"^\s*(?:-{3,}|_{3,}|\*{3,})\s*$")
BULLET_RE = re.compile(r"^\s*[-*+]\s+(.*)$")
NUMBERED_RE = re.compile(r"^\s*\d+\.\s+(.*)$")
QUOTE_RE = re.compile(r"^\s*(?:>\s?)+(.*)$")
FENCE_RE = re.compile(r"^\s*```")
ANY_RE = re.compile(r"^(.*)$")

# (blocks produced, index of the next unread line)
RuleResult = tuple[list[Block], int]
Handler = Callable[[re.Match[str], list[str], int], RuleResult]


class BlockConverter:
    """Convert lightweight markdown into an ordered list of blocks."""

    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH) -> None:
        self._max_length = max_length
        self._rules: tuple[tuple[str, re.Pattern[str], Handler], ...] = (
            ("blank", BLANK_RE, self._skip),
            ("heading", HEADING_RE, self._heading),
            ("empty_quote", EMPTY_QUOTE_RE, self._skip),
            ("divider", DIVIDER_RE, self._divider),
            ("bullet", BULLET_RE, self._bullet),
            ("numbered", NUMBERED_RE, self._numbered),
            ("quote", QUOTE_RE, self._quote),
            ("code", FENCE_RE, self._code),
            ("paragraph", ANY_RE, self._paragraph),
        )

    @property
    def max_length(self) -> int:
        return self._max_length

    def classify(self, line: str) -> str:
        """Name of the rule that would handle *line*."""
        for name, pattern, _ in self._rules:
            if pattern.match(line):
                return name
        return "paragraph"

    def convert(self, markup: str | None) -> list[Block]:
        if not markup:
            return []

        lines = markup.split("\n")
        blocks: list[Block] = []
        index = 0

        while index < len(lines):
            for _, pattern, handler in self._rules:
                match = pattern.match(lines[index])
                if match:
                    produced, index = handler(match, lines, index)
                    blocks.extend(produced)
                    break

        return blocks

    # ------------------------------------------------------------------
    # Rule handlers
    # ------------------------------------------------------------------

    def _skip(self, match: re.Match[str], lines: list[str], index: int) -> RuleResult:
        return [], index + 1

    def _heading(self, match: re.Match[str], lines: list[str], index: int) -> RuleResult:
        level = len(match.group(1))
        return self._text_blocks(Heading, match.group(2), level=level), index + 1

    def _divider(self, match: re.Match[str], lines: list[str], index: int) -> RuleResult:
        return [Divider()], index + 1

    def _bullet(self, match: re.Match[str], lines: list[str], index: int) -> RuleResult:
        return self._text_blocks(BulletItem, match.group(1)), index + 1

    def _numbered(self, match: re.Match[str], lines: list[str], index: int) -> RuleResult:
        return self._text_blocks(NumberedItem, match.group(1)), index + 1

    def _quote(self, match: re.Match[str], lines: list[str], index: int) -> RuleResult:
        return self._text_blocks(Quote, match.group(1)), index + 1

    def _code(self, match: re.Match[str], lines: list[str], index: int) -> RuleResult:
        body: list[str] = []
        cursor = index + 1
        while cursor < len(lines) and not FENCE_RE.match(lines[cursor]):
            body.append(lines[cursor])
            cursor += 1

        chunks = chunk_text("\n".join(body), self._max_length, preserve_whitespace=True)
        # Skip the closing fence; an unterminated fence runs to the end.
        return [Code(text=chunk) for chunk in chunks], cursor + 1

    def _paragraph(self, match: re.Match[str], lines: list[str], index: int) -> RuleResult:
        return self._text_blocks(Paragraph, match.group(1)), index + 1

    def _text_blocks(self, factory: type[TextBlock], text: str, **fields: int) -> list[Block]:
        blocks: list[Block] = []
        current: list[RichTextSpan] = []
        size = 0

        for span in parse_rich_text(text.strip()):
            pieces = chunk_text(span.content, self._max_length)
            for number, piece in enumerate(pieces):
                # A split span always continues in a new block.
                if current and (number > 0 or size + len(piece) > self._max_length):
                    blocks.append(factory(rich_text=tuple(current), **fields))
                    current, size = [], 0
                current.append(replace(span, content=piece))
                size += len(piece)

        if current:
            blocks.append(factory(rich_text=tuple(current), **fields))
        return blocks


def markup_to_blocks(markup: str | None, max_length: int = DEFAULT_MAX_LENGTH) -> list[Block]:
    return BlockConverter(max_length).convert(markup)
