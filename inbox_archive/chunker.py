"""Split text into pieces that fit the page store's per-span limit."""

from __future__ import annotations

DEFAULT_MAX_LENGTH = 2000


def chunk_text(text: str, max_length: int = DEFAULT_MAX_LENGTH, *, preserve_whitespace: bool = False) -> list[str]:
    """Split *text* into chunks of at most *max_length* characters.

    Break points, in order of preference: the last newline inside the
    window, the last space, a hard cut at *max_length*.  A newline or
    space in the first half of the window is passed over so chunks do
    not come out tiny.

    The next chunk normally starts after any leading whitespace.  With
    ``preserve_whitespace`` only the separator the chunk was broken at
    is dropped, which keeps indentation in code intact.
    """
    if max_length < 1:
        raise ValueError("max_length must be positive")

    chunks: list[str] = []
    remaining = text

    while remaining:
        if len(remaining) <= max_length:
            chunks.append(remaining)
            break

        cut, at_separator = _break_point(remaining, max_length)
        chunks.append(remaining[:cut])
        remaining = remaining[cut:]

        if not preserve_whitespace:
            remaining = remaining.lstrip()
        elif at_separator:
            remaining = remaining[1:]

    return chunks


def _break_point(text: str, max_length: int) -> tuple[int, bool]:
    half = max_length / 2
    for separator in ("\n", " "):
        index = text.rfind(separator, 0, max_length + 1)
        if index != -1 and index >= half:
            return index, True
    return max_length, False
