"""Tests for inbox_archive.chunker."""

from __future__ import annotations

import pytest

from inbox_archive.chunker import DEFAULT_MAX_LENGTH, chunk_text


class TestChunkText:
    def test_short_text_single_chunk(self):
        assert chunk_text("hello") == ["hello"]

    def test_empty(self):
        assert chunk_text("") == []

    def test_default_limit(self):
        text = "x" * (DEFAULT_MAX_LENGTH + 1)
        chunks = chunk_text(text)
        assert [len(c) for c in chunks] == [DEFAULT_MAX_LENGTH, 1]

    def test_prefers_newline(self):
        text = "a" * 10 + "\n" + "b" * 10
        assert chunk_text(text, 15) == ["a" * 10, "b" * 10]

    def test_falls_back_to_space(self):
        assert chunk_text("hello world foo", 12) == ["hello world", "foo"]

    def test_separator_in_first_half_ignored(self):
        assert chunk_text("ab cdefghijkl", 10) == ["ab cdefghi", "jkl"]

    def test_word_boundaries_preserved(self):
        text = " ".join(f"word{i}" for i in range(500))
        chunks = chunk_text(text, 100)
        assert len(chunks) > 1
        assert all(len(c) <= 100 for c in chunks)
        assert " ".join(chunks) == text

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            chunk_text("text", 0)


class TestPreserveWhitespace:
    def test_indentation_kept(self):
        text = "    alpha\n    beta"
        assert chunk_text(text, 12, preserve_whitespace=True) == ["    alpha", "    beta"]

    def test_indentation_dropped_by_default(self):
        assert chunk_text("    alpha\n    beta", 12) == ["    alpha", "beta"]

    def test_hard_cut_loses_nothing(self):
        chunks = chunk_text("abcdefghij", 4, preserve_whitespace=True)
        assert chunks == ["abcd", "efgh", "ij"]
        assert "".join(chunks) == "abcdefghij"
