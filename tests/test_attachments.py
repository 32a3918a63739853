"""Tests for inbox_archive.attachments."""

from __future__ import annotations

import pytest

from inbox_archive.attachments import (
    MAX_ATTACHMENT_BYTES,
    attachment_blocks,
    file_extension,
    filter_attachments,
    format_file_size,
    is_image_file,
    warning_callouts,
)
from inbox_archive.models import Annotation, BulletItem, Callout, Divider, InboundAttachment, Paragraph


def make_attachment(name: str, size: int = 1024, content_id: str | None = None) -> InboundAttachment:
    return InboundAttachment(name=name, content_length=size, content_id=content_id)


class TestFilterAttachments:
    def test_valid_kept(self):
        result = filter_attachments([make_attachment("report.pdf")])
        assert [a.name for a in result.valid] == ["report.pdf"]
        assert result.warnings == []

    def test_inline_cid_image_dropped_silently(self):
        result = filter_attachments([make_attachment("logo.png", content_id="ii_123")])
        assert result.valid == []
        assert result.warnings == []

    def test_blocked_type(self):
        result = filter_attachments([make_attachment("setup.EXE")])
        assert result.valid == []
        assert result.warnings == ["Attachment skipped: setup.EXE (blocked file type)"]

    def test_oversized(self):
        size = 25 * 1024 * 1024
        result = filter_attachments([make_attachment("video.mp4", size)])
        assert result.valid == []
        assert result.warnings == ["Attachment skipped: video.mp4 (25.0MB exceeds 20MB limit)"]

    def test_exactly_at_limit_kept(self):
        result = filter_attachments([make_attachment("big.zip", MAX_ATTACHMENT_BYTES)])
        assert len(result.valid) == 1

    def test_custom_rules(self):
        result = filter_attachments(
            [make_attachment("a.txt", 2048), make_attachment("b.pdf")],
            max_bytes=1024,
            blocked_extensions=[".PDF"],
        )
        assert result.valid == []
        assert len(result.warnings) == 2

    def test_mixed(self):
        result = filter_attachments(
            [
                make_attachment("notes.txt"),
                make_attachment("run.sh"),
                make_attachment("sig.gif", content_id="cid1"),
                make_attachment("photo.jpg"),
            ]
        )
        assert [a.name for a in result.valid] == ["notes.txt", "photo.jpg"]
        assert len(result.warnings) == 1


class TestHelpers:
    @pytest.mark.parametrize(
        "filename, ext",
        [("a.PDF", "pdf"), ("archive.tar.gz", "gz"), ("README", ""), ("trailing.", "")],
    )
    def test_file_extension(self, filename, ext):
        assert file_extension(filename) == ext

    def test_is_image_file(self):
        assert is_image_file("photo.JPEG")
        assert not is_image_file("doc.pdf")

    @pytest.mark.parametrize(
        "size, label",
        [(512, "512 B"), (2048, "2.0 KB"), (5 * 1024 * 1024, "5.0 MB")],
    )
    def test_format_file_size(self, size, label):
        assert format_file_size(size) == label


class TestAttachmentBlocks:
    def test_none(self):
        assert attachment_blocks([]) == []

    def test_section_layout(self):
        blocks = attachment_blocks([make_attachment("photo.png", 2048), make_attachment("doc.pdf", 100)])
        assert isinstance(blocks[0], Divider)
        assert isinstance(blocks[1], Paragraph)
        assert blocks[1].rich_text[0].annotations == frozenset({Annotation.BOLD})
        assert blocks[1].plain_text == "Attachments:"
        assert [b.plain_text for b in blocks[2:4]] == ["🖼️ photo.png (2.0 KB)", "📎 doc.pdf (100 B)"]
        assert all(isinstance(b, BulletItem) for b in blocks[2:4])
        assert isinstance(blocks[4], Callout)
        assert blocks[4].color == "gray_background"
        assert len(blocks) == 5


class TestWarningCallouts:
    def test_none_without_warnings(self):
        assert warning_callouts([]) == []

    def test_joins_warnings(self):
        [callout] = warning_callouts(["one", "two"])
        assert callout.plain_text == "one\ntwo"
        assert callout.icon == "⚠️"
        assert callout.color == "yellow_background"

    def test_many_warnings_fit_span_limit(self):
        result = filter_attachments([make_attachment(f"payload_{i:03d}.exe") for i in range(50)])
        callouts = warning_callouts(result.warnings, 2000)
        assert len(callouts) > 1
        assert all(len(span.content) <= 2000 for c in callouts for span in c.rich_text)
        assert "\n".join(c.plain_text for c in callouts) == "\n".join(result.warnings)


class TestLongAttachmentName:
    def test_label_split_to_limit(self):
        blocks = attachment_blocks([make_attachment("a" * 100 + ".pdf")], max_length=40)
        bullets = [b for b in blocks if isinstance(b, BulletItem)]
        assert len(bullets) > 1
        assert all(len(b.plain_text) <= 40 for b in bullets)
