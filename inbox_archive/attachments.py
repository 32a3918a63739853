"""Attachment filtering and the attachment section appended to a page."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .chunker import DEFAULT_MAX_LENGTH, chunk_text
from .models import (
    Annotation,
    Block,
    BulletItem,
    Callout,
    Divider,
    InboundAttachment,
    Paragraph,
    RichTextSpan,
)

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp", "bmp"})
BLOCKED_EXTENSIONS = ("exe", "dll", "bat", "sh", "cmd", "com", "msi", "vbs", "js", "ps1")
MAX_ATTACHMENT_BYTES = 20 * 1024 * 1024


@dataclass
class FilteredAttachments:
    valid: list[InboundAttachment] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def filter_attachments(
    attachments: Iterable[InboundAttachment],
    *,
    max_bytes: int = MAX_ATTACHMENT_BYTES,
    blocked_extensions: Iterable[str] = BLOCKED_EXTENSIONS,
) -> FilteredAttachments:
    """Keep attachments the page store can take.

    CID-embedded images (template imagery referenced from the HTML) are
    dropped without a warning; blocked file types and oversized files
    are dropped with one.
    """
    blocked = {ext.lower().lstrip(".") for ext in blocked_extensions}
    result = FilteredAttachments()

    for attachment in attachments:
        if attachment.content_id:
            continue

        filename = attachment.name or "unknown"
        if file_extension(filename) in blocked:
            result.warnings.append(f"Attachment skipped: {filename} (blocked file type)")
            continue

        if attachment.content_length > max_bytes:
            size_mb = attachment.content_length / (1024 * 1024)
            limit_mb = max_bytes // (1024 * 1024)
            result.warnings.append(f"Attachment skipped: {filename} ({size_mb:.1f}MB exceeds {limit_mb}MB limit)")
            continue

        result.valid.append(attachment)

    return result


def file_extension(filename: str) -> str:
    """Lowercased extension without the dot, or ``""``."""
    _, dot, ext = filename.rpartition(".")
    return ext.lower() if dot else ""


def is_image_file(filename: str) -> bool:
    return file_extension(filename) in IMAGE_EXTENSIONS


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


# ------------------------------------------------------------------
# Page blocks
# ------------------------------------------------------------------


def attachment_blocks(attachments: list[InboundAttachment], max_length: int = DEFAULT_MAX_LENGTH) -> list[Block]:
    """List kept attachments at the end of the page.

    The store receives names and sizes only; binaries stay in the
    original email.
    """
    if not attachments:
        return []

    blocks: list[Block] = [
        Divider(),
        Paragraph(rich_text=(RichTextSpan("Attachments:", frozenset({Annotation.BOLD})),)),
    ]
    for attachment in attachments:
        icon = "🖼️" if is_image_file(attachment.name) else "📎"
        label = f"{icon} {attachment.name} ({format_file_size(attachment.content_length)})"
        blocks.extend(BulletItem(rich_text=(RichTextSpan(chunk),)) for chunk in chunk_text(label, max_length))

    blocks.append(
        Callout(
            rich_text=(RichTextSpan("Attachments are listed, not uploaded. Retrieve originals from your email client."),),
            icon="ℹ️",
            color="gray_background",
        )
    )
    return blocks


def warning_callouts(warnings: list[str], max_length: int = DEFAULT_MAX_LENGTH) -> list[Callout]:
    """One yellow callout per chunk of the joined warning text."""
    return [
        Callout(rich_text=(RichTextSpan(chunk),), icon="⚠️", color="yellow_background")
        for chunk in chunk_text("\n".join(warnings), max_length)
    ]
