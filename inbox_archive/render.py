"""Map blocks and spans to the page store's JSON representation."""

from __future__ import annotations

import uuid
from typing import Any

from .models import (
    ArchivedEmail,
    Block,
    Callout,
    Code,
    Divider,
    RichTextSpan,
    TextBlock,
)


def render_span(span: RichTextSpan) -> dict[str, Any]:
    text: dict[str, Any] = {"content": span.content}
    if span.link:
        text["link"] = {"url": span.link}

    rendered: dict[str, Any] = {"type": "text", "text": text}
    if span.annotations:
        rendered["annotations"] = {annotation.value: True for annotation in sorted(span.annotations)}
    return rendered


def render_block(block: Block) -> dict[str, Any]:
    if isinstance(block, Divider):
        return {"type": "divider", "divider": {}}

    if isinstance(block, Code):
        body: dict[str, Any] = {
            "rich_text": [{"type": "text", "text": {"content": block.text}}],
            "language": block.language,
        }
    elif isinstance(block, TextBlock):
        body = {"rich_text": [render_span(span) for span in block.rich_text]}
        if isinstance(block, Callout):
            body["icon"] = {"type": "emoji", "emoji": block.icon}
            body["color"] = block.color
    else:
        raise TypeError(f"unsupported block: {type(block).__name__}")

    return {"type": block.type, block.type: body}


def render_blocks(blocks: list[Block]) -> list[dict[str, Any]]:
    return [render_block(block) for block in blocks]


def _rich_text_property(content: str) -> dict[str, Any]:
    return {"rich_text": [{"text": {"content": content}}]}


def page_properties(archived: ArchivedEmail, entry_id: str | None = None) -> dict[str, Any]:
    """Database-row properties for one archived email."""
    properties: dict[str, Any] = {
        "Name": {"title": [{"text": {"content": archived.title}}]},
        "UUID": _rich_text_property(entry_id or str(uuid.uuid4())),
        "From": _rich_text_property(archived.sender or "Unknown"),
        "Client": _rich_text_property(archived.subject.tag),
        "Has Attachments": {"checkbox": archived.has_attachments},
    }
    if archived.date is not None:
        properties["Date"] = {"date": {"start": archived.date.date().isoformat()}}
    return properties


def render_page(archived: ArchivedEmail, entry_id: str | None = None) -> dict[str, Any]:
    return {
        "properties": page_properties(archived, entry_id),
        "children": render_blocks(archived.blocks),
    }
