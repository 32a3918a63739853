"""Data models shared by the archive pipeline.

Transport payloads are validated with pydantic; everything the pipeline
produces is a plain frozen dataclass, created per email and discarded
once the page store has consumed it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, Field

MISSING_TAG = "missing"
PLAIN_TEXT_LANGUAGE = "plain text"


# ------------------------------------------------------------------
# Inbound transport payload
# ------------------------------------------------------------------


class InboundAttachment(BaseModel):
    """One attachment as delivered by the inbound-mail webhook."""

    model_config = {"populate_by_name": True}

    name: str = Field(default="unknown", alias="Name")
    content_type: str = Field(default="application/octet-stream", alias="ContentType")
    content_length: int = Field(default=0, alias="ContentLength")
    content_id: str | None = Field(default=None, alias="ContentID")
    content: str = Field(default="", alias="Content", repr=False)


class InboundEmail(BaseModel):
    """Validates the JSON payload of the inbound-mail webhook.

    Field aliases follow the transport's capitalised keys;
    ``populate_by_name=True`` allows construction via either key.
    """

    model_config = {"populate_by_name": True}

    from_address: str = Field(default="", alias="From")
    to_address: str = Field(default="", alias="To")
    subject: str | None = Field(default=None, alias="Subject")
    date: str | None = Field(default=None, alias="Date")
    text_body: str | None = Field(default=None, alias="TextBody")
    html_body: str | None = Field(default=None, alias="HtmlBody")
    attachments: list[InboundAttachment] = Field(default_factory=list, alias="Attachments")


# ------------------------------------------------------------------
# Parsed header values
# ------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedSubject:
    """Client tag and cleaned subject line."""

    tag: str
    clean_subject: str


@dataclass(frozen=True)
class ForwardInfo:
    """Sender and send date of the externally authored message in a thread.

    ``None`` in either field means the caller should fall back to the
    transport-level value.
    """

    original_sender: str | None = None
    original_date: datetime | None = None


# ------------------------------------------------------------------
# Rich text and blocks
# ------------------------------------------------------------------


class Annotation(str, Enum):
    """Inline formatting a span can carry."""

    BOLD = "bold"
    ITALIC = "italic"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"


@dataclass(frozen=True)
class RichTextSpan:
    """A run of text sharing one annotation set and an optional link."""

    content: str
    annotations: frozenset[Annotation] = frozenset()
    link: str | None = None


@dataclass(frozen=True)
class Block:
    """Base for every content block; ``type`` is the store's block type name."""

    type: ClassVar[str] = "block"


@dataclass(frozen=True)
class TextBlock(Block):
    rich_text: tuple[RichTextSpan, ...] = ()

    @property
    def plain_text(self) -> str:
        return "".join(span.content for span in self.rich_text)


@dataclass(frozen=True)
class Paragraph(TextBlock):
    type: ClassVar[str] = "paragraph"


@dataclass(frozen=True)
class Heading(TextBlock):
    level: int = 1

    def __post_init__(self) -> None:
        if not 1 <= self.level <= 3:
            raise ValueError(f"heading level must be 1..3, got {self.level}")

    @property
    def type(self) -> str:
        return f"heading_{self.level}"


@dataclass(frozen=True)
class BulletItem(TextBlock):
    type: ClassVar[str] = "bulleted_list_item"


@dataclass(frozen=True)
class NumberedItem(TextBlock):
    type: ClassVar[str] = "numbered_list_item"


@dataclass(frozen=True)
class Quote(TextBlock):
    type: ClassVar[str] = "quote"


@dataclass(frozen=True)
class Callout(TextBlock):
    type: ClassVar[str] = "callout"

    icon: str = ""
    color: str = "default"


@dataclass(frozen=True)
class Code(Block):
    """Raw, unformatted text; never goes through inline parsing."""

    type: ClassVar[str] = "code"

    text: str = ""
    language: str = PLAIN_TEXT_LANGUAGE


@dataclass(frozen=True)
class Divider(Block):
    type: ClassVar[str] = "divider"


# ------------------------------------------------------------------
# Pipeline output
# ------------------------------------------------------------------


@dataclass(frozen=True)
class ArchivedEmail:
    """Everything the page store needs to create one entry."""

    subject: ParsedSubject
    forward: ForwardInfo
    sender: str
    date: datetime | None
    blocks: list[Block] = field(default_factory=list)
    attachments: list[InboundAttachment] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.subject.clean_subject or "Untitled"

    @property
    def has_attachments(self) -> bool:
        return bool(self.attachments)
