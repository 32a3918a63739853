"""inbox-archive: forwarded emails to size-bounded, block-structured pages."""

from .blocks import BlockConverter, markup_to_blocks
from .chunker import chunk_text
from .config import ArchiveConfig, LoggingConfig
from .forwarded import extract_email_address, extract_forward_info, parse_date_string
from .inline import parse_rich_text
from .logging import setup_logging
from .markup import html_to_markup, linkify_urls, normalize_body
from .models import (
    Annotation,
    ArchivedEmail,
    Block,
    BulletItem,
    Callout,
    Code,
    Divider,
    ForwardInfo,
    Heading,
    InboundAttachment,
    InboundEmail,
    NumberedItem,
    Paragraph,
    ParsedSubject,
    Quote,
    RichTextSpan,
)
from .pipeline import EmailArchiver, InputTooLargeError
from .render import render_block, render_page
from .stripper import strip_forwarder_preamble, strip_forwarding_headers
from .subject import parse_subject

__all__ = [
    "Annotation",
    "ArchiveConfig",
    "ArchivedEmail",
    "Block",
    "BlockConverter",
    "BulletItem",
    "Callout",
    "Code",
    "Divider",
    "EmailArchiver",
    "ForwardInfo",
    "Heading",
    "InboundAttachment",
    "InboundEmail",
    "InputTooLargeError",
    "LoggingConfig",
    "NumberedItem",
    "Paragraph",
    "ParsedSubject",
    "Quote",
    "RichTextSpan",
    "chunk_text",
    "extract_email_address",
    "extract_forward_info",
    "html_to_markup",
    "linkify_urls",
    "markup_to_blocks",
    "normalize_body",
    "parse_date_string",
    "parse_rich_text",
    "parse_subject",
    "render_block",
    "render_page",
    "setup_logging",
    "strip_forwarder_preamble",
    "strip_forwarding_headers",
]
