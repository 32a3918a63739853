"""Turn an inbound email payload into an ArchivedEmail."""

from __future__ import annotations

from typing import Any

import structlog

from .attachments import attachment_blocks, filter_attachments, warning_callouts
from .blocks import BlockConverter
from .config import ArchiveConfig
from .forwarded import extract_forward_info, parse_date_string
from .markup import normalize_body
from .models import ArchivedEmail, Block, InboundEmail
from .stripper import strip_forwarder_preamble, strip_forwarding_headers
from .subject import parse_subject
from .validate import validate_recipient, validate_sender

logger = structlog.get_logger()


class InputTooLargeError(ValueError):
    """An email body exceeds the configured size bound."""

    def __init__(self, field: str, length: int, limit: int) -> None:
        super().__init__(f"{field} is {length} characters, limit is {limit}")
        self.field = field
        self.length = length
        self.limit = limit


class EmailArchiver:
    """Run subject parsing, header recovery and block conversion for one email.

    Holds no per-email state; one instance can archive any number of
    emails.
    """

    def __init__(self, config: ArchiveConfig) -> None:
        self._config = config
        self._self_addresses = {s.strip().lower() for s in config.allowed_senders if s.strip()}
        self._converter = BlockConverter(config.max_span_length)

    @property
    def self_addresses(self) -> frozenset[str]:
        return frozenset(self._self_addresses)

    # ------------------------------------------------------------------
    # Gatekeeping
    # ------------------------------------------------------------------

    def accepts(self, email: InboundEmail) -> bool:
        """Check the secret recipient address and the sender allow-list."""
        secret = self._config.inbox_secret
        if not validate_recipient(
            email.to_address,
            secret.get_secret_value() if secret else None,
            self._config.recipient_prefix,
        ):
            logger.info("email_rejected", reason="invalid_recipient", to_address=email.to_address)
            return False

        if not validate_sender(email.from_address, self._self_addresses):
            logger.info("email_rejected", reason="unauthorized_sender", from_address=email.from_address)
            return False

        return True

    # ------------------------------------------------------------------
    # Archive
    # ------------------------------------------------------------------

    def archive(self, payload: InboundEmail | dict[str, Any]) -> ArchivedEmail:
        email = payload if isinstance(payload, InboundEmail) else InboundEmail.model_validate(payload)
        self._check_size(email)

        subject = parse_subject(email.subject)
        logger.info("subject_parsed", tag=subject.tag, clean_subject=subject.clean_subject)

        text_body = email.text_body or ""
        forward = extract_forward_info(text_body, self._self_addresses)
        sender = forward.original_sender or email.from_address
        date = forward.original_date or parse_date_string(email.date)
        logger.info(
            "headers_parsed",
            original_sender="extracted" if forward.original_sender else "fallback",
            original_date="extracted" if forward.original_date else "fallback",
        )

        blocks = self._content_blocks(email.html_body, strip_forwarding_headers(text_body))
        logger.info("content_converted", block_count=len(blocks))

        filtered = filter_attachments(
            email.attachments,
            max_bytes=self._config.max_attachment_bytes,
            blocked_extensions=self._config.blocked_extensions,
        )
        logger.info(
            "attachments_filtered",
            total=len(email.attachments),
            valid=len(filtered.valid),
            warning_count=len(filtered.warnings),
        )

        limit = self._config.max_span_length
        blocks.extend(attachment_blocks(filtered.valid, limit))
        blocks.extend(warning_callouts(filtered.warnings, limit))

        archived = ArchivedEmail(
            subject=subject,
            forward=forward,
            sender=sender,
            date=date,
            blocks=blocks,
            attachments=filtered.valid,
            warnings=filtered.warnings,
        )
        logger.info(
            "email_archived",
            tag=subject.tag,
            block_count=len(blocks),
            has_attachments=archived.has_attachments,
            warning_count=len(filtered.warnings),
        )
        return archived

    def _content_blocks(self, html_body: str | None, cleaned_text: str) -> list[Block]:
        markup = normalize_body(html_body, cleaned_text)
        if self._config.strip_forwarder_preamble:
            markup = strip_forwarder_preamble(markup)
        return self._converter.convert(markup)

    def _check_size(self, email: InboundEmail) -> None:
        limit = self._config.max_body_length
        for field, value in (("text_body", email.text_body), ("html_body", email.html_body)):
            if value and len(value) > limit:
                logger.warning("email_too_large", field=field, length=len(value), limit=limit)
                raise InputTooLargeError(field, len(value), limit)
