"""Archive configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden via env vars,
which is how the webhook handler is configured in deployment.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings

from .attachments import BLOCKED_EXTENSIONS, MAX_ATTACHMENT_BYTES
from .chunker import DEFAULT_MAX_LENGTH


class LoggingConfig(BaseSettings):
    """structlog output settings."""

    model_config = {"env_prefix": "LOG_"}

    renderer: Literal["json", "console"] = Field(default="json", description="JSON lines or human-friendly console output")
    level: str = Field(default="INFO", description="Root log level name")


class ArchiveConfig(BaseSettings):
    """Root configuration for turning inbound emails into pages."""

    model_config = {"env_prefix": "ARCHIVE_"}

    allowed_senders: list[str] = Field(
        default_factory=list,
        description="Addresses allowed to send to the archive inbox; also the self addresses",
    )
    inbox_secret: SecretStr | None = Field(
        default=None,
        description="Secret embedded in the inbox address (<prefix>-<secret>@domain)",
    )
    recipient_prefix: str = Field(
        default="notion",
        description="Local-part prefix in front of the inbox secret",
    )
    max_span_length: int = Field(
        default=DEFAULT_MAX_LENGTH,
        gt=0,
        description="Per-span character limit of the page store",
    )
    max_body_length: int = Field(
        default=500_000,
        gt=0,
        description="Largest text or HTML body accepted, in characters",
    )
    strip_forwarder_preamble: bool = Field(
        default=True,
        description="Drop the forwarder's own text above the first forwarding marker",
    )
    max_attachment_bytes: int = Field(
        default=MAX_ATTACHMENT_BYTES,
        description="Attachments larger than this are skipped with a warning",
    )
    blocked_extensions: list[str] = Field(
        default_factory=lambda: list(BLOCKED_EXTENSIONS),
        description="File extensions never passed to the page store",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
