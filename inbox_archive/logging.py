"""structlog setup for the archiver.

Events describe pipeline steps, not message content: the few keys that
can carry email text are truncated before rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Event keys that may carry email content; logged truncated.
CONTENT_KEYS = ("subject", "clean_subject", "from_address", "to_address")
MAX_LOGGED_CHARS = 100


def truncate_content_fields(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Cut email-derived values so message content is not logged in full."""
    for key in CONTENT_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str) and len(value) > MAX_LOGGED_CHARS:
            event_dict[key] = value[:MAX_LOGGED_CHARS] + "…"
    return event_dict


def setup_logging(*, json: bool = True, level: str = "INFO") -> None:
    """Route structlog events through one stderr handler on the root logger.

    ``truncate_content_fields`` runs before rendering so subjects and
    addresses never reach the log in full.  *json* picks JSON lines over
    the console renderer; *level* is a level name in any case.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        truncate_content_fields,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # Logs go to stderr; stdout carries the CLI's JSON output.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())
