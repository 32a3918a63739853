"""Entry point: archive one inbound email payload.

Usage::

    python -m inbox_archive payload.json   # read the webhook JSON from a file
    python -m inbox_archive -              # read it from stdin

Prints the rendered page (properties and child blocks) as JSON.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from .config import ArchiveConfig
from .logging import setup_logging
from .models import InboundEmail
from .pipeline import EmailArchiver, InputTooLargeError
from .render import render_page

logger = structlog.get_logger()


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: python -m inbox_archive <payload.json|->", file=sys.stderr)
        return 1

    config = ArchiveConfig()
    setup_logging(json=config.logging.renderer == "json", level=config.logging.level)

    raw = sys.stdin.read() if args[0] == "-" else Path(args[0]).read_text(encoding="utf-8")
    try:
        email = InboundEmail.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.error("invalid_payload", error=str(exc))
        return 1

    archiver = EmailArchiver(config)
    if not archiver.accepts(email):
        return 1

    try:
        archived = archiver.archive(email)
    except InputTooLargeError as exc:
        logger.error("email_not_archived", error=str(exc))
        return 1

    json.dump(render_page(archived), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
