"""Tests for the inbox_archive command-line entry point."""

from __future__ import annotations

import io
import json

import pytest

from inbox_archive.__main__ import main

from tests.conftest import make_inbound_email


@pytest.fixture(autouse=True)
def archive_env(monkeypatch):
    monkeypatch.setenv("ARCHIVE_ALLOWED_SENDERS", '["me@example.com"]')
    monkeypatch.setenv("ARCHIVE_INBOX_SECRET", "abc123")
    monkeypatch.setenv("LOG_RENDERER", "console")


class TestMain:
    def test_usage(self, capsys):
        assert main([]) == 1
        assert "Usage" in capsys.readouterr().err

    def test_archives_file(self, tmp_path, capsys):
        path = tmp_path / "payload.json"
        path.write_text(json.dumps(make_inbound_email()), encoding="utf-8")

        assert main([str(path)]) == 0

        page = json.loads(capsys.readouterr().out)
        assert page["properties"]["Client"]["rich_text"][0]["text"]["content"] == "acme"
        assert page["properties"]["Date"] == {"date": {"start": "2024-12-09"}}
        assert page["children"][0]["type"] == "paragraph"

    def test_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(make_inbound_email())))
        assert main(["-"]) == 0
        assert json.loads(capsys.readouterr().out)["properties"]["Name"]["title"][0]["text"]["content"] == (
            "Project Update"
        )

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "payload.json"
        path.write_text("{not json", encoding="utf-8")
        assert main([str(path)]) == 1
        assert capsys.readouterr().out == ""

    def test_rejected_sender(self, tmp_path, capsys):
        path = tmp_path / "payload.json"
        path.write_text(json.dumps(make_inbound_email(from_address="stranger@evil.com")), encoding="utf-8")
        assert main([str(path)]) == 1
        assert capsys.readouterr().out == ""

    def test_too_large(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("ARCHIVE_MAX_BODY_LENGTH", "10")
        path = tmp_path / "payload.json"
        path.write_text(json.dumps(make_inbound_email()), encoding="utf-8")
        assert main([str(path)]) == 1
        assert capsys.readouterr().out == ""
