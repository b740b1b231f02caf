"""Tests for parsing raw emails and loading the sample directory."""
import logging
from datetime import datetime, timezone
from pathlib import Path

from leadsync.ingestion import load_messages, loader, parse_message

MULTIPART = b"""From: Quotes Bot <quotes@garagehub.example>
To: leads@partsfinder.example
Subject: Engine enquiry
Date: Thu, 16 Jan 2025 10:30:00 +0200
MIME-Version: 1.0
Content-Type: multipart/alternative; boundary="XYZ"

--XYZ
Content-Type: text/plain; charset="utf-8"

Email: plain@example.com

--XYZ
Content-Type: text/html; charset="utf-8"

<p><b>Email:</b> html@example.com</p>

--XYZ--
"""

PLAIN_CRLF = (
    b"From: forms@example.com\r\n"
    b"Subject: Quote\r\n"
    b"Content-Type: text/plain; charset=utf-8\r\n"
    b"\r\n"
    b"Email: crlf@example.com\r\n"
    b"Phone: 07700 900123\r\n"
)


def test_parse_message_prefers_html_part():
    message = parse_message(MULTIPART, source_name="multi.eml")

    assert message.is_html
    assert "html@example.com" in message.body
    assert "plain@example.com" not in message.body
    assert message.sender == "Quotes Bot <quotes@garagehub.example>"
    assert message.subject == "Engine enquiry"
    assert message.source_name == "multi.eml"


def test_parse_message_reads_date_header_with_offset():
    message = parse_message(MULTIPART)

    assert message.received_at.astimezone(timezone.utc) == datetime(2025, 1, 16, 8, 30, tzinfo=timezone.utc)


def test_parse_message_plain_text_normalizes_newlines():
    message = parse_message(PLAIN_CRLF)

    assert not message.is_html
    assert "\r" not in message.body
    assert "Email: crlf@example.com\nPhone: 07700 900123" in message.body
    assert message.received_at is None


def test_parse_message_ignores_garbage_date():
    raw = b"From: a@b.co\nSubject: x\nDate: not a date\nContent-Type: text/plain\n\nEmail: a@b.co\n"

    assert parse_message(raw).received_at is None


def test_parse_message_without_text_part_has_empty_body():
    raw = (
        b"From: a@b.co\nSubject: attachment only\nContent-Type: application/octet-stream\n"
        b"Content-Transfer-Encoding: base64\n\nAAAA\n"
    )

    message = parse_message(raw)

    assert message.body == ""
    assert not message.is_html


def test_load_messages_reads_sample_directory(dummy_data_dir: Path):
    messages, alerts = load_messages(dummy_data_dir)

    assert alerts == []
    assert [message.source_name for message in messages] == sorted(path.name for path in dummy_data_dir.glob("*.eml"))
    sample = next(message for message in messages if message.source_name == "quote_request_01.eml")
    assert sample.is_html
    assert sample.subject == "New Quote Request - enginefinders.co.uk"
    assert sample.received_at == datetime(2025, 1, 14, 9, 15, tzinfo=timezone.utc)


def test_load_messages_returns_empty_for_missing_directory(tmp_path: Path):
    messages, alerts = load_messages(tmp_path / "missing")

    assert messages == []
    assert alerts == []


def test_load_messages_isolates_parse_failures(tmp_path: Path, monkeypatch, caplog):
    (tmp_path / "good.eml").write_bytes(PLAIN_CRLF)
    (tmp_path / "bad.eml").write_bytes(b"irrelevant")

    real_parse = loader.parse_message

    def fake_parse(raw, source_name=""):
        if source_name == "bad.eml":
            raise ValueError("boom")
        return real_parse(raw, source_name=source_name)

    monkeypatch.setattr(loader, "parse_message", fake_parse)
    caplog.set_level(logging.ERROR)

    messages, alerts = loader.load_messages(tmp_path)

    assert [message.source_name for message in messages] == ["good.eml"]
    assert alerts == ["Failed to parse email bad.eml"]
    assert "Failed to parse email" in caplog.text
