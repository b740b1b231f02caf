"""Tests for the IMAP mailbox wrapper using an in-process fake server."""
import imaplib

import pytest

from leadsync.core.config import Settings
from leadsync.core.errors import ConfigError, MailboxError
from leadsync.ingestion import ImapMailbox, read_mailbox

RAW_EMAIL = b"From: forms@example.com\r\nSubject: Quote\r\nContent-Type: text/plain\r\n\r\nEmail: imap@example.com\r\n"


class FakeImap:
    """Records commands and answers them from canned messages."""

    instances = []

    def __init__(self, host, port, messages=None, login_status="OK"):
        self.host = host
        self.port = port
        self.messages = messages if messages is not None else {b"7": RAW_EMAIL, b"9": RAW_EMAIL}
        self.login_status = login_status
        self.commands = []
        FakeImap.instances.append(self)

    def login(self, user, password):
        self.commands.append(("LOGIN", user))
        return self.login_status, [b"done"]

    def select(self, mailbox):
        self.commands.append(("SELECT", mailbox))
        return "OK", [str(len(self.messages)).encode()]

    def uid(self, command, *args):
        self.commands.append((command, *args))
        if command == "SEARCH":
            return "OK", [b" ".join(self.messages)]
        if command == "FETCH":
            uid, _ = args
            raw = self.messages.get(uid.encode())
            if raw is None:
                return "NO", [None]
            return "OK", [(f"{uid} (UID {uid} BODY[] {{{len(raw)}}}".encode(), raw), b")"]
        raise AssertionError(command)

    def close(self):
        self.commands.append(("CLOSE",))
        return "OK", [b""]

    def logout(self):
        self.commands.append(("LOGOUT",))
        return "BYE", [b""]


@pytest.fixture(autouse=True)
def _reset_fake():
    FakeImap.instances = []


@pytest.fixture
def settings():
    return Settings(
        imap_host="imap.example.com",
        imap_port=993,
        imap_user="leads@example.com",
        imap_password="secret",
        imap_mailbox="Quotes",
        imap_search="UNSEEN",
    )


def test_mailbox_logs_in_selects_and_logs_out(settings):
    with ImapMailbox(settings, imap_factory=FakeImap) as mailbox:
        list(mailbox.fetch())

    conn = FakeImap.instances[0]
    assert (conn.host, conn.port) == ("imap.example.com", 993)
    assert conn.commands[0] == ("LOGIN", "leads@example.com")
    assert conn.commands[1] == ("SELECT", "Quotes")
    assert ("SEARCH", None, "UNSEEN") in conn.commands
    assert conn.commands[-2:] == [("CLOSE",), ("LOGOUT",)]


def test_fetch_marks_seen_with_rfc822(settings):
    with ImapMailbox(settings, imap_factory=FakeImap) as mailbox:
        fetched = list(mailbox.fetch())

    assert fetched == [("7", RAW_EMAIL), ("9", RAW_EMAIL)]
    assert ("FETCH", "7", "(RFC822)") in FakeImap.instances[0].commands


def test_fetch_peeks_when_not_marking_seen(settings):
    with ImapMailbox(settings, imap_factory=FakeImap) as mailbox:
        list(mailbox.fetch(criteria="ALL", mark_seen=False))

    commands = FakeImap.instances[0].commands
    assert ("SEARCH", None, "ALL") in commands
    assert ("FETCH", "9", "(BODY.PEEK[])") in commands


def test_fetch_skips_messages_that_fail_to_fetch(settings):
    class MissingBody(FakeImap):
        def uid(self, command, *args):
            if command == "SEARCH":
                self.commands.append((command, *args))
                return "OK", [b"7 8"]
            return super().uid(command, *args)

    with ImapMailbox(settings, imap_factory=MissingBody) as mailbox:
        fetched = list(mailbox.fetch())

    assert [uid for uid, _ in fetched] == ["7"]


def test_fetch_with_empty_search_result(settings):
    factory = lambda host, port: FakeImap(host, port, messages={})

    with ImapMailbox(settings, imap_factory=factory) as mailbox:
        assert list(mailbox.fetch()) == []


def test_failed_login_raises_mailbox_error(settings):
    factory = lambda host, port: FakeImap(host, port, login_status="NO")

    with pytest.raises(MailboxError, match="LOGIN"):
        ImapMailbox(settings, imap_factory=factory).connect()


def test_imap_protocol_errors_become_mailbox_errors(settings):
    def refuse(host, port):
        raise imaplib.IMAP4.error("AUTHENTICATIONFAILED")

    with pytest.raises(MailboxError, match="AUTHENTICATIONFAILED"):
        ImapMailbox(settings, imap_factory=refuse).connect()


def test_missing_imap_settings_raise_config_error():
    with pytest.raises(ConfigError, match="IMAP_HOST"):
        ImapMailbox(Settings(), imap_factory=FakeImap).connect()

    assert FakeImap.instances == []


def test_fetch_requires_connection(settings):
    with pytest.raises(MailboxError, match="not connected"):
        list(ImapMailbox(settings, imap_factory=FakeImap).fetch())


def test_read_mailbox_parses_fetched_messages(settings):
    with ImapMailbox(settings, imap_factory=FakeImap) as mailbox:
        messages, alerts = read_mailbox(mailbox, mark_seen=False)

    assert alerts == []
    assert [message.source_name for message in messages] == ["imap:7", "imap:9"]
    assert "imap@example.com" in messages[0].body
