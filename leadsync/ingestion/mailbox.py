"""IMAP access to the inbox that receives form notification emails."""
from __future__ import annotations

import imaplib
import logging
from typing import Any, Callable, Iterator, List, Optional, Tuple

from leadsync.core.config import Settings
from leadsync.core.errors import MailboxError

logger = logging.getLogger(__name__)

ImapFactory = Callable[[str, int], Any]


def _default_factory(settings: Settings) -> ImapFactory:
    return imaplib.IMAP4_SSL if settings.imap_tls else imaplib.IMAP4


class ImapMailbox:
    """Read-only view of one IMAP folder.

    Use as a context manager: the connection is opened on enter and logged out
    on exit, whatever happened in between.
    """

    def __init__(self, settings: Settings, imap_factory: Optional[ImapFactory] = None):
        self.settings = settings
        self._factory = imap_factory or _default_factory(settings)
        self._conn: Any = None

    def __enter__(self) -> "ImapMailbox":
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @staticmethod
    def _check(response: Tuple[str, List[Any]], command: str) -> List[Any]:
        status, data = response
        if status != "OK":
            raise MailboxError(f"IMAP {command} failed: {status} {data!r}")
        return data

    def connect(self) -> None:
        self.settings.require_imap()
        logger.info(
            "Connecting to %s:%s as %s",
            self.settings.imap_host,
            self.settings.imap_port,
            self.settings.imap_user,
        )
        try:
            self._conn = self._factory(self.settings.imap_host, self.settings.imap_port)
            self._check(self._conn.login(self.settings.imap_user, self.settings.imap_password), "LOGIN")
            self._check(self._conn.select(self.settings.imap_mailbox), "SELECT")
        except (imaplib.IMAP4.error, OSError) as exc:
            raise MailboxError(f"Could not open {self.settings.imap_mailbox}: {exc}") from exc

    def fetch(self, criteria: Optional[str] = None, mark_seen: bool = True) -> Iterator[Tuple[str, bytes]]:
        """Yield ``(uid, raw_message)`` for every message matching ``criteria``.

        Fetching ``RFC822`` flags the message as seen on the server;
        ``mark_seen=False`` uses ``BODY.PEEK[]`` so the inbox is left untouched.
        """

        if self._conn is None:
            raise MailboxError("Mailbox is not connected")

        search = criteria or self.settings.imap_search
        try:
            data = self._check(self._conn.uid("SEARCH", None, search), "SEARCH")
        except imaplib.IMAP4.error as exc:
            raise MailboxError(f"IMAP SEARCH {search!r} failed: {exc}") from exc

        uids = data[0].split() if data and data[0] else []
        logger.info("%d message(s) match %s", len(uids), search)

        message_part = "(RFC822)" if mark_seen else "(BODY.PEEK[])"
        for raw_uid in uids:
            uid = raw_uid.decode() if isinstance(raw_uid, bytes) else str(raw_uid)
            status, msg_data = self._conn.uid("FETCH", uid, message_part)
            if status != "OK":
                logger.warning("FETCH failed for uid %s: %s", uid, status)
                continue
            raw = next((item[1] for item in msg_data if isinstance(item, tuple)), None)
            if raw is None:
                logger.warning("FETCH returned no body for uid %s", uid)
                continue
            yield uid, raw

    def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        try:
            conn.close()
        except (imaplib.IMAP4.error, OSError):
            logger.debug("CLOSE failed; logging out anyway", exc_info=True)
        try:
            conn.logout()
        except (imaplib.IMAP4.error, OSError):
            logger.debug("LOGOUT failed", exc_info=True)
