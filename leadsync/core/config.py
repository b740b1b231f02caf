"""Environment-driven settings for the mailbox and lead store."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from leadsync.core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path(".env")
_TRUE_TOKENS = ("1", "true", "yes", "y", "on")


def _parse_env_line(line: str) -> Optional[Tuple[str, str]]:
    line = line.strip()
    if line.startswith("#"):
        return None
    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    return key, value.strip().strip('"').strip("'")


def load_env_file(path: Path) -> List[str]:
    """Copy ``KEY=value`` pairs from ``path`` into ``os.environ``.

    Keys already set in the process environment are left alone. Returns the
    keys that were taken from the file; a missing or unreadable file yields none.
    """
    if not path.is_file():
        logger.debug("No env file at %s", path)
        return []

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        logger.warning("Could not read env file %s: %s", path, exc)
        return []

    applied: List[str] = []
    for parsed in filter(None, map(_parse_env_line, lines)):
        key, value = parsed
        if key in os.environ:
            continue
        os.environ[key] = value
        applied.append(key)

    logger.debug("Loaded %d setting(s) from %s", len(applied), path)
    return applied


def require_setting(env_key: str, value: Optional[str]) -> str:
    """Return ``value`` or raise ``ConfigError`` naming the env variable behind it."""

    if not value:
        raise ConfigError(f"Missing env variable: {env_key}")
    return value


def env_bool(key: str, default: bool = False) -> bool:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_TOKENS


def env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    """Connection settings for the IMAP mailbox and the leads database."""

    imap_host: Optional[str] = None
    imap_port: int = 993
    imap_user: Optional[str] = None
    imap_password: Optional[str] = None
    imap_tls: bool = True
    imap_mailbox: str = "INBOX"
    imap_search: str = "ALL"
    database_url: Optional[str] = None
    log_level: str = "INFO"

    def require_imap(self) -> None:
        """Raise ``ConfigError`` naming the first missing IMAP setting."""

        require_setting("IMAP_HOST", self.imap_host)
        require_setting("IMAP_USER", self.imap_user)
        require_setting("IMAP_PASS", self.imap_password)

    def require_database(self) -> str:
        return require_setting("DATABASE_URL", self.database_url)


def load_settings(env_file: Path | None = None) -> Settings:
    """Build ``Settings`` from the environment after loading the env file.

    The env file defaults to ``LEADSYNC_ENV_FILE`` or ``.env`` in the working
    directory. Missing values are only reported by the operation needing them.
    """

    path = env_file or Path(os.getenv("LEADSYNC_ENV_FILE", DEFAULT_ENV_FILE))
    load_env_file(path)

    return Settings(
        imap_host=os.getenv("IMAP_HOST") or None,
        imap_port=env_int("IMAP_PORT", 993),
        imap_user=os.getenv("IMAP_USER") or None,
        imap_password=os.getenv("IMAP_PASS") or None,
        imap_tls=env_bool("IMAP_TLS", True),
        imap_mailbox=os.getenv("IMAP_MAILBOX", "INBOX"),
        imap_search=os.getenv("IMAP_SEARCH", "ALL"),
        database_url=os.getenv("DATABASE_URL") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
