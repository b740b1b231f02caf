"""Pytest configuration to make the local package importable without installation."""
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from sqlalchemy import select

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from leadsync.cli import main as cli_main
from leadsync.core.models import RawMessage
from leadsync.storage import LeadStore, leads_table

FIXED_NOW = datetime(2025, 2, 1, 12, 0, tzinfo=timezone.utc)

_ENV_KEYS = (
    "IMAP_HOST",
    "IMAP_PORT",
    "IMAP_USER",
    "IMAP_PASS",
    "IMAP_TLS",
    "IMAP_MAILBOX",
    "IMAP_SEARCH",
    "DATABASE_URL",
    "LOG_LEVEL",
    "LEADSYNC_ENV_FILE",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep a developer's real mailbox and database settings out of the tests."""

    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("LEADSYNC_ENV_FILE", str(tmp_path / "missing.env"))


@pytest.fixture
def dummy_data_dir() -> Path:
    """Return the built-in sample emails directory for tests."""

    return ROOT / "dummy_data" / "emails"


@pytest.fixture
def fixed_now():
    return lambda: FIXED_NOW


@pytest.fixture
def make_message():
    """Build a RawMessage with sensible envelope defaults."""

    def _make(body: str, content_type: str = "text", **overrides) -> RawMessage:
        envelope = {
            "sender": "Web Form <forms@example.com>",
            "subject": "New Quote Request",
            "received_at": datetime(2025, 1, 14, 9, 15, tzinfo=timezone.utc),
            "source_name": "sample.eml",
        }
        envelope.update(overrides)
        return RawMessage(body=body, content_type=content_type, **envelope)

    return _make


@pytest.fixture
def store():
    """An in-memory SQLite lead store with the schema in place."""

    lead_store = LeadStore.from_url("sqlite://")
    lead_store.ensure_schema()
    yield lead_store
    lead_store.close()


@pytest.fixture
def fetch_lead():
    """Read one stored lead back as a dict keyed by attribute name."""

    def _fetch(lead_store: LeadStore, lead_id: int):
        with lead_store.engine.connect() as conn:
            row = conn.execute(select(leads_table).where(leads_table.c.id == lead_id)).first()
        if row is None:
            return None
        return {column.key: row._mapping[column] for column in leads_table.columns}

    return _fetch


@pytest.fixture
def run_cli(monkeypatch: pytest.MonkeyPatch):
    """Helper to invoke the CLI with custom arguments inside tests."""

    def _run(args: list[str]) -> int:
        monkeypatch.setattr(sys, "argv", ["leadsync", *args])
        return cli_main()

    return _run
