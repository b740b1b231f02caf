"""Idempotent lead persistence on top of SQLAlchemy."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import create_engine, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from leadsync.core.errors import ConfigError, PersistenceError
from leadsync.core.models import Lead
from leadsync.storage.schema import leads_table, metadata

logger = logging.getLogger(__name__)

SAVED = "saved"
DUPLICATE = "duplicate"

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def normalize_database_url(url: str) -> str:
    """Accept libpq-style ``postgres://`` URLs, which SQLAlchemy rejects."""

    url = url.strip()
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


@dataclass(frozen=True)
class SaveResult:
    status: str
    lead_id: Optional[int] = None

    @property
    def is_duplicate(self) -> bool:
        return self.status == DUPLICATE


class LeadStore:
    """Insert-or-ignore access to the ``leads`` table.

    The store owns its engine: open it once per batch (``with LeadStore.from_url(...)``)
    and it disposes the connection pool on exit.
    """

    def __init__(self, engine: Engine):
        if engine.dialect.name not in _INSERTS:
            raise PersistenceError(f"Unsupported database dialect: {engine.dialect.name}")
        self.engine = engine

    @classmethod
    def from_url(cls, url: str, **engine_options: Any) -> "LeadStore":
        try:
            engine = create_engine(normalize_database_url(url), **engine_options)
        except ArgumentError as exc:
            raise ConfigError(f"Invalid database URL: {exc}") from exc
        return cls(engine)

    def __enter__(self) -> "LeadStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.engine.dispose()

    def ensure_schema(self) -> None:
        """Create the leads table when it does not exist yet."""

        try:
            metadata.create_all(self.engine, checkfirst=True)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not create the leads table: {exc}") from exc

    def save(self, lead: Lead) -> SaveResult:
        """Insert a lead unless one with the same dedupe key already exists."""

        insert = _INSERTS[self.engine.dialect.name]
        statement = (
            insert(leads_table)
            .values(**lead.to_dict())
            .on_conflict_do_nothing(index_elements=[leads_table.c.dedupe_key])
            .returning(leads_table.c.id)
        )
        try:
            with self.engine.begin() as conn:
                lead_id = conn.execute(statement).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Error saving lead from {lead.source}: {exc}") from exc

        if lead_id is None:
            logger.info("Duplicate lead ignored (%s)", lead.dedupe_key[:12])
            return SaveResult(DUPLICATE)
        return SaveResult(SAVED, lead_id)

    def count(self) -> int:
        try:
            with self.engine.connect() as conn:
                return conn.execute(select(func.count()).select_from(leads_table)).scalar_one()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not count leads: {exc}") from exc
