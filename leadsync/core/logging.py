"""Root logger setup for the leadsync CLI."""
from __future__ import annotations

import logging
import os

from leadsync.core.errors import ConfigError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Statement echo from these is only wanted when explicitly enabled.
_QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


def configure_logging(level: str | None = None) -> None:
    """Point every ``leadsync.*`` logger at stderr with one level.

    ``level`` comes from ``--log-level``; without it ``LOG_LEVEL`` is read,
    then INFO. An unknown level name is a ``ConfigError``.
    """

    resolved_level = (level or os.getenv("LOG_LEVEL", "INFO")).strip().upper()
    if not isinstance(logging.getLevelName(resolved_level), int):
        raise ConfigError(f"Unknown log level: {resolved_level!r}")

    logging.basicConfig(level=resolved_level, format=LOG_FORMAT)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
