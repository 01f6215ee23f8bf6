"""Shared SQLite substrate primitives for fleetwatch services."""

from resources.substrates.sqlite.config import SqliteSettings
from resources.substrates.sqlite.engine import create_sqlite_engine
from resources.substrates.sqlite.errors import normalize_sqlite_error
from resources.substrates.sqlite.health import ping
from resources.substrates.sqlite.session import (
    create_session_factory,
    transactional_session,
)

RESOURCE_COMPONENT_ID = "substrate_sqlite"

__all__ = [
    "RESOURCE_COMPONENT_ID",
    "SqliteSettings",
    "create_session_factory",
    "create_sqlite_engine",
    "normalize_sqlite_error",
    "ping",
    "transactional_session",
]
