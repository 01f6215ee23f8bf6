"""SQLAlchemy engine construction for the shared SQLite substrate."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.pool import StaticPool

from resources.substrates.sqlite.config import SqliteSettings


def create_sqlite_engine(settings: SqliteSettings) -> Engine:
    """Construct an engine whose connections run in WAL mode.

    The parent directory of the database file is created when missing.
    """
    options: dict[str, Any] = {}
    if settings.path == ":memory:":
        # Worker threads share the single in-memory connection.
        options["poolclass"] = StaticPool
    else:
        Path(settings.path).expanduser().parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        settings.url,
        echo=settings.echo,
        **options,
        connect_args={
            "timeout": settings.busy_timeout_seconds,
            "check_same_thread": False,
        },
    )
    busy_timeout_ms = int(settings.busy_timeout_seconds * 1000)

    @event.listens_for(engine, "connect")
    def _apply_pragmas(dbapi_connection: Any, _record: Any) -> None:
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute(f"PRAGMA busy_timeout={busy_timeout_ms}")
        finally:
            cursor.close()

    return engine
