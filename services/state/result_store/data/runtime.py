"""Result Store owned SQLite runtime wiring."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from packages.fleetwatch_shared.config import (
    FleetwatchSettings,
    resolve_component_settings,
)
from resources.substrates.sqlite import (
    RESOURCE_COMPONENT_ID,
    SqliteSettings,
    create_session_factory,
    create_sqlite_engine,
    ping,
)

from .schema import metadata


@dataclass(frozen=True)
class ResultSqliteRuntime:
    """Concrete handle for Result Store access to its SQLite database."""

    engine: Engine
    session_factory: sessionmaker[Session]

    @classmethod
    def from_settings(cls, settings: FleetwatchSettings) -> "ResultSqliteRuntime":
        """Build the runtime from typed application settings."""
        return cls.from_sqlite_settings(
            resolve_component_settings(
                settings=settings,
                component_id=RESOURCE_COMPONENT_ID,
                model=SqliteSettings,
            )
        )

    @classmethod
    def from_sqlite_settings(cls, sqlite: SqliteSettings) -> "ResultSqliteRuntime":
        """Open the database file and ensure the owned tables exist."""
        engine = create_sqlite_engine(sqlite)
        metadata.create_all(engine)
        return cls(engine=engine, session_factory=create_session_factory(engine))

    def is_healthy(self) -> bool:
        """Return ``True`` when the database answers a trivial query."""
        return ping(self.engine)

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
