"""Configuration model for the shared SQLite substrate."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SqliteSettings(BaseModel):
    """Settings for ``components.substrate.sqlite``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = "fleetwatch.db"
    busy_timeout_seconds: float = Field(default=5.0, gt=0)
    echo: bool = False

    @field_validator("path")
    @classmethod
    def _require_path(cls, value: str) -> str:
        value = value.strip()
        if value == "":
            raise ValueError("substrate.sqlite.path is required")
        return value

    @property
    def url(self) -> str:
        """SQLAlchemy URL for the configured database file."""
        if self.path == ":memory:":
            return "sqlite://"
        return f"sqlite:///{Path(self.path).expanduser()}"
