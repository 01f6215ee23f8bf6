"""Pydantic settings for the collection agent."""

from __future__ import annotations

import socket
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from actors.agent.component import ACTOR_COMPONENT_ID
from packages.fleetwatch_shared.config import (
    FleetwatchSettings,
    resolve_component_settings,
)

DEFAULT_STATE_FILE = Path.home() / ".local" / "state" / "fleetwatch" / "last_seen"


class AgentSettings(BaseModel):
    """Collection agent runtime settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    collector_url: str = "https://localhost:8443/ingest"
    poll_interval_seconds: float = Field(default=300.0, gt=0)
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    state_file: Path = DEFAULT_STATE_FILE
    hostname: str = Field(default="", validate_default=True)
    tls_skip_verify: bool = False

    @field_validator("hostname", mode="after")
    @classmethod
    def _default_hostname(cls, value: str) -> str:
        """Fall back to this machine's hostname when unset."""
        return value.strip() or socket.gethostname()

    @field_validator("collector_url", mode="after")
    @classmethod
    def _require_url(cls, value: str) -> str:
        if value.strip() == "":
            raise ValueError("collector_url must not be empty")
        return value.strip()


def resolve_agent_settings(settings: FleetwatchSettings) -> AgentSettings:
    """Resolve agent settings from ``components.actor.agent``."""
    return resolve_component_settings(
        settings=settings,
        component_id=ACTOR_COMPONENT_ID,
        model=AgentSettings,
    )
