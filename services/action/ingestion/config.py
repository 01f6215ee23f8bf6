"""Pydantic settings for Ingestion Service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from packages.fleetwatch_shared.config import (
    FleetwatchSettings,
    resolve_component_settings,
)
from services.action.ingestion.component import SERVICE_COMPONENT_ID


class IngestionServiceSettings(BaseModel):
    """Ingestion endpoint runtime settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bind_host: str = "0.0.0.0"
    bind_port: int = Field(default=8443, ge=1, le=65535)
    ingest_path: str = "/ingest"
    max_payload_bytes: int = Field(default=1024 * 1024, gt=0)
    disconnect_poll_seconds: float = Field(default=0.25, gt=0)
    tls_certfile: str = ""
    tls_keyfile: str = ""

    @field_validator("ingest_path", mode="before")
    @classmethod
    def _normalize_ingest_path(cls, value: object) -> object:
        """Normalize the ingest route to a canonical absolute URL path."""
        if not isinstance(value, str):
            return value
        path = value.strip()
        if path == "":
            raise ValueError("ingest_path must not be empty")
        if not path.startswith("/"):
            path = f"/{path}"
        return path

    @model_validator(mode="after")
    def _tls_pair(self) -> "IngestionServiceSettings":
        """Require the TLS certificate and key together or not at all."""
        if bool(self.tls_certfile.strip()) != bool(self.tls_keyfile.strip()):
            raise ValueError("tls_certfile and tls_keyfile must be set together")
        return self

    @property
    def tls_enabled(self) -> bool:
        return self.tls_certfile.strip() != ""


def resolve_ingestion_service_settings(
    settings: FleetwatchSettings,
) -> IngestionServiceSettings:
    """Resolve service settings from ``components.service.ingestion``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=IngestionServiceSettings,
    )
