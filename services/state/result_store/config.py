"""Pydantic settings for Result Store Service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from packages.fleetwatch_shared.config import (
    FleetwatchSettings,
    resolve_component_settings,
)
from services.state.result_store.component import SERVICE_COMPONENT_ID


class ResultStoreSettings(BaseModel):
    """Result Store Service runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_list_limit: int = Field(default=50, gt=0)
    max_list_limit: int = Field(default=500, gt=0)

    @model_validator(mode="after")
    def _default_within_max(self) -> "ResultStoreSettings":
        if self.default_list_limit > self.max_list_limit:
            raise ValueError("default_list_limit must not exceed max_list_limit")
        return self


def resolve_result_store_settings(settings: FleetwatchSettings) -> ResultStoreSettings:
    """Resolve settings from ``components.service.result_store``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=ResultStoreSettings,
    )
