"""Pydantic settings for the inference adapter resource."""

from __future__ import annotations

import os
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator

from packages.fleetwatch_shared.config import (
    FleetwatchSettings,
    resolve_component_settings,
)
from resources.adapters.inference.adapter import Endpoint
from resources.adapters.inference.component import RESOURCE_COMPONENT_ID


class EndpointSettings(BaseModel):
    """One entry of the ordered endpoint chain."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = Field(min_length=1)
    model: str = Field(min_length=1)
    api_key: str = Field(default="", repr=False)
    api_key_env: str = ""

    @model_validator(mode="after")
    def _validate_auth_source(self) -> "EndpointSettings":
        """Prevent ambiguous inline + env-based API key configuration."""
        if self.api_key.strip() != "" and self.api_key_env.strip() != "":
            raise ValueError("api_key and api_key_env are mutually exclusive")
        return self


class InferenceAdapterSettings(BaseModel):
    """Inference adapter runtime configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    endpoints: tuple[EndpointSettings, ...] = ()
    timeout_seconds: float = Field(default=60.0, gt=0)
    connect_timeout_seconds: float = Field(default=5.0, gt=0)
    max_tokens: int = Field(default=1024, gt=0)


def resolve_inference_adapter_settings(
    settings: FleetwatchSettings,
) -> InferenceAdapterSettings:
    """Resolve adapter settings from ``components.adapter.inference``."""
    return resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=InferenceAdapterSettings,
    )


def resolve_endpoints(
    settings: InferenceAdapterSettings,
    *,
    environ: Mapping[str, str] | None = None,
) -> tuple[Endpoint, ...]:
    """Build the immutable endpoint chain, reading credentials from env.

    A named variable that is unset yields an empty credential.
    """
    env = environ if environ is not None else os.environ
    endpoints: list[Endpoint] = []
    for entry in settings.endpoints:
        credential = entry.api_key.strip()
        env_key = entry.api_key_env.strip()
        if env_key:
            credential = env.get(env_key, "").strip()
        endpoints.append(Endpoint(url=entry.url, model=entry.model, credential=credential))
    return tuple(endpoints)
