"""Typed configuration models for fleetwatch runtime settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "fleetwatch" / "fleetwatch.yaml"

_COMPONENT_KINDS = ("actor", "service", "adapter", "substrate")


class LoggingSettings(BaseModel):
    """Structured logging configuration shared by all components."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "fleetwatch"
    environment: str = "dev"


class ProfileSettings(BaseModel):
    """Deployment-wide secrets shared by the collector and its agents."""

    ingest_shared_secret: str = Field(default="", repr=False)

    @field_validator("ingest_shared_secret", mode="before")
    @classmethod
    def _stringify_secret(cls, value: object) -> object:
        """Keep numeric-looking env secrets as text."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ComponentNamespaceSettings(BaseModel):
    """Namespace map for grouped component settings under ``components.<kind>``."""

    model_config = ConfigDict(extra="allow")


class ComponentsSettings(BaseModel):
    """Typed ``components`` subtree grouped by component kind."""

    model_config = ConfigDict(extra="forbid")

    actor: ComponentNamespaceSettings = Field(
        default_factory=ComponentNamespaceSettings
    )
    service: ComponentNamespaceSettings = Field(
        default_factory=ComponentNamespaceSettings
    )
    adapter: ComponentNamespaceSettings = Field(
        default_factory=ComponentNamespaceSettings
    )
    substrate: ComponentNamespaceSettings = Field(
        default_factory=ComponentNamespaceSettings
    )

    @model_validator(mode="before")
    @classmethod
    def _reject_flat_component_keys(cls, value: object) -> object:
        """Reject flat ``<kind>_<name>`` keys in favor of grouped namespaces."""
        if not isinstance(value, dict):
            return value
        for key in value:
            if isinstance(key, str) and key.startswith(
                tuple(f"{kind}_" for kind in _COMPONENT_KINDS)
            ):
                kind, _, name = key.partition("_")
                raise ValueError(
                    f"components.{key} is invalid; use components.{kind}.{name} instead"
                )
        return value


class FleetwatchSettings(BaseModel):
    """Root runtime settings resolved from the configuration cascade."""

    model_config = ConfigDict(extra="ignore")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    profile: ProfileSettings = Field(default_factory=ProfileSettings)
    components: ComponentsSettings = Field(default_factory=ComponentsSettings)


TComponentSettings = TypeVar("TComponentSettings", bound=BaseModel)


def resolve_component_settings(
    *,
    settings: FleetwatchSettings,
    component_id: str,
    model: type[TComponentSettings],
) -> TComponentSettings:
    """Resolve one component settings object from grouped ``components`` keys.

    ``component_id`` is ``<kind>_<name>``; ``service_result_store`` reads
    ``components.service.result_store``.
    """
    kind, separator, name = component_id.partition("_")
    if not separator or kind not in _COMPONENT_KINDS:
        raise ValueError(f"unknown component id: {component_id}")

    namespace = getattr(settings.components, kind).model_dump(mode="python")
    resolved = namespace.get(name, {})
    if resolved is None:
        resolved = {}
    if not isinstance(resolved, dict):
        raise TypeError(f"components.{kind}.{name} must resolve to an object mapping")
    return model.model_validate(resolved)
