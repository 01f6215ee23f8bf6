"""Public API for shared fleetwatch configuration utilities."""

from .loader import load_config, load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    ComponentsSettings,
    FleetwatchSettings,
    LoggingSettings,
    ProfileSettings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ComponentsSettings",
    "FleetwatchSettings",
    "LoggingSettings",
    "ProfileSettings",
    "load_config",
    "load_settings",
    "resolve_component_settings",
]
