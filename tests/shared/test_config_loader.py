"""Tests for YAML/env/CLI configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from packages.fleetwatch_shared.config import (
    FleetwatchSettings,
    load_config,
    load_settings,
    resolve_component_settings,
)
from resources.substrates.sqlite.config import SqliteSettings
from services.state.result_store.component import SERVICE_COMPONENT_ID
from services.state.result_store.config import ResultStoreSettings


def test_load_settings_uses_precedence_cascade(tmp_path: Path) -> None:
    """CLI params should override env, env should override YAML, then defaults."""
    config_file = tmp_path / "fleetwatch.yaml"
    config_file.write_text(
        "\n".join(
            [
                "logging:",
                "  level: WARNING",
                "components:",
                "  substrate:",
                "    sqlite:",
                "      path: /var/lib/fleetwatch/yaml.db",
                "      busy_timeout_seconds: 2",
            ]
        ),
        encoding="utf-8",
    )

    settings = load_settings(
        cli_params={"logging": {"level": "DEBUG"}},
        environ={
            "FLEETWATCH_LOGGING__LEVEL": "ERROR",
            "FLEETWATCH_COMPONENTS__SUBSTRATE__SQLITE__PATH": "/tmp/env.db",
            "FLEETWATCH_COMPONENTS__SERVICE__RESULT_STORE__MAX_LIST_LIMIT": "50",
            "UNRELATED": "ignored",
        },
        config_path=config_file,
    )

    sqlite = resolve_component_settings(
        settings=settings,
        component_id="substrate_sqlite",
        model=SqliteSettings,
    )
    store = resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=ResultStoreSettings,
    )

    assert settings.logging.level == "DEBUG"
    assert sqlite.path == "/tmp/env.db"
    assert sqlite.busy_timeout_seconds == 2
    assert store.max_list_limit == 50


def test_load_settings_uses_defaults_when_sources_missing(tmp_path: Path) -> None:
    """An absent default config file should yield built-in defaults."""
    config = load_config(environ={}, config_path=None, defaults=None)
    settings = FleetwatchSettings.model_validate(config)
    sqlite = resolve_component_settings(
        settings=settings, component_id="substrate_sqlite", model=SqliteSettings
    )

    assert settings.logging.service == "fleetwatch"
    assert settings.logging.json_output is True
    assert settings.profile.ingest_shared_secret == ""
    assert sqlite.path == "fleetwatch.db"


def test_explicit_missing_config_path_raises(tmp_path: Path) -> None:
    """A config path given explicitly must exist."""
    with pytest.raises(FileNotFoundError):
        load_settings(config_path=tmp_path / "absent.yaml", environ={})


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    """A YAML document that is not a mapping should be refused."""
    config_file = tmp_path / "fleetwatch.yaml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_settings(config_path=config_file, environ={})


def test_env_scalars_are_coerced_but_secrets_stay_text(tmp_path: Path) -> None:
    """Numeric-looking secrets must survive env coercion as strings."""
    empty = tmp_path / "fleetwatch.yaml"
    empty.write_text("", encoding="utf-8")

    settings = load_settings(
        environ={
            "FLEETWATCH_PROFILE__INGEST_SHARED_SECRET": "123456",
            "FLEETWATCH_LOGGING__JSON_OUTPUT": "false",
        },
        config_path=empty,
    )

    assert settings.profile.ingest_shared_secret == "123456"
    assert settings.logging.json_output is False
    assert "123456" not in repr(settings.profile)


def test_flat_component_keys_are_rejected() -> None:
    """``components.substrate_sqlite`` should point users at the grouped form."""
    with pytest.raises(ValidationError) as exc_info:
        FleetwatchSettings.model_validate(
            {"components": {"substrate_sqlite": {"path": "x.db"}}}
        )

    assert "components.substrate.sqlite" in str(exc_info.value)


def test_unknown_component_id_is_rejected() -> None:
    """Component ids must start with a known kind."""
    with pytest.raises(ValueError):
        resolve_component_settings(
            settings=FleetwatchSettings(),
            component_id="widget_thing",
            model=SqliteSettings,
        )
