"""Tests for inference adapter settings and endpoint resolution."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from packages.fleetwatch_shared.config import load_settings
from resources.adapters.inference.config import (
    EndpointSettings,
    InferenceAdapterSettings,
    resolve_endpoints,
    resolve_inference_adapter_settings,
)


def test_defaults_match_client_timeouts() -> None:
    """Defaults should use a 60s overall and 5s connect timeout."""
    settings = InferenceAdapterSettings()

    assert settings.timeout_seconds == 60.0
    assert settings.connect_timeout_seconds == 5.0
    assert settings.max_tokens == 1024
    assert settings.endpoints == ()


def test_inline_and_env_keys_are_mutually_exclusive() -> None:
    """Endpoints may not declare both an inline key and an env key."""
    with pytest.raises(ValidationError):
        EndpointSettings(url="http://x", model="m", api_key="a", api_key_env="B")


def test_resolve_endpoints_reads_named_env_variables() -> None:
    """Credentials should resolve from each endpoint's named variable."""
    settings = InferenceAdapterSettings(
        endpoints=(
            EndpointSettings(url="http://a", model="m1", api_key_env="KEY_A"),
            EndpointSettings(url="http://b", model="m2", api_key_env="KEY_MISSING"),
            EndpointSettings(url="http://c", model="m3", api_key="inline"),
        )
    )

    endpoints = resolve_endpoints(settings, environ={"KEY_A": " secret-a "})

    assert [endpoint.credential for endpoint in endpoints] == [
        "secret-a",
        "",
        "inline",
    ]
    assert [endpoint.model for endpoint in endpoints] == ["m1", "m2", "m3"]


def test_endpoint_repr_hides_credential() -> None:
    """Rendering an endpoint should never include its credential."""
    settings = InferenceAdapterSettings(
        endpoints=(EndpointSettings(url="http://a", model="m", api_key="hunter2"),)
    )
    [endpoint] = resolve_endpoints(settings, environ={})

    assert "hunter2" not in repr(endpoint)


def test_settings_resolve_from_component_namespace(tmp_path) -> None:
    """Adapter settings should load from components.adapter.inference."""
    config_path = tmp_path / "fleetwatch.yaml"
    config_path.write_text(
        "components:\n"
        "  adapter:\n"
        "    inference:\n"
        "      timeout_seconds: 30\n"
        "      endpoints:\n"
        "        - url: http://primary/v1\n"
        "          model: small\n"
        "          api_key_env: PRIMARY_KEY\n"
        "        - url: http://backup/v1\n"
        "          model: large\n",
        encoding="utf-8",
    )

    settings = resolve_inference_adapter_settings(
        load_settings(config_path=config_path, environ={})
    )

    assert settings.timeout_seconds == 30.0
    assert [entry.model for entry in settings.endpoints] == ["small", "large"]
