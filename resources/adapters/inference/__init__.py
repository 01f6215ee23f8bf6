"""Inference adapter: provider chain and ordered fallback coordination."""

from __future__ import annotations

from typing import Mapping

import httpx

from packages.fleetwatch_shared.http import AsyncHttpClient
from resources.adapters.inference.adapter import (
    AllEndpointsUnavailableError,
    AnalysisProvider,
    AnalysisResult,
    Analyzer,
    AttemptResult,
    CoordinatedAnalysis,
    Endpoint,
    InferenceConfigurationError,
    InferenceError,
    InferenceTerminalError,
    InferenceUnavailableError,
    Issue,
    is_unavailable,
)
from resources.adapters.inference.component import RESOURCE_COMPONENT_ID
from resources.adapters.inference.config import (
    EndpointSettings,
    InferenceAdapterSettings,
    resolve_endpoints,
    resolve_inference_adapter_settings,
)
from resources.adapters.inference.coordinator import FallbackCoordinator
from resources.adapters.inference.provider import ChatCompletionsProvider


def build_fallback_coordinator(
    settings: InferenceAdapterSettings,
    *,
    environ: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FallbackCoordinator:
    """Build a coordinator over one shared HTTP client for all endpoints."""
    client = AsyncHttpClient(
        timeout=httpx.Timeout(
            settings.timeout_seconds, connect=settings.connect_timeout_seconds
        ),
        transport=transport,
    )
    return FallbackCoordinator(
        endpoints=resolve_endpoints(settings, environ=environ),
        provider=ChatCompletionsProvider(client=client, max_tokens=settings.max_tokens),
    )


__all__ = [
    "RESOURCE_COMPONENT_ID",
    "AllEndpointsUnavailableError",
    "AnalysisProvider",
    "AnalysisResult",
    "Analyzer",
    "AttemptResult",
    "ChatCompletionsProvider",
    "CoordinatedAnalysis",
    "Endpoint",
    "EndpointSettings",
    "FallbackCoordinator",
    "InferenceAdapterSettings",
    "InferenceConfigurationError",
    "InferenceError",
    "InferenceTerminalError",
    "InferenceUnavailableError",
    "Issue",
    "build_fallback_coordinator",
    "is_unavailable",
    "resolve_endpoints",
    "resolve_inference_adapter_settings",
]
