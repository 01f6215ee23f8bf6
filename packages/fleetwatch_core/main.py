"""Process entrypoint for the collector HTTP runtime."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Mapping

import httpx
from fastapi import FastAPI

from packages.fleetwatch_core import health
from packages.fleetwatch_shared.config import FleetwatchSettings, load_settings
from packages.fleetwatch_shared.http import create_app, run_app
from packages.fleetwatch_shared.logging import configure_logging, get_logger
from resources.adapters.inference import (
    build_fallback_coordinator,
    resolve_inference_adapter_settings,
)
from services.action.ingestion import (
    DefaultIngestionService,
    resolve_ingestion_service_settings,
)
from services.action.ingestion import api as ingestion_api
from services.state.result_store import (
    ResultStoreService,
    build_result_store_service,
)
from services.state.result_store import api as result_store_api

_LOGGER = get_logger(__name__)


def build_collector_app(
    settings: FleetwatchSettings,
    *,
    environ: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    result_store: ResultStoreService | None = None,
) -> FastAPI:
    """Wire the result store, inference chain and ingestion routes into one app."""
    ingestion_settings = resolve_ingestion_service_settings(settings)
    coordinator = build_fallback_coordinator(
        resolve_inference_adapter_settings(settings),
        environ=environ,
        transport=transport,
    )
    store = (
        result_store
        if result_store is not None
        else build_result_store_service(settings=settings)
    )
    shared_secret = settings.profile.ingest_shared_secret

    if shared_secret == "":
        _LOGGER.warning("No ingest shared secret configured; every request is refused")
    if not coordinator.endpoints:
        _LOGGER.warning("No inference endpoints configured; deltas record as error")

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        await coordinator.aclose()
        _LOGGER.info("collector HTTP runtime stopped")

    app = create_app(title="fleetwatch collector", lifespan=lifespan)
    health.register_routes(app, result_store=store)
    ingestion_api.register_routes(
        app,
        service=DefaultIngestionService(
            settings=ingestion_settings,
            analyzer=coordinator,
            result_store=store,
        ),
        settings=ingestion_settings,
        shared_secret=shared_secret,
    )
    result_store_api.register_routes(
        app, service=store, shared_secret=shared_secret
    )
    _LOGGER.info(
        "collector app built",
        extra={
            "endpoint_count": len(coordinator.endpoints),
            "ingest_path": ingestion_settings.ingest_path,
        },
    )
    return app


def run_collector(settings: FleetwatchSettings) -> None:
    """Serve the collector until uvicorn receives SIGINT or SIGTERM."""
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )
    ingestion_settings = resolve_ingestion_service_settings(settings)
    app = build_collector_app(settings)
    _LOGGER.info(
        "collector HTTP runtime starting",
        extra={
            "bind_host": ingestion_settings.bind_host,
            "bind_port": ingestion_settings.bind_port,
            "tls": ingestion_settings.tls_enabled,
        },
    )
    run_app(
        app,
        host=ingestion_settings.bind_host,
        port=ingestion_settings.bind_port,
        log_level=settings.logging.level.lower(),
        ssl_certfile=ingestion_settings.tls_certfile or None,
        ssl_keyfile=ingestion_settings.tls_keyfile or None,
    )


def main() -> None:
    """Load settings from the standard cascade and run the collector."""
    config_path = os.getenv("FLEETWATCH_CONFIG_FILE", "").strip()
    run_collector(load_settings(config_path=Path(config_path) if config_path else None))


if __name__ == "__main__":
    main()
