"""Collector liveness and store readiness route."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from packages.fleetwatch_shared.envelope import EnvelopeKind, new_meta
from services.state.result_store import ResultStoreService


def store_ready(result_store: ResultStoreService) -> bool:
    """Return whether the result store reports its database reachable."""
    result = result_store.health(
        meta=new_meta(kind=EnvelopeKind.COMMAND, source="core_health", principal="system")
    )
    return bool(
        result.ok and result.payload is not None and result.payload.value.substrate_ready
    )


def register_routes(app: FastAPI, *, result_store: ResultStoreService) -> None:
    """Attach unauthenticated ``GET /health`` to ``app``."""

    @app.get("/health")
    def health() -> JSONResponse:
        return JSONResponse({"ok": True, "store_ready": store_ready(result_store)})
