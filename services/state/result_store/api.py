"""Authenticated read-only HTTP routes over Result Store Service."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from packages.fleetwatch_shared.envelope import EnvelopeKind, EnvelopeMeta, new_meta
from packages.fleetwatch_shared.errors import authentication_error
from packages.fleetwatch_shared.http import bearer_token_matches, error_response
from services.state.result_store.domain import StoredRecord
from services.state.result_store.service import ResultStoreService

_SOURCE = "result_store_http"


def register_routes(
    app: FastAPI,
    *,
    service: ResultStoreService,
    shared_secret: str,
    prefix: str = "/results",
) -> None:
    """Attach host lookup, non-ok lookup and status count routes to ``app``."""
    router = APIRouter(prefix=prefix)

    @router.get("/hosts/{hostname}")
    def list_by_hostname(
        hostname: str, request: Request, limit: int | None = Query(default=None)
    ) -> JSONResponse:
        if not bearer_token_matches(request, shared_secret):
            return error_response([authentication_error()])
        result = service.list_by_hostname(
            meta=_meta(), hostname=hostname, limit=limit
        )
        if not result.ok or result.payload is None:
            return error_response(result.errors)
        return JSONResponse({"ok": True, "records": _records(result.payload.value)})

    @router.get("/non-ok")
    def list_non_ok(
        request: Request, limit: int | None = Query(default=None)
    ) -> JSONResponse:
        if not bearer_token_matches(request, shared_secret):
            return error_response([authentication_error()])
        result = service.list_non_ok(meta=_meta(), limit=limit)
        if not result.ok or result.payload is None:
            return error_response(result.errors)
        return JSONResponse({"ok": True, "records": _records(result.payload.value)})

    @router.get("/status-counts")
    def status_counts(request: Request) -> JSONResponse:
        if not bearer_token_matches(request, shared_secret):
            return error_response([authentication_error()])
        result = service.status_counts(meta=_meta())
        if not result.ok or result.payload is None:
            return error_response(result.errors)
        return JSONResponse({"ok": True, "counts": result.payload.value})

    app.include_router(router)


def _meta() -> EnvelopeMeta:
    return new_meta(kind=EnvelopeKind.COMMAND, source=_SOURCE, principal="operator")


def _records(records: list[StoredRecord]) -> list[dict[str, Any]]:
    return [record.model_dump(mode="json") for record in records]
