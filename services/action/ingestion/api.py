"""HTTP boundary for delta ingestion."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from packages.fleetwatch_shared.envelope import EnvelopeKind, new_meta
from packages.fleetwatch_shared.errors import (
    authentication_error,
    codes,
    validation_error,
)
from packages.fleetwatch_shared.http import (
    InvalidBodyError,
    PayloadTooLargeError,
    bearer_token_matches,
    decode_json_body,
    error_response,
    read_limited_body,
)
from services.action.ingestion.config import IngestionServiceSettings
from services.action.ingestion.domain import Delta
from services.action.ingestion.service import IngestionService

_SOURCE = "ingestion_http"


def register_routes(
    app: FastAPI,
    *,
    service: IngestionService,
    settings: IngestionServiceSettings,
    shared_secret: str,
) -> None:
    """Attach the authenticated ingest route to ``app``."""

    @app.post(settings.ingest_path)
    async def ingest(request: Request) -> JSONResponse:
        if not bearer_token_matches(request, shared_secret):
            return error_response([authentication_error()])

        try:
            body = await read_limited_body(
                request, max_bytes=settings.max_payload_bytes
            )
        except PayloadTooLargeError as exc:
            return error_response(
                [validation_error(str(exc), code=codes.PAYLOAD_TOO_LARGE)],
                status_code=413,
            )
        except InvalidBodyError as exc:
            return error_response([validation_error(str(exc))])

        try:
            delta = Delta.model_validate(decode_json_body(body))
        except InvalidBodyError as exc:
            return error_response([validation_error(str(exc))])
        except ValidationError as exc:
            return error_response(
                [validation_error(_first_validation_message(exc))]
            )

        result = await service.ingest(
            meta=new_meta(
                kind=EnvelopeKind.EVENT, source=_SOURCE, principal=delta.hostname
            ),
            delta=delta,
            is_disconnected=request.is_disconnected,
        )
        if not result.ok or result.payload is None:
            return error_response(result.errors)
        return JSONResponse(result.payload.value.response_body())


def _first_validation_message(exc: ValidationError) -> str:
    """Return one stable message describing the first invalid field."""
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = str(error.get("msg", "invalid payload"))
    return f"{location}: {message}" if location else message
