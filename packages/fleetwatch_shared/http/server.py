"""FastAPI and uvicorn helpers for raw inbound HTTP handling."""

from __future__ import annotations

import hmac
import json
from http import HTTPStatus
from typing import Any, Sequence

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from packages.fleetwatch_shared.errors import ErrorCategory, ErrorDetail

from .errors import InvalidBodyError, InvalidJsonBodyError, PayloadTooLargeError

_BEARER_PREFIX = "Bearer "


def create_app(
    *, title: str = "fleetwatch", version: str = "0.0.0", lifespan: Any = None
) -> FastAPI:
    """Create a FastAPI app with project defaults."""
    return FastAPI(title=title, version=version, lifespan=lifespan)


def run_app(
    app: FastAPI,
    *,
    host: str = "127.0.0.1",
    port: int = 8000,
    log_level: str = "info",
    ssl_certfile: str | None = None,
    ssl_keyfile: str | None = None,
) -> None:
    """Run one FastAPI app through uvicorn, over TLS when a cert pair is given."""
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=log_level,
        ssl_certfile=ssl_certfile,
        ssl_keyfile=ssl_keyfile,
    )


def bearer_token_matches(request: Request, secret: str) -> bool:
    """Return whether ``Authorization`` carries exactly ``Bearer <secret>``.

    The comparison is constant-time. An empty ``secret`` never matches.
    """
    if secret == "":
        return False
    header = request.headers.get("authorization", "")
    expected = f"{_BEARER_PREFIX}{secret}"
    return hmac.compare_digest(header.encode("utf-8"), expected.encode("utf-8"))


async def read_limited_body(request: Request, *, max_bytes: int) -> bytes:
    """Read the request body, refusing anything larger than ``max_bytes``.

    A declared ``Content-Length`` above the ceiling is refused before any
    body bytes are read; otherwise the stream is consumed until the ceiling
    is exceeded.
    """
    declared = request.headers.get("content-length")
    if declared is not None:
        try:
            declared_length = int(declared)
        except ValueError as exc:
            raise InvalidBodyError(message="Malformed Content-Length header") from exc
        if declared_length < 0:
            raise InvalidBodyError(message="Malformed Content-Length header")
        if declared_length > max_bytes:
            raise PayloadTooLargeError(
                message=f"Body exceeds {max_bytes} bytes",
                max_bytes=max_bytes,
            )

    received = bytearray()
    async for chunk in request.stream():
        received.extend(chunk)
        if len(received) > max_bytes:
            raise PayloadTooLargeError(
                message=f"Body exceeds {max_bytes} bytes",
                max_bytes=max_bytes,
            )
    return bytes(received)


def decode_json_body(body: bytes) -> Any:
    """Decode one UTF-8 request body as JSON."""
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidBodyError(message="Body is not valid UTF-8") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidJsonBodyError(message="Body is not valid JSON") from exc


def error_status(category: ErrorCategory) -> int:
    """Map a structured envelope error category to an HTTP status code."""
    if category == ErrorCategory.VALIDATION:
        return HTTPStatus.BAD_REQUEST
    if category == ErrorCategory.AUTHENTICATION:
        return HTTPStatus.UNAUTHORIZED
    if category == ErrorCategory.DEPENDENCY:
        return HTTPStatus.SERVICE_UNAVAILABLE
    return HTTPStatus.INTERNAL_SERVER_ERROR


def error_response(
    errors: Sequence[ErrorDetail], *, status_code: int | None = None
) -> JSONResponse:
    """Render envelope errors as one JSON response keyed off the first error."""
    status = status_code
    if status is None:
        status = error_status(errors[0].category) if errors else 500
    return JSONResponse(
        status_code=int(status),
        content={
            "ok": False,
            "errors": [
                {
                    "code": error.code,
                    "category": error.category.value,
                    "message": error.message,
                }
                for error in errors
            ],
        },
    )
