"""Public shared HTTP API for fleetwatch packages."""

from .client import AsyncHttpClient, HttpClient
from .errors import (
    HttpClientError,
    HttpError,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpServerError,
    HttpStatusError,
    InvalidBodyError,
    InvalidJsonBodyError,
    PayloadTooLargeError,
)
from .server import (
    bearer_token_matches,
    create_app,
    decode_json_body,
    error_response,
    error_status,
    read_limited_body,
    run_app,
)

__all__ = [
    "AsyncHttpClient",
    "HttpClient",
    "HttpClientError",
    "HttpError",
    "HttpJsonDecodeError",
    "HttpRequestError",
    "HttpServerError",
    "HttpStatusError",
    "InvalidBodyError",
    "InvalidJsonBodyError",
    "PayloadTooLargeError",
    "bearer_token_matches",
    "create_app",
    "decode_json_body",
    "error_response",
    "error_status",
    "read_limited_body",
    "run_app",
]
