"""OpenAI-compatible chat completions provider for one analysis attempt."""

from __future__ import annotations

import json
from time import perf_counter
from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from packages.fleetwatch_shared.http import AsyncHttpClient, HttpRequestError
from resources.adapters.inference.adapter import (
    AnalysisProvider,
    AnalysisResult,
    AttemptResult,
    Endpoint,
    InferenceTerminalError,
    InferenceUnavailableError,
)
from resources.adapters.inference.prompt import SYSTEM_PROMPT

_UNAVAILABLE_STATUS_CODES = frozenset({502, 503, 504})
_UNAVAILABLE_TRANSPORT_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    httpx.ProxyError,
)
_BODY_EXCERPT_CHARS = 512


class ChatCompletionsProvider(AnalysisProvider):
    """Run one analysis against one endpoint and classify its failure.

    Holds no per-call state; one instance and its client are shared by all
    concurrent requests.
    """

    def __init__(
        self,
        *,
        client: AsyncHttpClient,
        max_tokens: int = 1024,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._max_tokens = max_tokens
        self._system_prompt = system_prompt

    async def aclose(self) -> None:
        """Release the underlying HTTP client."""
        await self._client.aclose()

    async def attempt(self, endpoint: Endpoint, lines: Sequence[str]) -> AttemptResult:
        """POST one chat completion request and decode the analysis verdict."""
        url = endpoint.url.rstrip("/") + "/chat/completions"
        headers = {"Content-Type": "application/json"}
        if endpoint.credential:
            headers["Authorization"] = f"Bearer {endpoint.credential}"
        body = {
            "model": endpoint.model,
            "messages": [
                {"role": "system", "content": self._system_prompt},
                {"role": "user", "content": "\n".join(lines)},
            ],
            "max_tokens": self._max_tokens,
        }

        started = perf_counter()
        try:
            response = await self._client.post(
                url, json=body, headers=headers, raise_for_status=False
            )
        except HttpRequestError as exc:
            latency_ms = _elapsed_ms(started)
            if isinstance(exc.cause, _UNAVAILABLE_TRANSPORT_ERRORS):
                raise InferenceUnavailableError(
                    f"connection to {endpoint.model} failed: {exc.cause!r}",
                    latency_ms=latency_ms,
                ) from exc
            raise InferenceTerminalError(
                f"request to {endpoint.model} failed: {exc.cause!r}",
                latency_ms=latency_ms,
            ) from exc
        latency_ms = _elapsed_ms(started)

        status_code = response.status_code
        if status_code in _UNAVAILABLE_STATUS_CODES:
            raise InferenceUnavailableError(
                f"HTTP {status_code} from {endpoint.model}",
                latency_ms=latency_ms,
                status_code=status_code,
            )
        if not response.is_success:
            raise InferenceTerminalError(
                f"HTTP {status_code} from {endpoint.model}: "
                f"{response.text[:_BODY_EXCERPT_CHARS]}",
                latency_ms=latency_ms,
                status_code=status_code,
            )

        result = _decode_analysis(response, endpoint=endpoint, latency_ms=latency_ms)
        return AttemptResult(result=result, latency_ms=latency_ms)


def _decode_analysis(
    response: httpx.Response, *, endpoint: Endpoint, latency_ms: int
) -> AnalysisResult:
    """Extract and validate the verdict from a chat completions envelope."""

    def terminal(message: str) -> InferenceTerminalError:
        return InferenceTerminalError(
            f"{message} from {endpoint.model}",
            latency_ms=latency_ms,
            status_code=response.status_code,
        )

    try:
        payload: Any = response.json()
    except ValueError as exc:
        raise terminal("invalid JSON response") from exc

    choices = payload.get("choices") if isinstance(payload, dict) else None
    if not isinstance(choices, list) or len(choices) == 0:
        raise terminal("empty choices")

    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise terminal("missing message content")

    try:
        return AnalysisResult.model_validate(json.loads(content))
    except (ValueError, ValidationError) as exc:
        raise terminal("undecodable analysis content") from exc


def _elapsed_ms(started: float) -> int:
    """Return whole milliseconds elapsed since ``started``."""
    return int((perf_counter() - started) * 1000)
