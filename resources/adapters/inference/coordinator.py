"""Ordered fallback across interchangeable analysis endpoints."""

from __future__ import annotations

from typing import Sequence

from packages.fleetwatch_shared.logging import fields, get_logger, log_context
from resources.adapters.inference.adapter import (
    AllEndpointsUnavailableError,
    AnalysisProvider,
    Analyzer,
    CoordinatedAnalysis,
    Endpoint,
    InferenceConfigurationError,
    InferenceError,
    InferenceUnavailableError,
)

_LOGGER = get_logger(__name__)


class FallbackCoordinator(Analyzer):
    """Try endpoints strictly in order until one produces an analysis.

    Unavailable endpoints fall through to the next one; any other failure
    ends the call. Every call starts again at the first endpoint and no
    health state is remembered between calls.
    """

    def __init__(
        self, *, endpoints: Sequence[Endpoint], provider: AnalysisProvider
    ) -> None:
        self._endpoints: tuple[Endpoint, ...] = tuple(endpoints)
        self._provider = provider

    @property
    def endpoints(self) -> tuple[Endpoint, ...]:
        return self._endpoints

    async def aclose(self) -> None:
        """Release provider resources when the provider owns any."""
        close = getattr(self._provider, "aclose", None)
        if close is not None:
            await close()

    async def analyze(self, lines: Sequence[str]) -> CoordinatedAnalysis:
        """Return the first successful analysis along the endpoint chain.

        Raises ``InferenceConfigurationError`` when no endpoints exist,
        ``AllEndpointsUnavailableError`` when every endpoint is unavailable,
        and re-raises the first non-availability failure as is. Raised
        errors carry the latency summed over every attempt.
        """
        total_ms = 0
        last_error: InferenceError | None = None
        for index, endpoint in enumerate(self._endpoints):
            try:
                attempt = await self._provider.attempt(endpoint, lines)
            except InferenceUnavailableError as exc:
                total_ms += exc.latency_ms
                last_error = exc
                with log_context(
                    {fields.ENDPOINT_INDEX: index, fields.MODEL: endpoint.model}
                ):
                    _LOGGER.warning("Inference endpoint unavailable: %s", exc)
                continue
            except InferenceError as exc:
                total_ms += exc.latency_ms
                exc.latency_ms = total_ms
                raise

            total_ms += attempt.latency_ms
            if index > 0:
                with log_context(
                    {fields.ENDPOINT_INDEX: index, fields.MODEL: endpoint.model}
                ):
                    _LOGGER.warning(
                        "Inference recovered on fallback endpoint after %d failures",
                        index,
                    )
            return CoordinatedAnalysis(
                result=attempt.result,
                latency_ms=total_ms,
                endpoint_index=index,
                model=endpoint.model,
            )

        if last_error is None:
            raise InferenceConfigurationError("no inference endpoints configured")
        raise AllEndpointsUnavailableError(
            last_error, latency_ms=total_ms
        ) from last_error
