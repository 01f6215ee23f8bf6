"""Transport-agnostic inference adapter contract, DTOs and errors."""

from __future__ import annotations

from typing import Literal, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InferenceError(Exception):
    """Base exception for inference failures.

    ``latency_ms`` is the time spent before the failure was observed; the
    coordinator replaces it with the total across every attempt it made.
    """

    def __init__(self, message: str, *, latency_ms: int = 0) -> None:
        super().__init__(message)
        self.latency_ms = latency_ms


class InferenceUnavailableError(InferenceError):
    """One endpoint could not be reached or reported itself unavailable."""

    def __init__(
        self, message: str, *, latency_ms: int = 0, status_code: int | None = None
    ) -> None:
        super().__init__(message, latency_ms=latency_ms)
        self.status_code = status_code


class InferenceTerminalError(InferenceError):
    """One endpoint answered, but not with a usable analysis."""

    def __init__(
        self, message: str, *, latency_ms: int = 0, status_code: int | None = None
    ) -> None:
        super().__init__(message, latency_ms=latency_ms)
        self.status_code = status_code


class AllEndpointsUnavailableError(InferenceError):
    """Every configured endpoint was unavailable."""

    def __init__(self, last_error: InferenceError, *, latency_ms: int) -> None:
        super().__init__(
            f"all inference endpoints unavailable: {last_error}",
            latency_ms=latency_ms,
        )
        self.last_error = last_error


class InferenceConfigurationError(InferenceError):
    """The adapter cannot run as configured, for example with no endpoints."""


def is_unavailable(exc: BaseException) -> bool:
    """Return whether ``exc`` means the whole endpoint chain was unavailable."""
    return isinstance(exc, AllEndpointsUnavailableError)


class Endpoint(BaseModel):
    """One OpenAI-compatible chat completions endpoint."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = Field(min_length=1)
    model: str = Field(min_length=1)
    credential: str = Field(default="", repr=False)


class Issue(BaseModel):
    """One anomaly reported by the analysis backend."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    summary: str
    evidence: str = ""


class AnalysisResult(BaseModel):
    """Structured verdict decoded from the backend's message content."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    status: Literal["ok", "warning", "critical"]
    issues: tuple[Issue, ...] = ()

    @field_validator("issues", mode="before")
    @classmethod
    def _null_issues(cls, value: object) -> object:
        return () if value is None else value


class AttemptResult(BaseModel):
    """Outcome of one successful endpoint attempt."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    result: AnalysisResult
    latency_ms: int = Field(ge=0)


class CoordinatedAnalysis(BaseModel):
    """Outcome of one successful coordinated analysis."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    result: AnalysisResult
    latency_ms: int = Field(ge=0)
    endpoint_index: int = Field(ge=0)
    model: str


class AnalysisProvider(Protocol):
    """Protocol for one analysis attempt against one endpoint."""

    async def attempt(self, endpoint: Endpoint, lines: Sequence[str]) -> AttemptResult:
        """Run one analysis or raise an ``InferenceError`` subclass."""


class Analyzer(Protocol):
    """Protocol for a component producing one analysis for a batch of lines."""

    async def analyze(self, lines: Sequence[str]) -> CoordinatedAnalysis:
        """Return one analysis or raise an ``InferenceError`` subclass."""
