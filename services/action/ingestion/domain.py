"""Domain contracts for Ingestion Service payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

SKIPPED_STATUS = "skipped"
NO_LINES_REASON = "no lines"


class Delta(BaseModel):
    """One batch of new log lines reported by a source host."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    hostname: str = Field(min_length=1)
    timestamp: datetime | None = None
    lines: tuple[str, ...] = ()


class IngestOutcome(BaseModel):
    """Result of ingesting one delta, as acknowledged to the caller."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: str
    latency_ms: int = Field(ge=0)
    reason: str | None = None
    record_id: int | None = None

    def response_body(self) -> dict[str, object]:
        """Return the JSON body sent back to the caller."""
        body: dict[str, object] = {"status": self.status}
        if self.reason is not None:
            body["reason"] = self.reason
        body["latency_ms"] = self.latency_ms
        return body
