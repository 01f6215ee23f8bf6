"""Domain contracts for Result Store Service payloads."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RecordStatus(str, Enum):
    """Outcome recorded for one ingested delta."""

    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"
    LLM_UNAVAILABLE = "llm_unavailable"
    ERROR = "error"


class Issue(BaseModel):
    """One finding reported by the analysis backend."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    summary: str
    evidence: str = ""


class NewRecord(BaseModel):
    """Record contents supplied by the caller; identity is store-assigned."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    timestamp: datetime
    hostname: str = Field(min_length=1)
    status: RecordStatus
    issues: tuple[Issue, ...] = ()
    raw_text: str
    latency_ms: int = Field(ge=0)
    reported_at: datetime | None = None


class StoredRecord(BaseModel):
    """One persisted ingestion outcome."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int
    timestamp: datetime
    hostname: str
    status: RecordStatus
    issues: tuple[Issue, ...]
    raw_text: str
    latency_ms: int
    reported_at: datetime | None
    created_at: datetime


class HealthStatus(BaseModel):
    """Result store and owned substrate readiness."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    substrate_ready: bool
    detail: str
