"""Authoritative in-process Python API for Ingestion Service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from packages.fleetwatch_shared.envelope import Envelope, EnvelopeMeta
from services.action.ingestion.domain import Delta, IngestOutcome

DisconnectProbe = Callable[[], Awaitable[bool]]


class IngestionService(ABC):
    """Public API for analyzing and recording one delta."""

    @abstractmethod
    async def ingest(
        self,
        *,
        meta: EnvelopeMeta,
        delta: Delta,
        is_disconnected: DisconnectProbe | None = None,
    ) -> Envelope[IngestOutcome]:
        """Analyze one delta and record the outcome exactly once.

        Empty deltas are acknowledged without analysis or a record.
        ``is_disconnected`` is polled while analysis runs; once it reports
        True the analysis is cancelled and recorded as an error.
        """
