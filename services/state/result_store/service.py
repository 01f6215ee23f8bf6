"""Authoritative in-process Python API for Result Store Service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from packages.fleetwatch_shared.config import FleetwatchSettings
from packages.fleetwatch_shared.envelope import Envelope, EnvelopeMeta
from services.state.result_store.domain import HealthStatus, NewRecord, StoredRecord


class ResultStoreService(ABC):
    """Public API for durable ingestion-result records."""

    @abstractmethod
    def insert_record(
        self, *, meta: EnvelopeMeta, record: NewRecord
    ) -> Envelope[StoredRecord]:
        """Append one record; id and created_at are assigned by the store."""

    @abstractmethod
    def list_by_hostname(
        self, *, meta: EnvelopeMeta, hostname: str, limit: int | None = None
    ) -> Envelope[list[StoredRecord]]:
        """Return the newest records for one source, newest first."""

    @abstractmethod
    def list_non_ok(
        self, *, meta: EnvelopeMeta, limit: int | None = None
    ) -> Envelope[list[StoredRecord]]:
        """Return the newest records whose status is not ``ok``."""

    @abstractmethod
    def status_counts(self, *, meta: EnvelopeMeta) -> Envelope[dict[str, int]]:
        """Return record counts grouped by status."""

    @abstractmethod
    def health(self, *, meta: EnvelopeMeta) -> Envelope[HealthStatus]:
        """Return store and owned substrate readiness."""


def build_result_store_service(*, settings: FleetwatchSettings) -> ResultStoreService:
    """Build the default Result Store implementation from typed settings."""
    from services.state.result_store.implementation import DefaultResultStoreService

    return DefaultResultStoreService.from_settings(settings)
