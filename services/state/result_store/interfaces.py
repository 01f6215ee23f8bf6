"""Transport-neutral protocol interfaces used by Result Store Service."""

from __future__ import annotations

from typing import Protocol

from services.state.result_store.domain import NewRecord, StoredRecord


class ResultRepository(Protocol):
    """Protocol for durable ingestion-result persistence operations."""

    def insert_record(self, *, record: NewRecord) -> StoredRecord:
        """Append one record and return it with store-assigned fields."""

    def list_by_hostname(self, *, hostname: str, limit: int) -> list[StoredRecord]:
        """Return the newest records for one source, newest first."""

    def list_non_ok(self, *, limit: int) -> list[StoredRecord]:
        """Return the newest records whose status is not ``ok``."""

    def status_counts(self) -> dict[str, int]:
        """Return record counts grouped by status."""

    def is_ready(self) -> bool:
        """Return whether the backing store answers queries."""
