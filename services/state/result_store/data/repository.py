"""SQLite repository for Result Store Service state."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Mapping

from sqlalchemy import func, insert, select
from sqlalchemy.orm import Session, sessionmaker

from resources.substrates.sqlite import transactional_session
from services.state.result_store.domain import (
    Issue,
    NewRecord,
    RecordStatus,
    StoredRecord,
)
from services.state.result_store.interfaces import ResultRepository

from .runtime import ResultSqliteRuntime
from .schema import results

_NEWEST_FIRST = (results.c.timestamp.desc(), results.c.id.desc())


class SqliteResultRepository(ResultRepository):
    """SQL repository over the ``results`` table."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        runtime: ResultSqliteRuntime | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._runtime = runtime

    @classmethod
    def from_runtime(cls, runtime: ResultSqliteRuntime) -> "SqliteResultRepository":
        return cls(runtime.session_factory, runtime=runtime)

    def insert_record(self, *, record: NewRecord) -> StoredRecord:
        """Append one row and read it back with assigned id and created_at."""
        with transactional_session(self._session_factory) as session:
            result = session.execute(
                insert(results).values(
                    timestamp=_to_utc(record.timestamp),
                    hostname=record.hostname,
                    status=record.status.value,
                    issues=[issue.model_dump(mode="json") for issue in record.issues],
                    raw_text=record.raw_text,
                    latency_ms=record.latency_ms,
                    reported_at=(
                        None
                        if record.reported_at is None
                        else _to_utc(record.reported_at)
                    ),
                    created_at=datetime.now(UTC),
                )
            )
            record_id = result.inserted_primary_key[0]
            row = (
                session.execute(select(results).where(results.c.id == record_id))
                .mappings()
                .one()
            )
            return _to_record(row)

    def list_by_hostname(self, *, hostname: str, limit: int) -> list[StoredRecord]:
        """Read the newest rows for one hostname."""
        with transactional_session(self._session_factory) as session:
            rows = (
                session.execute(
                    select(results)
                    .where(results.c.hostname == hostname)
                    .order_by(*_NEWEST_FIRST)
                    .limit(limit)
                )
                .mappings()
                .all()
            )
            return [_to_record(row) for row in rows]

    def list_non_ok(self, *, limit: int) -> list[StoredRecord]:
        """Read the newest rows with any status other than ``ok``."""
        with transactional_session(self._session_factory) as session:
            rows = (
                session.execute(
                    select(results)
                    .where(results.c.status != RecordStatus.OK.value)
                    .order_by(*_NEWEST_FIRST)
                    .limit(limit)
                )
                .mappings()
                .all()
            )
            return [_to_record(row) for row in rows]

    def status_counts(self) -> dict[str, int]:
        """Count rows per status."""
        with transactional_session(self._session_factory) as session:
            rows = session.execute(
                select(results.c.status, func.count()).group_by(results.c.status)
            ).all()
            return {str(status): int(count) for status, count in rows}

    def is_ready(self) -> bool:
        if self._runtime is not None:
            return self._runtime.is_healthy()
        with transactional_session(self._session_factory) as session:
            session.execute(select(func.count()).select_from(results)).scalar_one()
        return True


def _to_record(row: Mapping[str, Any]) -> StoredRecord:
    """Map one SQL row to a strict domain record."""
    reported_at = row["reported_at"]
    return StoredRecord(
        id=int(row["id"]),
        timestamp=_row_dt(row, "timestamp"),
        hostname=str(row["hostname"]),
        status=RecordStatus(str(row["status"])),
        issues=tuple(Issue.model_validate(item) for item in row["issues"] or ()),
        raw_text=str(row["raw_text"]),
        latency_ms=int(row["latency_ms"]),
        reported_at=None if reported_at is None else _row_dt(row, "reported_at"),
        created_at=_row_dt(row, "created_at"),
    )


def _to_utc(value: datetime) -> datetime:
    """Normalize naive/aware datetimes to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _row_dt(row: Mapping[str, Any], column: str) -> datetime:
    """Read one datetime column; SQLite hands back naive UTC values."""
    value = row.get(column)
    if not isinstance(value, datetime):
        raise ValueError(f"expected datetime column for {column}")
    return _to_utc(value)
