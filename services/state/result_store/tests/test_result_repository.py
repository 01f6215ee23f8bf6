"""Integration tests for the SQLite result repository."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from resources.substrates.sqlite import SqliteSettings
from services.state.result_store.data import (
    ResultSqliteRuntime,
    SqliteResultRepository,
)
from services.state.result_store.domain import Issue, NewRecord, RecordStatus

_BASE = datetime(2025, 3, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture()
def repository(tmp_path):
    runtime = ResultSqliteRuntime.from_sqlite_settings(
        SqliteSettings(path=str(tmp_path / "results.db"))
    )
    yield SqliteResultRepository.from_runtime(runtime)
    runtime.dispose()


def _record(
    *,
    hostname: str = "web-1",
    status: RecordStatus = RecordStatus.OK,
    offset_seconds: int = 0,
    issues: tuple[Issue, ...] = (),
) -> NewRecord:
    return NewRecord(
        timestamp=_BASE + timedelta(seconds=offset_seconds),
        hostname=hostname,
        status=status,
        issues=issues,
        raw_text="line one\nline two",
        latency_ms=42,
    )


def test_insert_assigns_identity_and_round_trips_fields(repository) -> None:
    """Inserted rows should come back with id, created_at and all fields."""
    reported = datetime(2025, 3, 1, 7, 0, 0, tzinfo=timezone(timedelta(hours=-5)))
    stored = repository.insert_record(
        record=NewRecord(
            timestamp=_BASE,
            hostname="db-2",
            status=RecordStatus.CRITICAL,
            issues=(Issue(summary="ECC error", evidence="EDAC MC0: 1 CE"),),
            raw_text="EDAC MC0: 1 CE",
            latency_ms=1200,
            reported_at=reported,
        )
    )

    assert stored.id >= 1
    assert stored.created_at.tzinfo is not None
    assert stored.timestamp == _BASE
    assert stored.reported_at == reported.astimezone(UTC)
    assert stored.status == RecordStatus.CRITICAL
    assert stored.issues == (Issue(summary="ECC error", evidence="EDAC MC0: 1 CE"),)
    assert stored.latency_ms == 1200

    [fetched] = repository.list_by_hostname(hostname="db-2", limit=10)
    assert fetched == stored


def test_list_by_hostname_is_newest_first_and_limited(repository) -> None:
    """Host lookups should order by timestamp descending and respect limit."""
    for offset in (0, 30, 10):
        repository.insert_record(record=_record(offset_seconds=offset))
    repository.insert_record(record=_record(hostname="other", offset_seconds=99))

    rows = repository.list_by_hostname(hostname="web-1", limit=2)

    assert [row.timestamp for row in rows] == [
        _BASE + timedelta(seconds=30),
        _BASE + timedelta(seconds=10),
    ]
    assert all(row.hostname == "web-1" for row in rows)


def test_equal_timestamps_order_by_id_descending(repository) -> None:
    """Records sharing a timestamp should list the later insert first."""
    first = repository.insert_record(record=_record())
    second = repository.insert_record(record=_record())

    rows = repository.list_by_hostname(hostname="web-1", limit=5)

    assert [row.id for row in rows] == [second.id, first.id]


def test_list_non_ok_excludes_ok_rows(repository) -> None:
    """Non-ok lookups should include every status except ok."""
    repository.insert_record(record=_record(status=RecordStatus.OK))
    repository.insert_record(
        record=_record(status=RecordStatus.LLM_UNAVAILABLE, offset_seconds=1)
    )
    repository.insert_record(record=_record(status=RecordStatus.WARNING, offset_seconds=2))

    rows = repository.list_non_ok(limit=10)

    assert [row.status for row in rows] == [
        RecordStatus.WARNING,
        RecordStatus.LLM_UNAVAILABLE,
    ]


def test_status_counts_groups_by_status(repository) -> None:
    """Status counts should tally every stored row by status."""
    assert repository.status_counts() == {}
    for status in (RecordStatus.OK, RecordStatus.OK, RecordStatus.ERROR):
        repository.insert_record(record=_record(status=status))

    assert repository.status_counts() == {"ok": 2, "error": 1}


def test_repository_reports_ready(repository) -> None:
    """A freshly opened database should report ready."""
    assert repository.is_ready() is True


def test_concurrent_inserts_get_unique_ids(repository) -> None:
    """Writers on several threads should each get one distinct row."""
    hosts = [f"host-{index % 4}" for index in range(200)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        stored = list(
            pool.map(
                lambda host: repository.insert_record(record=_record(hostname=host)),
                hosts,
            )
        )

    assert len({row.id for row in stored}) == 200
    assert sum(repository.status_counts().values()) == 200
    assert len(repository.list_by_hostname(hostname="host-0", limit=100)) == 50


def test_deleted_ids_are_not_reused(tmp_path) -> None:
    """Ids should keep increasing after the newest row is removed."""
    runtime = ResultSqliteRuntime.from_sqlite_settings(
        SqliteSettings(path=str(tmp_path / "results.db"))
    )
    repository = SqliteResultRepository.from_runtime(runtime)
    try:
        repository.insert_record(record=_record())
        newest = repository.insert_record(record=_record(offset_seconds=1))
        with runtime.engine.begin() as conn:
            conn.execute(text("DELETE FROM results WHERE id = :id"), {"id": newest.id})

        replacement = repository.insert_record(record=_record(offset_seconds=2))

        assert replacement.id > newest.id
    finally:
        runtime.dispose()


def test_memory_database_is_shared_with_worker_threads() -> None:
    """An in-memory store should accept writes from threads other than its creator."""
    runtime = ResultSqliteRuntime.from_sqlite_settings(SqliteSettings(path=":memory:"))
    repository = SqliteResultRepository.from_runtime(runtime)
    try:
        with ThreadPoolExecutor(max_workers=1) as pool:
            stored = pool.submit(
                repository.insert_record, record=_record(hostname="mem-1")
            ).result()

        rows = repository.list_by_hostname(hostname="mem-1", limit=5)
        assert [row.id for row in rows] == [stored.id]
    finally:
        runtime.dispose()
