"""Concrete Result Store Service implementation."""

from __future__ import annotations

from typing import Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from packages.fleetwatch_shared.config import FleetwatchSettings
from packages.fleetwatch_shared.envelope import (
    Envelope,
    EnvelopeMeta,
    failure,
    success,
    validate_meta,
)
from packages.fleetwatch_shared.errors import (
    ErrorDetail,
    codes,
    internal_error,
    validation_error,
)
from packages.fleetwatch_shared.logging import get_logger, public_api_instrumented
from resources.substrates.sqlite import normalize_sqlite_error
from services.state.result_store.component import SERVICE_COMPONENT_ID
from services.state.result_store.config import (
    ResultStoreSettings,
    resolve_result_store_settings,
)
from services.state.result_store.data import (
    ResultSqliteRuntime,
    SqliteResultRepository,
)
from services.state.result_store.domain import HealthStatus, NewRecord, StoredRecord
from services.state.result_store.interfaces import ResultRepository
from services.state.result_store.service import ResultStoreService

_LOGGER = get_logger(__name__)

T = TypeVar("T")


class DefaultResultStoreService(ResultStoreService):
    """Default Result Store implementation over one repository."""

    def __init__(
        self,
        *,
        settings: ResultStoreSettings,
        repository: ResultRepository,
    ) -> None:
        self._settings = settings
        self._repository = repository

    @classmethod
    def from_settings(cls, settings: FleetwatchSettings) -> "DefaultResultStoreService":
        """Build the service from typed settings and its owned SQLite runtime."""
        runtime = ResultSqliteRuntime.from_settings(settings)
        return cls(
            settings=resolve_result_store_settings(settings),
            repository=SqliteResultRepository.from_runtime(runtime),
        )

    @public_api_instrumented(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def insert_record(
        self, *, meta: EnvelopeMeta, record: NewRecord
    ) -> Envelope[StoredRecord]:
        """Append one record."""
        errors = _meta_errors(meta)
        if errors:
            return failure(meta=meta, errors=errors)
        return self._call(
            meta=meta,
            operation="insert_record",
            func=lambda: self._repository.insert_record(record=record),
        )

    @public_api_instrumented(
        logger=_LOGGER, component_id=SERVICE_COMPONENT_ID, id_fields=("hostname",)
    )
    def list_by_hostname(
        self, *, meta: EnvelopeMeta, hostname: str, limit: int | None = None
    ) -> Envelope[list[StoredRecord]]:
        """Return the newest records for one hostname."""
        errors = _meta_errors(meta)
        if not errors and hostname.strip() == "":
            errors = [
                validation_error("hostname is required", code=codes.INVALID_ARGUMENT)
            ]
        resolved_limit, limit_errors = self._resolve_limit(limit)
        errors.extend(limit_errors)
        if errors:
            return failure(meta=meta, errors=errors)
        return self._call(
            meta=meta,
            operation="list_by_hostname",
            func=lambda: self._repository.list_by_hostname(
                hostname=hostname, limit=resolved_limit
            ),
        )

    @public_api_instrumented(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def list_non_ok(
        self, *, meta: EnvelopeMeta, limit: int | None = None
    ) -> Envelope[list[StoredRecord]]:
        """Return the newest non-ok records."""
        errors = _meta_errors(meta)
        resolved_limit, limit_errors = self._resolve_limit(limit)
        errors.extend(limit_errors)
        if errors:
            return failure(meta=meta, errors=errors)
        return self._call(
            meta=meta,
            operation="list_non_ok",
            func=lambda: self._repository.list_non_ok(limit=resolved_limit),
        )

    @public_api_instrumented(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def status_counts(self, *, meta: EnvelopeMeta) -> Envelope[dict[str, int]]:
        """Return record counts grouped by status."""
        errors = _meta_errors(meta)
        if errors:
            return failure(meta=meta, errors=errors)
        return self._call(
            meta=meta,
            operation="status_counts",
            func=self._repository.status_counts,
        )

    @public_api_instrumented(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def health(self, *, meta: EnvelopeMeta) -> Envelope[HealthStatus]:
        """Return readiness based on repository availability."""
        errors = _meta_errors(meta)
        if errors:
            return failure(meta=meta, errors=errors)
        try:
            ready = self._repository.is_ready()
        except SQLAlchemyError as exc:
            _LOGGER.warning("Result store health probe failed", exc_info=exc)
            ready = False
        return success(
            meta=meta,
            payload=HealthStatus(
                service_ready=True,
                substrate_ready=ready,
                detail="ok" if ready else "sqlite unavailable",
            ),
        )

    def _resolve_limit(self, limit: int | None) -> tuple[int, list[ErrorDetail]]:
        """Apply the default and cap; reject non-positive limits."""
        if limit is None:
            return self._settings.default_list_limit, []
        if limit < 1:
            return 0, [
                validation_error("limit must be >= 1", code=codes.INVALID_ARGUMENT)
            ]
        return min(limit, self._settings.max_list_limit), []

    def _call(
        self, *, meta: EnvelopeMeta, operation: str, func: Callable[[], T]
    ) -> Envelope[T]:
        """Run one repository call and normalize failures into the envelope."""
        try:
            return success(meta=meta, payload=func())
        except SQLAlchemyError as exc:
            _LOGGER.error("Result store %s failed", operation, exc_info=exc)
            return failure(meta=meta, errors=[normalize_sqlite_error(exc)])
        except Exception as exc:  # noqa: BLE001
            _LOGGER.exception("Result store %s failed unexpectedly", operation)
            return failure(
                meta=meta,
                errors=[
                    internal_error(
                        f"{operation} failed",
                        code=codes.UNEXPECTED_EXCEPTION,
                        metadata={"exception_type": type(exc).__name__},
                    )
                ],
            )


def _meta_errors(meta: EnvelopeMeta) -> list[ErrorDetail]:
    """Return validation errors for malformed envelope metadata."""
    try:
        validate_meta(meta)
    except ValueError as exc:
        return [validation_error(str(exc), code=codes.INVALID_ARGUMENT)]
    return []
