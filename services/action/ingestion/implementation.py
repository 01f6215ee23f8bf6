"""Concrete Ingestion Service implementation."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from time import perf_counter

from packages.fleetwatch_shared.envelope import (
    Envelope,
    EnvelopeMeta,
    failure,
    success,
    validate_meta,
)
from packages.fleetwatch_shared.errors import codes, internal_error, validation_error
from packages.fleetwatch_shared.logging import (
    fields,
    get_logger,
    log_context,
    public_api_instrumented,
)
from resources.adapters.inference import (
    Analyzer,
    CoordinatedAnalysis,
    InferenceError,
    is_unavailable,
)
from services.action.ingestion.component import SERVICE_COMPONENT_ID
from services.action.ingestion.config import IngestionServiceSettings
from services.action.ingestion.domain import (
    NO_LINES_REASON,
    SKIPPED_STATUS,
    Delta,
    IngestOutcome,
)
from services.action.ingestion.service import DisconnectProbe, IngestionService
from services.state.result_store import (
    Issue,
    NewRecord,
    RecordStatus,
    ResultStoreService,
    StoredRecord,
)

_LOGGER = get_logger(__name__)


class DefaultIngestionService(IngestionService):
    """Analyze deltas through one analyzer and record every outcome."""

    def __init__(
        self,
        *,
        settings: IngestionServiceSettings,
        analyzer: Analyzer,
        result_store: ResultStoreService,
    ) -> None:
        self._settings = settings
        self._analyzer = analyzer
        self._result_store = result_store

    @public_api_instrumented(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    async def ingest(
        self,
        *,
        meta: EnvelopeMeta,
        delta: Delta,
        is_disconnected: DisconnectProbe | None = None,
    ) -> Envelope[IngestOutcome]:
        """Analyze one delta and persist its outcome regardless of analysis."""
        try:
            validate_meta(meta)
        except ValueError as exc:
            return failure(
                meta=meta,
                errors=[validation_error(str(exc), code=codes.INVALID_ARGUMENT)],
            )

        if not delta.lines:
            return success(
                meta=meta,
                payload=IngestOutcome(
                    status=SKIPPED_STATUS, reason=NO_LINES_REASON, latency_ms=0
                ),
            )

        received_at = datetime.now(UTC)
        started = perf_counter()
        with log_context(
            {fields.HOSTNAME: delta.hostname, fields.LINE_COUNT: len(delta.lines)}
        ):
            try:
                record = await self._analyze(
                    delta=delta,
                    received_at=received_at,
                    is_disconnected=is_disconnected,
                )
            except asyncio.CancelledError:
                _LOGGER.warning("Ingestion cancelled; recording raw lines as error")
                await self._persist(
                    meta=meta,
                    record=_new_record(
                        delta, received_at, RecordStatus.ERROR, _elapsed_ms(started)
                    ),
                )
                raise

            stored = await self._persist(meta=meta, record=record)
            if not stored.ok or stored.payload is None:
                cause = stored.errors[0].code if stored.errors else codes.INTERNAL_ERROR
                return failure(
                    meta=meta,
                    errors=[
                        internal_error(
                            "failed to persist result", metadata={"cause": cause}
                        )
                    ],
                )

        return success(
            meta=meta,
            payload=IngestOutcome(
                status=record.status.value,
                latency_ms=record.latency_ms,
                record_id=stored.payload.value.id,
            ),
        )

    async def _persist(
        self, *, meta: EnvelopeMeta, record: NewRecord
    ) -> Envelope[StoredRecord]:
        """Write one record off the event loop, shielded from cancellation."""
        stored = await asyncio.shield(
            asyncio.to_thread(
                self._result_store.insert_record, meta=meta, record=record
            )
        )
        if not stored.ok or stored.payload is None:
            cause = stored.errors[0].code if stored.errors else codes.INTERNAL_ERROR
            _LOGGER.error("Failed to persist ingestion result: %s", cause)
        else:
            _LOGGER.info(
                "Recorded ingestion outcome",
                extra={
                    fields.STATUS: record.status.value,
                    fields.LATENCY_MS: record.latency_ms,
                },
            )
        return stored

    async def _analyze(
        self,
        *,
        delta: Delta,
        received_at: datetime,
        is_disconnected: DisconnectProbe | None,
    ) -> NewRecord:
        """Run analysis as a task and turn any outcome into a record."""
        started = perf_counter()
        task = asyncio.create_task(self._analyzer.analyze(delta.lines))
        try:
            while not task.done():
                await asyncio.wait({task}, timeout=self._settings.disconnect_poll_seconds)
                if task.done() or is_disconnected is None:
                    continue
                if await is_disconnected():
                    _LOGGER.warning("Caller disconnected; cancelling analysis")
                    task.cancel()
                    await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            await asyncio.wait({task})
            raise

        if task.cancelled():
            return _new_record(
                delta, received_at, RecordStatus.ERROR, _elapsed_ms(started)
            )

        exc = task.exception()
        if exc is None:
            analysis: CoordinatedAnalysis = task.result()
            return _new_record(
                delta,
                received_at,
                RecordStatus(analysis.result.status),
                analysis.latency_ms,
                tuple(
                    Issue(summary=issue.summary, evidence=issue.evidence)
                    for issue in analysis.result.issues
                ),
            )
        if is_unavailable(exc):
            _LOGGER.warning("Analysis unavailable; raw lines preserved: %s", exc)
            return _new_record(
                delta,
                received_at,
                RecordStatus.LLM_UNAVAILABLE,
                _latency_of(exc, started),
            )
        if isinstance(exc, InferenceError):
            _LOGGER.warning("Analysis failed: %s", exc)
        else:
            _LOGGER.error("Analysis raised unexpectedly", exc_info=exc)
        return _new_record(
            delta, received_at, RecordStatus.ERROR, _latency_of(exc, started)
        )


def _new_record(
    delta: Delta,
    received_at: datetime,
    status: RecordStatus,
    latency_ms: int,
    issues: tuple[Issue, ...] = (),
) -> NewRecord:
    return NewRecord(
        timestamp=received_at,
        hostname=delta.hostname,
        status=status,
        issues=issues,
        raw_text="\n".join(delta.lines),
        latency_ms=latency_ms,
        reported_at=delta.timestamp,
    )


def _latency_of(exc: BaseException, started: float) -> int:
    """Prefer the latency an inference error carries over wall time."""
    if isinstance(exc, InferenceError):
        return exc.latency_ms
    return _elapsed_ms(started)


def _elapsed_ms(started: float) -> int:
    return int((perf_counter() - started) * 1000)
