"""Tests for envelope builders and metadata validation."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from packages.fleetwatch_shared.envelope import (
    Envelope,
    EnvelopeKind,
    EnvelopeMeta,
    failure,
    new_meta,
    success,
    validate_meta,
)
from packages.fleetwatch_shared.errors import ErrorCategory, ErrorDetail


def _meta() -> EnvelopeMeta:
    """Return deterministic metadata for envelope tests."""
    return new_meta(
        kind=EnvelopeKind.RESULT,
        source="service_result_store",
        principal="operator",
        timestamp=datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC),
        envelope_id="env-1",
        trace_id="trace-1",
    )


def _error(code: str = "INVALID_ARGUMENT") -> ErrorDetail:
    return ErrorDetail(
        code=code,
        message="Invalid input",
        category=ErrorCategory.VALIDATION,
        retryable=False,
    )


def test_success_builder_returns_ok_envelope_with_payload() -> None:
    """success should build an ok envelope with payload and no errors."""
    envelope = success(meta=_meta(), payload={"hostname": "web-1"})

    assert envelope.ok is True
    assert envelope.has_payload is True
    assert envelope.payload is not None
    assert envelope.payload.value == {"hostname": "web-1"}
    assert envelope.errors == []


def test_failure_builder_returns_non_ok_envelope_with_errors() -> None:
    """failure should carry its errors and omit the payload by default."""
    envelope = failure(meta=_meta(), errors=[_error("DEPENDENCY_UNAVAILABLE")])

    assert envelope.ok is False
    assert envelope.has_payload is False
    assert [item.code for item in envelope.errors] == ["DEPENDENCY_UNAVAILABLE"]


def test_envelope_model_validation_rejects_invalid_error_shape() -> None:
    """Envelope model validation should fail for malformed error entries."""
    with pytest.raises(ValidationError):
        Envelope[int].model_validate(
            {
                "metadata": _meta(),
                "payload": {"value": 1},
                "errors": [{"code": "BAD"}],
            }
        )


def test_new_meta_generates_ids_and_normalizes_timestamps() -> None:
    """new_meta should create ids and normalize naive and aware times to UTC."""
    naive = new_meta(
        kind=EnvelopeKind.EVENT,
        source="ingestion_http",
        principal="web-1",
        timestamp=datetime(2026, 1, 1, 12, 0, 0),
    )
    aware = new_meta(
        kind=EnvelopeKind.EVENT,
        source="ingestion_http",
        principal="web-1",
        timestamp=datetime(2026, 1, 1, 7, 0, 0, tzinfo=timezone(timedelta(hours=-5))),
    )

    assert naive.envelope_id and naive.trace_id
    assert naive.envelope_id != aware.envelope_id
    assert naive.timestamp == datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)
    assert aware.timestamp == datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


def test_validate_meta_accepts_complete_metadata() -> None:
    """Complete metadata should validate silently."""
    validate_meta(_meta())


@pytest.mark.parametrize(
    ("changes", "message"),
    [
        ({"source": ""}, "metadata.source is required"),
        ({"principal": ""}, "metadata.principal is required"),
        ({"trace_id": ""}, "metadata.trace_id is required"),
        ({"kind": EnvelopeKind.UNSPECIFIED}, "metadata.kind must be specified"),
    ],
)
def test_validate_meta_rejects_incomplete_metadata(
    changes: dict[str, object], message: str
) -> None:
    """Missing fields should map to stable public messages."""
    with pytest.raises(ValueError) as exc_info:
        validate_meta(replace(_meta(), **changes))

    assert message in str(exc_info.value)
