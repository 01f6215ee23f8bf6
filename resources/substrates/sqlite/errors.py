"""SQLite/SQLAlchemy exception normalization helpers."""

from __future__ import annotations

from sqlalchemy.exc import (
    DatabaseError,
    IntegrityError,
    InterfaceError,
    OperationalError,
)

from packages.fleetwatch_shared.errors import (
    ErrorDetail,
    codes,
    dependency_error,
    internal_error,
)


def normalize_sqlite_error(exc: Exception) -> ErrorDetail:
    """Map low-level DB exceptions into shared structured error semantics."""
    metadata = {"exception_type": type(exc).__name__}

    if isinstance(exc, OperationalError):
        # Locked/busy databases and unreadable files land here.
        return dependency_error(
            "sqlite unavailable",
            code=codes.DEPENDENCY_UNAVAILABLE,
            retryable=True,
            metadata=metadata,
        )

    if isinstance(exc, (IntegrityError, InterfaceError, DatabaseError)):
        return dependency_error(
            "sqlite request failed",
            code=codes.DEPENDENCY_FAILURE,
            retryable=False,
            metadata=metadata,
        )

    return internal_error(
        "unexpected sqlite failure",
        code=codes.UNEXPECTED_EXCEPTION,
        metadata=metadata,
    )
