"""Data-layer exports for Result Store Service."""

from services.state.result_store.data.repository import SqliteResultRepository
from services.state.result_store.data.runtime import ResultSqliteRuntime
from services.state.result_store.data.schema import metadata, results

__all__ = ["ResultSqliteRuntime", "SqliteResultRepository", "metadata", "results"]
