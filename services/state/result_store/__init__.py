"""Result Store Service native package exports."""

from services.state.result_store.component import SERVICE_COMPONENT_ID
from services.state.result_store.config import ResultStoreSettings
from services.state.result_store.domain import (
    HealthStatus,
    Issue,
    NewRecord,
    RecordStatus,
    StoredRecord,
)
from services.state.result_store.implementation import DefaultResultStoreService
from services.state.result_store.service import (
    ResultStoreService,
    build_result_store_service,
)

__all__ = [
    "SERVICE_COMPONENT_ID",
    "DefaultResultStoreService",
    "HealthStatus",
    "Issue",
    "NewRecord",
    "RecordStatus",
    "ResultStoreService",
    "ResultStoreSettings",
    "StoredRecord",
    "build_result_store_service",
]
