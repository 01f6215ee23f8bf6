"""Ingestion Service native package exports."""

from services.action.ingestion.component import SERVICE_COMPONENT_ID
from services.action.ingestion.config import (
    IngestionServiceSettings,
    resolve_ingestion_service_settings,
)
from services.action.ingestion.domain import Delta, IngestOutcome
from services.action.ingestion.implementation import DefaultIngestionService
from services.action.ingestion.service import DisconnectProbe, IngestionService

__all__ = [
    "SERVICE_COMPONENT_ID",
    "DefaultIngestionService",
    "Delta",
    "DisconnectProbe",
    "IngestOutcome",
    "IngestionService",
    "IngestionServiceSettings",
    "resolve_ingestion_service_settings",
]
