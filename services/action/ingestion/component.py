"""Component identity for the Ingestion Service."""

from __future__ import annotations

SERVICE_COMPONENT_ID = "service_ingestion"
