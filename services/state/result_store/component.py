"""Component identity for the Result Store Service."""

from __future__ import annotations

SERVICE_COMPONENT_ID = "service_result_store"
