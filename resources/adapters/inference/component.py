"""Component identity for the inference adapter resource."""

from __future__ import annotations

RESOURCE_COMPONENT_ID = "adapter_inference"
