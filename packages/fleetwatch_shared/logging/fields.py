"""Canonical logging field names shared across fleetwatch components."""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Envelope/correlation fields.
TRACE_ID = "trace_id"
ENVELOPE_ID = "envelope_id"
PRINCIPAL = "principal"

# Public API invocation fields.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"

# Ingestion pipeline fields.
HOSTNAME = "hostname"
STATUS = "status"
LATENCY_MS = "latency_ms"
ENDPOINT_INDEX = "endpoint_index"
MODEL = "model"
LINE_COUNT = "line_count"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
