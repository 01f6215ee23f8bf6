"""Built-in default configuration values for fleetwatch processes.

These defaults are the final fallback in the configuration cascade:
CLI params > ENV vars > config file > built-in defaults.
"""

from __future__ import annotations

from typing import Any

BUILTIN_DEFAULTS: dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "json_output": True,
        "service": "fleetwatch",
        "environment": "dev",
    },
    "profile": {
        "ingest_shared_secret": "",
    },
    "components": {},
}
