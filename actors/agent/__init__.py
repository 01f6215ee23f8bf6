"""Collection agent actor: reads kernel lines and ships deltas to the collector."""

from actors.agent.agent import CollectionAgent, DeliveryError, run_agent
from actors.agent.component import ACTOR_COMPONENT_ID
from actors.agent.config import AgentSettings, resolve_agent_settings
from actors.agent.dmesg import (
    MAX_LINES,
    DmesgError,
    cap_lines,
    filter_new_lines,
    parse_dmesg_timestamp,
    read_dmesg,
)
from actors.agent.state import read_last_seen, write_last_seen

__all__ = [
    "ACTOR_COMPONENT_ID",
    "MAX_LINES",
    "AgentSettings",
    "CollectionAgent",
    "DeliveryError",
    "DmesgError",
    "cap_lines",
    "filter_new_lines",
    "parse_dmesg_timestamp",
    "read_dmesg",
    "read_last_seen",
    "resolve_agent_settings",
    "run_agent",
    "write_last_seen",
]
