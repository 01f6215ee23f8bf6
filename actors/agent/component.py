"""Component identity for the collection agent actor."""

ACTOR_COMPONENT_ID = "actor_agent"
