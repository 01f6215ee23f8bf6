"""SQLAlchemy table definitions owned by Result Store Service."""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)

metadata = MetaData()

results = Table(
    "results",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("timestamp", DateTime(timezone=True), nullable=False),
    Column("hostname", String(255), nullable=False),
    Column("status", String(32), nullable=False),
    Column("issues", JSON, nullable=False),
    Column("raw_text", Text, nullable=False),
    Column("latency_ms", Integer, nullable=False),
    Column("reported_at", DateTime(timezone=True), nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("ix_results_hostname", "hostname"),
    Index("ix_results_status", "status"),
    Index("ix_results_timestamp", "timestamp"),
    sqlite_autoincrement=True,
)
