"""Last-seen marker persistence for the collection agent."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path


def read_last_seen(path: Path) -> datetime | None:
    """Return the stored marker, or ``None`` when absent or unreadable as RFC 3339."""
    try:
        text = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def write_last_seen(path: Path, stamp: datetime) -> None:
    """Persist ``stamp`` as RFC 3339 UTC, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = stamp.astimezone(UTC).isoformat().replace("+00:00", "Z")
    path.write_text(text, encoding="utf-8")
