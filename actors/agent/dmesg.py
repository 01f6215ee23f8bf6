"""Kernel ring buffer collection and new-line filtering."""

from __future__ import annotations

import os
import re
import subprocess
from datetime import UTC, datetime
from typing import Sequence

MAX_LINES = 500

_TIMESTAMP_RE = re.compile(
    r"^\[([A-Za-z]{3} [A-Za-z]{3} [ \d]\d \d{2}:\d{2}:\d{2} \d{4})\]"
)


class DmesgError(Exception):
    """``dmesg`` could not be run or exited with a failure."""


def parse_dmesg_timestamp(line: str) -> datetime | None:
    """Return the ``dmesg -T`` timestamp prefix of ``line`` as UTC, if any.

    ``dmesg -T`` prints wall-clock time without a zone; it is read as UTC so
    that it compares consistently with the stored marker.
    """
    match = _TIMESTAMP_RE.match(line)
    if match is None:
        return None
    # strptime rejects the double space before single-digit days.
    text = " ".join(match.group(1).split())
    try:
        parsed = datetime.strptime(text, "%a %b %d %H:%M:%S %Y")
    except ValueError:
        return None
    return parsed.replace(tzinfo=UTC)


def filter_new_lines(
    lines: Sequence[str], last_seen: datetime | None
) -> tuple[list[str], datetime | None]:
    """Keep timestamped lines strictly newer than ``last_seen``.

    Returns the kept lines in input order and the newest timestamp among
    them. Lines without a parseable timestamp are dropped.
    """
    kept: list[str] = []
    latest: datetime | None = None
    for line in lines:
        stamp = parse_dmesg_timestamp(line)
        if stamp is None:
            continue
        if last_seen is not None and stamp <= last_seen:
            continue
        kept.append(line)
        if latest is None or stamp > latest:
            latest = stamp
    return kept, latest


def cap_lines(lines: Sequence[str], limit: int = MAX_LINES) -> tuple[list[str], bool]:
    """Return at most ``limit`` of the most recent lines and whether any were cut."""
    if len(lines) <= limit:
        return list(lines), False
    return list(lines[-limit:]), True


def read_dmesg() -> list[str]:
    """Run ``dmesg -T`` under the C locale and return its output lines."""
    try:
        completed = subprocess.run(
            ["dmesg", "-T"],
            capture_output=True,
            check=True,
            env={**os.environ, "LC_ALL": "C"},
            text=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        raise DmesgError(
            f"dmesg command failed (check permissions or CAP_SYSLOG): {exc}"
        ) from exc
    output = completed.stdout.strip()
    return output.split("\n") if output else []
