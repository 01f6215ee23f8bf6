"""Tests for dmesg timestamp parsing, filtering and capping."""

from __future__ import annotations

import subprocess
from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from actors.agent import dmesg
from actors.agent.dmesg import (
    MAX_LINES,
    DmesgError,
    cap_lines,
    filter_new_lines,
    parse_dmesg_timestamp,
    read_dmesg,
)


def test_parse_timestamp_handles_padded_and_two_digit_days() -> None:
    """Both space-padded and two-digit days should parse as UTC."""
    assert parse_dmesg_timestamp("[Mon Feb  3 12:25:01 2026] usb 1-1: new device") == (
        datetime(2026, 2, 3, 12, 25, 1, tzinfo=UTC)
    )
    assert parse_dmesg_timestamp("[Tue Feb 17 00:00:09 2026] eth0: up") == datetime(
        2026, 2, 17, 0, 0, 9, tzinfo=UTC
    )


def test_parse_timestamp_rejects_other_prefixes() -> None:
    """Monotonic or missing prefixes should not parse."""
    assert parse_dmesg_timestamp("[    1.234567] Booting Linux") is None
    assert parse_dmesg_timestamp("no timestamp here") is None
    assert parse_dmesg_timestamp("") is None


def test_filter_keeps_strictly_newer_lines_and_latest() -> None:
    """Only lines after the marker survive, in order, with the newest stamp."""
    lines = [
        "[Mon Feb  3 12:00:00 2026] old",
        "[Mon Feb  3 12:05:00 2026] equal",
        "continuation without stamp",
        "[Mon Feb  3 12:07:00 2026] newer",
        "[Mon Feb  3 12:06:00 2026] out of order",
    ]
    marker = datetime(2026, 2, 3, 12, 5, tzinfo=UTC)

    kept, latest = filter_new_lines(lines, marker)

    assert kept == [
        "[Mon Feb  3 12:07:00 2026] newer",
        "[Mon Feb  3 12:06:00 2026] out of order",
    ]
    assert latest == datetime(2026, 2, 3, 12, 7, tzinfo=UTC)


def test_filter_without_marker_keeps_all_timestamped_lines() -> None:
    """A first run should send every timestamped line."""
    kept, latest = filter_new_lines(["[Mon Feb  3 12:00:00 2026] a", "junk"], None)

    assert kept == ["[Mon Feb  3 12:00:00 2026] a"]
    assert latest == datetime(2026, 2, 3, 12, 0, tzinfo=UTC)
    assert filter_new_lines([], None) == ([], None)


def test_cap_keeps_most_recent_lines() -> None:
    """Batches over the cap keep their tail."""
    lines = [str(index) for index in range(MAX_LINES + 20)]

    capped, truncated = cap_lines(lines)

    assert truncated
    assert len(capped) == MAX_LINES
    assert capped[0] == "20"
    assert capped[-1] == str(MAX_LINES + 19)
    assert cap_lines(["a", "b"]) == (["a", "b"], False)


def test_read_dmesg_uses_c_locale_and_splits_output() -> None:
    """The command should run under LC_ALL=C and return non-empty lines."""
    completed = subprocess.CompletedProcess(
        args=["dmesg", "-T"], returncode=0, stdout="a\nb\n", stderr=""
    )
    with patch.object(dmesg.subprocess, "run", return_value=completed) as run:
        assert read_dmesg() == ["a", "b"]

    assert run.call_args.args[0] == ["dmesg", "-T"]
    assert run.call_args.kwargs["env"]["LC_ALL"] == "C"


def test_read_dmesg_wraps_command_failure() -> None:
    """Permission failures should surface as DmesgError."""
    failure = subprocess.CalledProcessError(1, ["dmesg", "-T"])
    with patch.object(dmesg.subprocess, "run", side_effect=failure):
        with pytest.raises(DmesgError):
            read_dmesg()
