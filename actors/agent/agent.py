"""Periodic collection loop that ships new kernel lines to the collector."""

from __future__ import annotations

import signal
import threading
from datetime import UTC, datetime
from typing import Callable

from actors.agent.config import AgentSettings
from actors.agent.dmesg import (
    MAX_LINES,
    DmesgError,
    cap_lines,
    filter_new_lines,
    read_dmesg,
)
from actors.agent.state import read_last_seen, write_last_seen
from packages.fleetwatch_shared.http import HttpClient, HttpClientError
from packages.fleetwatch_shared.logging import fields, get_logger, log_context

_LOGGER = get_logger(__name__)
_BODY_EXCERPT_CHARS = 512


class DeliveryError(Exception):
    """The collector answered a delta with a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"collector returned {status_code}: {body}")
        self.status_code = status_code


class CollectionAgent:
    """Collect new ``dmesg`` lines and POST them to the collector.

    The last-seen marker advances only after the collector accepted the delta,
    so a failed send is retried with the same lines on the next cycle.
    """

    def __init__(
        self,
        *,
        settings: AgentSettings,
        shared_secret: str,
        client: HttpClient | None = None,
        read_lines: Callable[[], list[str]] = read_dmesg,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._settings = settings
        self._shared_secret = shared_secret
        self._client = client or HttpClient(
            timeout_seconds=settings.request_timeout_seconds,
            verify=not settings.tls_skip_verify,
        )
        self._read_lines = read_lines
        self._clock = clock

    def close(self) -> None:
        self._client.close()

    def collect_once(self) -> int:
        """Run one cycle and return how many lines were delivered."""
        last_seen = read_last_seen(self._settings.state_file)
        lines, latest = filter_new_lines(self._read_lines(), last_seen)
        if not lines or latest is None:
            _LOGGER.info("No new dmesg lines since %s", last_seen)
            return 0

        lines, truncated = cap_lines(lines)
        if truncated:
            _LOGGER.warning("Truncated delta to the newest %d lines", MAX_LINES)

        self._send(lines)
        write_last_seen(self._settings.state_file, latest)
        _LOGGER.info("Delivered dmesg delta", extra={fields.LINE_COUNT: len(lines)})
        return len(lines)

    def run(self, stop: threading.Event) -> None:
        """Collect immediately, then every poll interval until ``stop`` is set."""
        _LOGGER.info(
            "Agent starting",
            extra={
                "collector_url": self._settings.collector_url,
                "poll_interval_seconds": self._settings.poll_interval_seconds,
            },
        )
        with log_context({fields.HOSTNAME: self._settings.hostname}):
            while not stop.is_set():
                try:
                    self.collect_once()
                except (DmesgError, DeliveryError, HttpClientError, OSError) as exc:
                    _LOGGER.error("Collection cycle failed: %s", exc)
                stop.wait(self._settings.poll_interval_seconds)
        _LOGGER.info("Agent shutting down")

    def _send(self, lines: list[str]) -> None:
        body = {
            "hostname": self._settings.hostname,
            "timestamp": self._clock().isoformat(),
            "lines": lines,
        }
        response = self._client.post(
            self._settings.collector_url,
            json=body,
            headers={"Authorization": f"Bearer {self._shared_secret}"},
            raise_for_status=False,
        )
        if not response.is_success:
            raise DeliveryError(
                response.status_code, response.text.strip()[:_BODY_EXCERPT_CHARS]
            )


def run_agent(settings: AgentSettings, *, shared_secret: str) -> None:
    """Run the agent in the foreground until SIGINT or SIGTERM."""
    stop = threading.Event()

    def _handle_shutdown(_signum: int, _frame: object) -> None:
        stop.set()

    signal.signal(signal.SIGINT, _handle_shutdown)
    signal.signal(signal.SIGTERM, _handle_shutdown)
    if shared_secret == "":
        _LOGGER.warning("No ingest shared secret configured; collector will refuse deltas")

    agent = CollectionAgent(settings=settings, shared_secret=shared_secret)
    try:
        agent.run(stop)
    finally:
        agent.close()
