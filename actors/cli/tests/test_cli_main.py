"""CLI tests for fleetwatch Typer commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest
from typer.testing import CliRunner

from actors.cli import main
from packages.fleetwatch_shared.http import HttpClient

_RECORD = {
    "id": 7,
    "timestamp": "2026-02-03T12:12:00Z",
    "hostname": "web-1",
    "status": "warning",
    "issues": [{"summary": "link flapping", "evidence": "eth0: link down"}],
    "raw_text": "eth0: link down",
    "latency_ms": 42,
    "reported_at": None,
    "created_at": "2026-02-03T12:12:01Z",
}


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "fleetwatch.yaml"
    path.write_text("profile:\n  ingest_shared_secret: cli-secret\n", encoding="utf-8")
    return path


def _install_transport(monkeypatch: Any, handler) -> list[httpx.Request]:
    """Route CLI HTTP calls through a mock transport and record them."""
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    def with_client(cfg: main.CliConfig) -> HttpClient:
        return HttpClient(
            base_url=cfg.collector, transport=httpx.MockTransport(recording)
        )

    monkeypatch.setattr(main, "_with_client", with_client)
    return seen


def test_results_host_renders_records(monkeypatch: Any, config_file: Path) -> None:
    """Host lookup should send the bearer secret and render records."""
    seen = _install_transport(
        monkeypatch,
        lambda request: httpx.Response(200, json={"ok": True, "records": [_RECORD]}),
    )

    result = CliRunner().invoke(
        main.app,
        [
            "--config",
            str(config_file),
            "--collector",
            "https://collector.local:8443",
            "results",
            "host",
            "web-1",
            "--limit",
            "5",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "#7 2026-02-03T12:12:00Z web-1 warning (42 ms)" in result.output
    assert "  - link flapping" in result.output
    [request] = seen
    assert request.url.path == "/results/hosts/web-1"
    assert request.url.params["limit"] == "5"
    assert request.headers["authorization"] == "Bearer cli-secret"


def test_results_counts_json_output(monkeypatch: Any, config_file: Path) -> None:
    """--json should print the collector payload compactly."""
    _install_transport(
        monkeypatch,
        lambda request: httpx.Response(
            200, json={"ok": True, "counts": {"ok": 3, "error": 1}}
        ),
    )

    result = CliRunner().invoke(
        main.app, ["--config", str(config_file), "--json", "results", "counts"]
    )

    assert result.exit_code == 0
    assert json.loads(result.output) == {"ok": True, "counts": {"error": 1, "ok": 3}}


def test_results_counts_human_output(monkeypatch: Any, config_file: Path) -> None:
    """Counts should render sorted by status."""
    _install_transport(
        monkeypatch,
        lambda request: httpx.Response(
            200, json={"ok": True, "counts": {"warning": 2, "error": 1}}
        ),
    )

    result = CliRunner().invoke(
        main.app, ["--config", str(config_file), "results", "counts"]
    )

    assert result.output.splitlines() == ["error    1", "warning  2"]


def test_rejected_query_maps_to_domain_exit_code(
    monkeypatch: Any, config_file: Path
) -> None:
    """A collector error should print its message and exit 3."""
    _install_transport(
        monkeypatch,
        lambda request: httpx.Response(
            401,
            json={
                "ok": False,
                "errors": [
                    {
                        "code": "UNAUTHENTICATED",
                        "category": "authentication",
                        "message": "authentication required",
                    }
                ],
            },
        ),
    )

    result = CliRunner().invoke(
        main.app, ["--config", str(config_file), "results", "non-ok"]
    )

    assert result.exit_code == main.DOMAIN_ERROR_EXIT_CODE
    assert "authentication required" in result.output


def test_unreachable_collector_maps_to_transport_exit_code(
    monkeypatch: Any, config_file: Path
) -> None:
    """Connection failures should exit 4."""

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    _install_transport(monkeypatch, refuse)

    result = CliRunner().invoke(
        main.app, ["--config", str(config_file), "results", "counts"]
    )

    assert result.exit_code == main.TRANSPORT_ERROR_EXIT_CODE


def test_missing_config_file_exits_with_config_error(tmp_path: Path) -> None:
    """An explicit config path that does not exist should exit 2."""
    result = CliRunner().invoke(
        main.app, ["--config", str(tmp_path / "absent.yaml"), "results", "counts"]
    )

    assert result.exit_code == main.CONFIG_ERROR_EXIT_CODE


def test_collector_command_runs_with_loaded_settings(
    monkeypatch: Any, config_file: Path
) -> None:
    """The collector command should hand loaded settings to the runtime."""
    calls: list[Any] = []
    monkeypatch.setattr(main, "run_collector", calls.append)

    result = CliRunner().invoke(main.app, ["--config", str(config_file), "collector"])

    assert result.exit_code == 0
    assert calls[0].profile.ingest_shared_secret == "cli-secret"


def test_agent_command_runs_with_agent_settings(
    monkeypatch: Any, tmp_path: Path
) -> None:
    """The agent command should resolve actor settings and the shared secret."""
    config_file = tmp_path / "fleetwatch.yaml"
    config_file.write_text(
        "\n".join(
            [
                "profile:",
                "  ingest_shared_secret: agent-secret",
                "components:",
                "  actor:",
                "    agent:",
                "      collector_url: https://c.local:8443/ingest",
                "      hostname: db-9",
            ]
        ),
        encoding="utf-8",
    )
    calls: list[tuple[Any, str]] = []
    monkeypatch.setattr(
        main,
        "run_agent",
        lambda settings, *, shared_secret: calls.append((settings, shared_secret)),
    )
    monkeypatch.setattr(main, "configure_logging", lambda **_: None)

    result = CliRunner().invoke(main.app, ["--config", str(config_file), "agent"])

    assert result.exit_code == 0, result.output
    [(settings, secret)] = calls
    assert settings.collector_url == "https://c.local:8443/ingest"
    assert settings.hostname == "db-9"
    assert secret == "agent-secret"


def test_agent_command_rejects_invalid_agent_settings(
    monkeypatch: Any, tmp_path: Path
) -> None:
    """Unknown agent keys should exit with a config error."""
    config_file = tmp_path / "fleetwatch.yaml"
    config_file.write_text(
        "components:\n  actor:\n    agent:\n      poll_every: 5\n", encoding="utf-8"
    )
    monkeypatch.setattr(main, "run_agent", lambda *args, **kwargs: None)

    result = CliRunner().invoke(main.app, ["--config", str(config_file), "agent"])

    assert result.exit_code == main.CONFIG_ERROR_EXIT_CODE
