"""fleetwatch command-line interface implemented with Typer."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import typer
from pydantic import ValidationError

from actors.agent import resolve_agent_settings, run_agent
from packages.fleetwatch_core.main import run_collector
from packages.fleetwatch_shared.config import FleetwatchSettings, load_settings
from packages.fleetwatch_shared.http import (
    HttpClient,
    HttpClientError,
    HttpStatusError,
)
from packages.fleetwatch_shared.logging import configure_logging

SUCCESS_EXIT_CODE = 0
CONFIG_ERROR_EXIT_CODE = 2
DOMAIN_ERROR_EXIT_CODE = 3
TRANSPORT_ERROR_EXIT_CODE = 4


@dataclass(frozen=True)
class CliConfig:
    """Global CLI options shared by every command."""

    config_path: Path | None
    collector: str
    timeout: float
    insecure: bool
    as_json: bool


def _emit_output(data: Any, as_json: bool) -> None:
    """Render command output in the requested format."""
    if as_json:
        typer.echo(json.dumps(data, sort_keys=True, separators=(",", ":")))
        return
    if isinstance(data, dict) and isinstance(data.get("counts"), dict):
        typer.echo(_render_counts(data["counts"]))
        return
    if isinstance(data, dict) and isinstance(data.get("records"), list):
        typer.echo(_render_records(data["records"]))
        return
    typer.echo(json.dumps(data, indent=2, sort_keys=True))


def _emit_error(message: str, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps({"error": message}), err=True)
        return
    typer.echo(f"error: {message}", err=True)


def _render_counts(counts: dict[str, Any]) -> str:
    """Render status counts one per line."""
    if not counts:
        return "No records."
    width = max(len(status) for status in counts)
    return "\n".join(
        f"{status.ljust(width)}  {counts[status]}" for status in sorted(counts)
    )


def _render_records(records: list[Any]) -> str:
    """Render stored records with their issue summaries."""
    if not records:
        return "No records."
    lines: list[str] = []
    for record in records:
        if not isinstance(record, dict):
            continue
        lines.append(
            f"#{record.get('id')} {record.get('timestamp')} "
            f"{record.get('hostname')} {record.get('status')} "
            f"({record.get('latency_ms')} ms)"
        )
        for issue in record.get("issues") or []:
            if isinstance(issue, dict):
                lines.append(f"  - {issue.get('summary', '')}")
    return "\n".join(lines)


def _load(cfg: CliConfig) -> FleetwatchSettings:
    """Load settings through the standard cascade or exit with a config error."""
    try:
        return load_settings(config_path=cfg.config_path)
    except (FileNotFoundError, ValueError, ValidationError) as exc:
        _emit_error(str(exc), cfg.as_json)
        raise typer.Exit(code=CONFIG_ERROR_EXIT_CODE) from exc


def _with_client(cfg: CliConfig) -> HttpClient:
    """Return one HTTP client for the collector's read routes."""
    return HttpClient(
        base_url=cfg.collector.rstrip("/"),
        timeout_seconds=cfg.timeout,
        verify=not cfg.insecure,
    )


def _run_query(cfg: CliConfig, invoke: Callable[[HttpClient, dict[str, str]], Any]) -> None:
    """Execute one read request and map outputs and errors to exit codes."""
    secret = _load(cfg).profile.ingest_shared_secret
    headers = {"Authorization": f"Bearer {secret}"}
    try:
        with _with_client(cfg) as client:
            result = invoke(client, headers)
    except HttpStatusError as exc:
        _emit_error(_status_message(exc), cfg.as_json)
        raise typer.Exit(code=DOMAIN_ERROR_EXIT_CODE) from exc
    except HttpClientError as exc:
        _emit_error(exc.message, cfg.as_json)
        raise typer.Exit(code=TRANSPORT_ERROR_EXIT_CODE) from exc

    _emit_output(result, cfg.as_json)
    raise typer.Exit(code=SUCCESS_EXIT_CODE)


def _status_message(exc: HttpStatusError) -> str:
    """Prefer the collector's error message over the bare status line."""
    try:
        body = json.loads(exc.response_body)
        return str(body["errors"][0]["message"])
    except (ValueError, KeyError, IndexError, TypeError):
        return exc.message


def _require_config(ctx: typer.Context) -> CliConfig:
    config = ctx.obj
    if not isinstance(config, CliConfig):
        raise RuntimeError("CLI configuration not initialized")
    return config


def _configure_logging(settings: FleetwatchSettings) -> None:
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )


app = typer.Typer(no_args_is_help=True, help="fleetwatch command-line interface")
results_app = typer.Typer(help="Query stored analysis results")


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        envvar="FLEETWATCH_CONFIG_FILE",
        help="Path to the YAML config file",
    ),
    collector: str = typer.Option(
        "https://localhost:8443",
        envvar="FLEETWATCH_COLLECTOR_URL",
        help="Collector base URL for result queries",
    ),
    timeout: float = typer.Option(10.0, min=0.001, help="Request timeout in seconds"),
    insecure: bool = typer.Option(
        False, "--insecure", help="Skip TLS certificate verification"
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON output"),
) -> None:
    """Store global options for all commands."""
    ctx.obj = CliConfig(
        config_path=config,
        collector=collector,
        timeout=timeout,
        insecure=insecure,
        as_json=as_json,
    )


@app.command("collector")
def collector_command(ctx: typer.Context) -> None:
    """Serve the ingestion endpoint until interrupted."""
    cfg = _require_config(ctx)
    run_collector(_load(cfg))


@app.command("agent")
def agent_command(ctx: typer.Context) -> None:
    """Run the collection agent until interrupted."""
    cfg = _require_config(ctx)
    settings = _load(cfg)
    try:
        agent_settings = resolve_agent_settings(settings)
    except ValidationError as exc:
        _emit_error(str(exc), cfg.as_json)
        raise typer.Exit(code=CONFIG_ERROR_EXIT_CODE) from exc
    _configure_logging(settings)
    run_agent(agent_settings, shared_secret=settings.profile.ingest_shared_secret)


@results_app.command("host")
def results_host_command(
    ctx: typer.Context,
    hostname: str = typer.Argument(..., help="Source hostname"),
    limit: int | None = typer.Option(None, min=1, help="Maximum records to return"),
) -> None:
    """List the newest records for one host."""
    cfg = _require_config(ctx)
    params = {} if limit is None else {"limit": limit}
    _run_query(
        cfg,
        lambda client, headers: client.get_json(
            f"/results/hosts/{hostname}", params=params, headers=headers
        ),
    )


@results_app.command("non-ok")
def results_non_ok_command(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, min=1, help="Maximum records to return"),
) -> None:
    """List the newest records whose status is not ok."""
    cfg = _require_config(ctx)
    params = {} if limit is None else {"limit": limit}
    _run_query(
        cfg,
        lambda client, headers: client.get_json(
            "/results/non-ok", params=params, headers=headers
        ),
    )


@results_app.command("counts")
def results_counts_command(ctx: typer.Context) -> None:
    """Show record counts per status."""
    cfg = _require_config(ctx)
    _run_query(
        cfg,
        lambda client, headers: client.get_json(
            "/results/status-counts", headers=headers
        ),
    )


app.add_typer(results_app, name="results")


if __name__ == "__main__":
    app()
