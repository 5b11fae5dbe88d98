"\"\"\"Typer CLI entrypoint for the talent signal engine.\"\"\""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

import typer

import yaml

from .container import TalentSignalContainer, create_container
from .logging import configure_logging
from .pipeline import AuditLogger
from .schemas.config import load_config

app = typer.Typer(help="Talent signal search, snapshot and monitoring CLI.")


def _build_container(
    *,
    config: Optional[Path],
    fixtures: Optional[Path],
    base_url: Optional[str],
    api_token: Optional[str],
    log_level: str,
) -> TalentSignalContainer:
    settings: dict[str, Any] = {}
    if config:
        with config.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        try:
            settings = load_config(loaded).to_settings()
        except ValueError as exc:
            raise typer.BadParameter(f"Invalid config file: {exc}", param_hint="'--config'") from exc

    transport_settings: dict[str, Any] = {}
    if fixtures:
        transport_settings["fixtures"] = str(fixtures)
    elif base_url:
        transport_settings["base_url"] = base_url
        if api_token:
            transport_settings["api_token"] = api_token
    if transport_settings:
        adapters = settings.setdefault("adapters", {})
        adapters["transport"] = transport_settings

    configure_logging(log_level)
    return create_container(settings=settings)


@app.command()
def search(
    query: str = typer.Option(..., help="Free-text hiring query."),
    roster: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Candidate roster JSONL path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    fixtures: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Provider fixtures JSON path."),
    base_url: Optional[str] = typer.Option(None, help="Profile gateway base URL."),
    api_token: Optional[str] = typer.Option(None, help="Profile gateway API token."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Interpret a query and rank the roster against it."""
    container = _build_container(
        config=config, fixtures=fixtures, base_url=base_url, api_token=api_token, log_level=log_level
    )
    pipeline = container.pipeline()
    audit_logger = AuditLogger(audit_log) if audit_log else None

    payload = pipeline.search(
        query=query,
        roster_path=roster,
        output_path=output,
        audit_logger=audit_logger,
    )
    ranked = payload["result"]["candidates"]
    typer.echo(f"Ranked {len(ranked)} candidates. Results saved to {output}.")


@app.command()
def snapshot(
    candidate_id: str = typer.Argument(..., help="Candidate id to summarize."),
    roster: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Candidate roster JSONL path."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, resolve_path=True, help="Output JSON path."),
    fixtures: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Provider fixtures JSON path."),
    base_url: Optional[str] = typer.Option(None, help="Profile gateway base URL."),
    api_token: Optional[str] = typer.Option(None, help="Profile gateway API token."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Build the quick-view snapshot for one candidate."""
    container = _build_container(
        config=config, fixtures=fixtures, base_url=base_url, api_token=api_token, log_level=log_level
    )
    pipeline = container.pipeline()
    try:
        payload = pipeline.snapshot(candidate_id=candidate_id, roster_path=roster, output_path=output)
    except KeyError as exc:
        raise typer.BadParameter(f"Unknown candidate: {candidate_id}", param_hint="CANDIDATE_ID") from exc
    if output is None:
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        typer.echo(f"Snapshot for {candidate_id} saved to {output}.")


@app.command()
def monitor(
    candidate_ids: List[str] = typer.Argument(..., help="Candidate ids to monitor."),
    roster: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Candidate roster JSONL path."),
    ticks: int = typer.Option(2, min=1, help="Number of polling rounds to run."),
    interval: float = typer.Option(1.0, min=0.0, help="Seconds between polling rounds."),
    fixtures: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Provider fixtures JSON path."),
    base_url: Optional[str] = typer.Option(None, help="Profile gateway base URL."),
    api_token: Optional[str] = typer.Option(None, help="Profile gateway API token."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Poll candidates a fixed number of times and print alerts as JSON lines."""
    container = _build_container(
        config=config, fixtures=fixtures, base_url=base_url, api_token=api_token, log_level=log_level
    )
    pipeline = container.pipeline()
    alerts = pipeline.monitor(
        candidate_ids=candidate_ids,
        roster_path=roster,
        ticks=ticks,
        interval_seconds=interval,
        on_alert=lambda alert: typer.echo(json.dumps(alert, ensure_ascii=False)),
    )
    typer.echo(f"Monitoring finished after {ticks} rounds with {len(alerts)} alerts.", err=True)


@app.command()
def plan(
    query: str = typer.Option(..., help="Free-text hiring query."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Print the per-provider search plan for a query."""
    container = _build_container(
        config=config, fixtures=None, base_url=None, api_token=None, log_level=log_level
    )
    payload = container.pipeline().plan(query=query)
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
