"""CLI entrypoint for browserlens."""

from __future__ import annotations

import asyncio
import json
import uuid
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from browserlens import __version__
from browserlens.analysis.engine import AnalysisEngine
from browserlens.config import MonitorConfig, load_config
from browserlens.errors import ConfigurationError
from browserlens.providers.registry import create_base_provider, create_provider
from browserlens.types.analysis import AnalysisResult, Priority
from browserlens.types.events import BrowserEvent
from browserlens.types.session import MonitoringSession, default_session_name
from browserlens.utilities.logger import setup_logging

_PRIORITY_STYLES = {
    Priority.LOW: "green",
    Priority.MEDIUM: "yellow",
    Priority.HIGH: "red",
    Priority.CRITICAL: "bold red",
}


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Path to a browserlens.yaml / .json config file")
@click.option("--provider", default=None, help="Override the provider (cloud, local, openai, ollama)")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON")
@click.version_option(__version__, prog_name="browserlens")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    provider: str | None,
    debug: bool,
    json_logs: bool,
) -> None:
    """Browserlens - AI-assisted runtime monitoring for browser tests."""
    setup_logging(debug=debug, json_output=json_logs)
    overrides: dict[str, Any] = {}
    if provider:
        overrides["provider"] = provider
    try:
        ctx.obj = load_config(config_path, overrides=overrides)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc


# ---------------------------------------------------------------------------
# doctor
# ---------------------------------------------------------------------------


async def _probe_provider(config: MonitorConfig) -> tuple[bool, str]:
    provider = create_base_provider(config)
    try:
        available = await asyncio.wait_for(provider.is_available(), timeout=config.timeout)
    except TimeoutError:
        return False, f"{provider.name} did not answer within {config.timeout:g}s"
    finally:
        await provider.close()
    if available:
        return True, f"{provider.name} is reachable"
    return False, f"{provider.name} is not reachable"


def _doctor_rows(config: MonitorConfig) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = [{
        "check": "monitoring",
        "ok": config.monitoring_enabled,
        "details": "enabled" if config.monitoring_enabled else "disabled by configuration",
    }]
    try:
        kind = config.provider_kind
    except ConfigurationError as exc:
        rows.append({"check": "provider", "ok": False, "details": str(exc)})
        return rows

    rows.append({"check": "provider", "ok": True, "details": str(kind)})
    try:
        ok, details = asyncio.run(_probe_provider(config))
    except ConfigurationError as exc:
        ok, details = False, str(exc)
    rows.append({"check": "availability", "ok": ok, "details": details})
    return rows


def _print_doctor(rows: list[dict[str, Any]]) -> bool:
    click.echo("Browserlens preflight:")
    all_ok = True
    for row in rows:
        icon = "OK" if row["ok"] else "FAIL"
        click.echo(f"  [{icon}] {row['check']} - {row['details']}")
        all_ok = all_ok and bool(row["ok"])
    return all_ok


@main.command("doctor")
@click.pass_obj
def doctor_command(config: MonitorConfig) -> None:
    """Check configuration and provider availability."""
    ok = _print_doctor(_doctor_rows(config))
    raise SystemExit(0 if ok else 1)


# ---------------------------------------------------------------------------
# analyze
# ---------------------------------------------------------------------------


def read_events(path: Path) -> list[BrowserEvent]:
    """Read a JSONL file of serialised events, skipping blank lines."""
    events: list[BrowserEvent] = []
    for line_no, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError as exc:
            raise click.ClickException(f"{path}:{line_no}: invalid JSON ({exc.msg})") from exc
        if not isinstance(data, dict):
            raise click.ClickException(f"{path}:{line_no}: expected a JSON object")
        events.append(BrowserEvent.from_dict(data))
    return events


async def _analyze_events(
    config: MonitorConfig,
    events: list[BrowserEvent],
    session: MonitoringSession,
) -> AnalysisResult:
    provider = create_provider(config)
    try:
        engine = AnalysisEngine(provider, max_concurrent=1)
        return await engine.analyze(events, session)
    finally:
        await provider.close()


def _render_result(console: Console, result: AnalysisResult) -> None:
    style = _PRIORITY_STYLES.get(result.severity, "")
    console.print(f"[bold]{result.session_name}[/bold]  severity: [{style}]{result.severity}[/{style}]")
    if result.has_error:
        console.print(f"[red]Error:[/red] {result.error_message}")
        return
    if result.summary:
        console.print(result.summary)

    if result.issues:
        table = Table(title="Issues", show_lines=True)
        table.add_column("Priority", no_wrap=True)
        table.add_column("Type", no_wrap=True)
        table.add_column("Title")
        table.add_column("Suggestion")
        for issue in result.issues:
            issue_style = _PRIORITY_STYLES.get(issue.priority, "")
            table.add_row(
                f"[{issue_style}]{issue.priority}[/{issue_style}]",
                issue.category,
                issue.title,
                issue.suggestion,
            )
        console.print(table)

    if result.recommendations:
        table = Table(title="Recommendations", show_lines=True)
        table.add_column("Category", no_wrap=True)
        table.add_column("Recommendation")
        table.add_column("Reasoning")
        for rec in result.recommendations:
            table.add_row(rec.category, rec.recommendation, rec.reasoning)
        console.print(table)


@main.command("analyze")
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", default=None, help="Session name shown in the prompt and report")
@click.option("--json", "as_json", is_flag=True, help="Print the analysis result as JSON")
@click.pass_obj
def analyze_command(config: MonitorConfig, events_file: Path, name: str | None, as_json: bool) -> None:
    """Analyze a recorded JSONL event file."""
    events = read_events(events_file)
    session_id = events[0].session_id if events and events[0].session_id else str(uuid.uuid4())
    session = MonitoringSession(
        id=session_id,
        name=name or default_session_name(session_id),
    )

    try:
        result = asyncio.run(_analyze_events(config, events, session))
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _render_result(Console(), result)
    if result.has_error:
        raise SystemExit(1)
