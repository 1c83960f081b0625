"""Command-line interface for the authenticity engine using Typer and Rich."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from authenticity_system import __version__
from authenticity_system.agents.factory import create_default_agents
from authenticity_system.agents.registry import AgentRegistry
from authenticity_system.config.engine import EngineConfig
from authenticity_system.config.logging import configure_logging, get_logger
from authenticity_system.config.settings import settings
from authenticity_system.data_management.schemas import CompositeResult, CompositeVerdict
from authenticity_system.errors import AuthenticityEngineError
from authenticity_system.orchestration.orchestrator import AuthenticityOrchestrator

app = typer.Typer(
    help="Composite authenticity scoring for reviews and app listings",
    add_completion=False,
)

console = Console()

logger = get_logger("cli")

VERDICT_STYLES = {
    CompositeVerdict.LIKELY_GENUINE: "green",
    CompositeVerdict.SUSPICIOUS: "yellow",
    CompositeVerdict.HIGHLY_LIKELY_FAKE: "red",
    CompositeVerdict.UNCERTAIN: "dim",
}


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL for this run"),
) -> None:
    """Composite authenticity scoring for reviews and app listings."""
    if log_level:
        configure_logging(log_level=log_level)


def build_orchestrator() -> AuthenticityOrchestrator:
    """Orchestrator wired from environment settings."""
    return AuthenticityOrchestrator(EngineConfig.from_settings())


def _load_request(
    input_file: Optional[Path],
    text: Optional[str],
    rating: Optional[float],
    description: Optional[str],
    source_url: Optional[str],
    user_context: Optional[str] = None,
    references: Optional[Path] = None,
) -> dict:
    payload: dict = {}
    if input_file is not None:
        try:
            payload = json.loads(input_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise typer.BadParameter(f"invalid JSON in {input_file}: {e}", param_hint="--input")
        if not isinstance(payload, dict):
            raise typer.BadParameter("request file must contain a JSON object", param_hint="--input")

    context = None
    if user_context is not None:
        try:
            context = json.loads(user_context)
        except json.JSONDecodeError as e:
            raise typer.BadParameter(f"invalid JSON: {e}", param_hint="--user-context")
        if not isinstance(context, dict):
            raise typer.BadParameter("must be a JSON object", param_hint="--user-context")

    reference_texts = None
    if references is not None:
        lines = references.read_text(encoding="utf-8").splitlines()
        reference_texts = [line.strip() for line in lines if line.strip()]

    overrides = {
        "text": text,
        "rating": rating,
        "appDescription": description,
        "sourceUrl": source_url,
        "userContext": context,
        "referenceTexts": reference_texts,
    }
    payload.update({k: v for k, v in overrides.items() if v is not None})
    return payload


async def _run_analysis(payload: dict) -> CompositeResult:
    async with build_orchestrator() as orchestrator:
        return await orchestrator.analyze(payload)


def _render_result(result: CompositeResult) -> None:
    style = VERDICT_STYLES[result.verdict]
    console.print(Panel(
        f"[bold {style}]{result.verdict.value}[/bold {style}]\n"
        f"Composite score: {result.composite_score:.1f}/100\n"
        f"{result.consensus.description}",
        title="Authenticity Verdict",
        border_style=style,
    ))

    table = Table(title="Agent Results", show_header=True, header_style="bold magenta")
    table.add_column("Agent", style="cyan")
    table.add_column("Confidence", justify="right")
    table.add_column("Verdict")
    table.add_column("Weight", justify="right")
    table.add_column("Source", style="dim")
    for agent_id, agent_result in result.agent_results.items():
        if agent_result is None:
            reason = result.abstentions.get(agent_id)
            table.add_row(agent_id, "-", f"[dim]{reason.value if reason else 'MISSING'}[/dim]", "-", "-")
            continue
        table.add_row(
            agent_id,
            f"{agent_result.confidence:.1f}",
            agent_result.verdict.value,
            f"{result.effective_weights.get(agent_id, 0.0):.3f}",
            agent_result.source.value,
        )
    console.print(table)

    if result.evidence_chain:
        console.print("\n[bold]Evidence[/bold]")
        for entry in result.evidence_chain:
            console.print(f"  [cyan]{entry.agent}[/cyan] ({entry.effective_weight:.2f}): {entry.text}")
    if result.not_applicable_agents:
        console.print(f"\n[dim]Not applicable: {', '.join(result.not_applicable_agents)}[/dim]")


@app.command()
def analyze(
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Review or content text"),
    rating: Optional[float] = typer.Option(None, "--rating", "-r", min=0, max=5, help="Star rating 0-5"),
    description: Optional[str] = typer.Option(None, "--description", help="App listing description"),
    source_url: Optional[str] = typer.Option(None, "--source-url", help="URL of the source page"),
    user_context: Optional[str] = typer.Option(
        None, "--user-context", "-u", help='Reviewer context as JSON, e.g. \'{"reviewCount": 12}\''
    ),
    references: Optional[Path] = typer.Option(
        None, "--references", exists=True, dir_okay=False, help="File of reference texts, one per line"
    ),
    input_file: Optional[Path] = typer.Option(
        None, "--input", "-i", exists=True, dir_okay=False, help="JSON request file (camelCase keys)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the composite result as JSON"),
) -> None:
    """
    Analyze one piece of content and print the composite verdict.

    Command-line fields override the same fields from --input.
    """
    payload = _load_request(input_file, text, rating, description, source_url, user_context, references)
    logger.info(f"Analyze command invoked with fields: {sorted(payload)}")

    try:
        result = asyncio.run(_run_analysis(payload))
    except AuthenticityEngineError as e:
        console.print(f"[red]✗[/red] {e}")
        logger.error(f"Analysis failed: {e}")
        raise typer.Exit(1)

    if as_json:
        console.print_json(result.to_json())
    else:
        _render_result(result)


@app.command()
def agents() -> None:
    """List registered agents with their weights and required inputs."""
    registry = AgentRegistry()
    config = EngineConfig.from_settings()
    capabilities = {i: a.get_capabilities() for i, a in create_default_agents(config).items()}

    table = Table(title="Registered Agents", show_header=True, header_style="bold magenta")
    table.add_column("Agent", style="cyan")
    table.add_column("Kind")
    table.add_column("Weight", justify="right")
    table.add_column("Requires", style="yellow")
    table.add_column("Signals", style="dim")
    table.add_column("Enabled")
    for d in registry:
        table.add_row(
            d.identifier,
            d.kind.value,
            f"{d.weight:.2f}",
            ", ".join(sorted(d.required_input_fields)),
            ", ".join(capabilities.get(d.identifier, [])),
            "✓" if config.is_enabled(d.identifier) else "✗",
        )
    console.print(table)
    console.print(f"[dim]Total weight: {registry.total_weight():.2f}[/dim]")


async def _run_health():
    async with build_orchestrator() as orchestrator:
        return await orchestrator.check_health()


@app.command()
def health() -> None:
    """Check every enabled external service."""
    statuses = asyncio.run(_run_health())

    table = Table(title="External Services", show_header=True, header_style="bold magenta")
    table.add_column("Agent", style="cyan")
    table.add_column("Status")
    table.add_column("Endpoint", style="yellow")
    table.add_column("Detail", style="dim")
    for agent_id, status in statuses.items():
        marker = "[green]✓ Available[/green]" if status.available else "[red]✗ Unavailable[/red]"
        table.add_row(agent_id, marker, status.endpoint, status.detail)
    console.print(table)

    if not all(s.available for s in statuses.values()):
        console.print("[dim]Unavailable services degrade to local fallbacks where one exists.[/dim]")


@app.command()
def status() -> None:
    """Display engine configuration."""
    table = Table(title="Engine Configuration", show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan", width=24)
    table.add_column("Value", style="yellow")
    table.add_row("Global deadline", f"{settings.global_deadline_seconds:g}s")
    table.add_row("Default agent timeout", f"{settings.agent_timeout_seconds:g}s")
    for agent_id, timeout in sorted(settings.agent_timeouts.items()):
        table.add_row(f"  {agent_id} timeout", f"{timeout:g}s")
    table.add_row("Health pre-check", "✓ Enabled" if settings.precheck_health else "✗ Disabled")
    table.add_row("Disabled agents", ", ".join(settings.disabled_agents) or "none")
    table.add_row("Logging", f"Level: {settings.log_level}, Format: {settings.log_format}")
    console.print(table)


@app.command()
def version() -> None:
    """Display version information."""
    console.print("[bold]Authenticity Scoring Engine[/bold]")
    console.print(f"Version: {__version__}")


if __name__ == "__main__":
    app()
