"""CLI: Typer app wired to strategy generation, chat and JSON extraction."""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import httpx
import typer
from rich import print as rprint
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from stratgen.application.chat import chat_with_strategy
from stratgen.application.generate_strategy import generate_strategy
from stratgen.application.json_parsing import extract_json
from stratgen.config import PROFILE_STRATEGY, load_config
from stratgen.domain import BusinessStrategy, ExtractionError, StrategyGenerationError, UserInput
from stratgen.infrastructure.chat import build_chat_client

app = typer.Typer(help="stratgen: business strategy reports and strategy chat from a generative model.")

_IMAGE_MIME = {".png": "image/png", ".webp": "image/webp", ".gif": "image/gif"}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _bullets(items) -> str:
    return "\n".join(f"• {item}" for item in items) or "[dim]none[/dim]"


def _render_strategy(console: Console, strategy: BusinessStrategy) -> None:
    """Print the report as panels and tables."""
    console.print(Panel(strategy.executive_summary or "[dim]n/a[/dim]", title="Executive summary"))

    bm = strategy.business_model
    console.print(Panel(
        f"[bold]Value proposition[/bold]\n{bm.value_proposition}\n\n"
        f"[bold]Revenue streams[/bold]\n{_bullets(bm.revenue_streams)}\n\n"
        f"[bold]Cost structure[/bold]\n{_bullets(bm.cost_structure)}\n\n"
        f"[bold]Key partners[/bold]\n{_bullets(bm.key_partners)}",
        title="Business model",
    ))

    plan = strategy.marketing_plan
    channels = Table(title="Marketing channels")
    channels.add_column("Channel", style="cyan")
    channels.add_column("Budget %", justify="right")
    channels.add_column("Description")
    for ch in plan.channels:
        channels.add_row(ch.name, f"{ch.estimated_budget_percentage:g}", ch.description)
    console.print(Panel(plan.strategy_overview, title="Marketing plan"))
    console.print(channels)

    swot = strategy.swot
    swot_table = Table(title="SWOT", show_lines=True)
    swot_table.add_column("Strengths", style="green")
    swot_table.add_column("Weaknesses", style="red")
    swot_table.add_row(_bullets(swot.strengths), _bullets(swot.weaknesses))
    swot_table.add_row("[bold]Opportunities[/bold]", "[bold]Threats[/bold]")
    swot_table.add_row(_bullets(swot.opportunities), _bullets(swot.threats))
    console.print(swot_table)

    roadmap = Table(title="Roadmap")
    roadmap.add_column("Phase", style="cyan")
    roadmap.add_column("Duration")
    roadmap.add_column("Focus")
    roadmap.add_column("Milestones")
    for phase in strategy.roadmap:
        roadmap.add_row(phase.phase_name, phase.duration, phase.focus_area, _bullets(phase.milestones))
    console.print(roadmap)

    risks = Table(title="Risks")
    risks.add_column("Risk", style="yellow")
    risks.add_column("Impact")
    risks.add_column("Probability", justify="right")
    risks.add_column("Mitigation")
    for risk in strategy.risks:
        risks.add_row(risk.risk_name, risk.impact_level, f"{risk.probability:g}/10", risk.mitigation_strategy)
    console.print(risks)

    ca = strategy.competitor_analysis
    dd = ca.deep_dive
    competitors = "\n".join(f"• [bold]{c.name}[/bold]: {c.description}" for c in ca.top_competitors)
    console.print(Panel(
        f"{competitors or '[dim]No competitors found[/dim]'}\n\n"
        f"[bold]Deep dive: {dd.company_name}[/bold]\n"
        f"Strategy: {dd.strategy}\nRevenue model: {dd.revenue_model}\n"
        f"Strengths:\n{_bullets(dd.strengths)}\nWeaknesses:\n{_bullets(dd.weaknesses)}",
        title="Competitor analysis",
    ))
    for source in ca.sources:
        console.print(f"[dim]source:[/dim] {source.title} ({source.url})")


def _load_strategy(path: Path) -> BusinessStrategy:
    """Read a saved strategy; tolerates wrapping text around the JSON."""
    return BusinessStrategy.from_json(extract_json(path.read_text(encoding="utf-8")))


def _read_image(path: Path) -> str:
    mime = _IMAGE_MIME.get(path.suffix.lower(), "image/jpeg")
    return f"data:{mime};base64,{base64.b64encode(path.read_bytes()).decode('ascii')}"


def _report_llm_error(e: httpx.HTTPError) -> None:
    if isinstance(e, httpx.HTTPStatusError):
        rprint(f"[red]LLM server error[/red]: {e.response.status_code} from {e.request.url}")
    else:
        rprint(f"[red]LLM server unreachable.[/red]\n  Error: {e}\n  Check base_url in STRATGEN_CONFIG_PATH.")


@app.command()
def generate(
    industry: str = typer.Option(..., help="Industry or sector."),
    description: str = typer.Option("", help="Short description of the business."),
    location_type: str = typer.Option("Local", help="Customer geography (Local, National, Global...)."),
    market_reach: str = typer.Option("", help="Market location or reach, e.g. a city or region."),
    budget: str = typer.Option("", help="Available budget, e.g. '$50k'."),
    target_customers: str = typer.Option("", help="Target customer type and demographics."),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also save the report JSON to this file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging to stderr."),
) -> None:
    """Generate a business strategy report."""
    _setup_logging(verbose)
    config = load_config()
    user_input = UserInput(
        industry=industry,
        description=description,
        location_type=location_type,
        market_reach=market_reach,
        budget=budget,
        target_customers=target_customers,
    )
    if not as_json:
        rprint(f"[dim]Generating strategy with {config.model_for(PROFILE_STRATEGY).model}...[/dim]")
    try:
        strategy = asyncio.run(
            generate_strategy(user_input, chat_client_factory=build_chat_client, config=config)
        )
    except StrategyGenerationError as e:
        rprint(f"[red]Strategy generation failed[/red]: {e}")
        sys.exit(1)
    except httpx.HTTPError as e:
        _report_llm_error(e)
        sys.exit(1)

    data = strategy.to_json()
    if output:
        output.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    if as_json:
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return
    _render_strategy(Console(), strategy)
    if output:
        rprint(f"[dim]Saved to {output}[/dim]")


@app.command()
def chat(
    strategy_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved strategy JSON."),
    message: str = typer.Argument(..., help="Your question about the strategy."),
    thinking: bool = typer.Option(False, "--thinking", "-t", help="Use the reasoning (thinking) model."),
    image: Optional[Path] = typer.Option(None, "--image", "-i", exists=True, dir_okay=False, help="Attach an image."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging to stderr."),
) -> None:
    """Ask one question about a saved strategy."""
    _setup_logging(verbose)
    config = load_config()
    try:
        context = _load_strategy(strategy_file)
    except ExtractionError as e:
        rprint(f"[red]Could not read strategy from {strategy_file}[/red]: {e.reason}")
        sys.exit(1)

    reply = asyncio.run(
        chat_with_strategy(
            [],
            message,
            context,
            use_thinking=thinking,
            attached_image=_read_image(image) if image else None,
            chat_client_factory=build_chat_client,
            config=config,
        )
    )
    Console().print(Markdown(reply.text))


@app.command()
def extract(
    file: Optional[Path] = typer.Argument(None, exists=True, dir_okay=False, help="Text file (default: stdin)."),
    indent: int = typer.Option(2, help="Indentation of the printed JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging to stderr."),
) -> None:
    """Recover the JSON object from raw model output and print it."""
    _setup_logging(verbose)
    text = file.read_text(encoding="utf-8") if file else sys.stdin.read()
    try:
        value = extract_json(text)
    except ExtractionError as e:
        typer.echo(f"Extraction failed: {e.reason} ({e.candidates} candidate(s))", err=True)
        sys.exit(1)
    typer.echo(json.dumps(value, indent=indent, ensure_ascii=False))


@app.command()
def serve(host: str = "127.0.0.1", port: int = 8787) -> None:
    """Run the HTTP API (FastAPI + uvicorn)."""
    import uvicorn
    uvicorn.run("stratgen.interfaces.http_api:app", host=host, port=port, reload=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
