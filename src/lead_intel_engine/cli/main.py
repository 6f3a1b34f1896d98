"""Main CLI entry point for the leadintel command."""

import json
import logging
import click
from pathlib import Path
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from typing import Optional

from ..core.config import ScoringModelManager, ConversionFactor, DIMENSIONS
from ..core.models import LeadAttributes, LeadPriority
from ..core.scorer import LeadScorer
from ..core.predictions import ConversionPredictor
from ..follow_up.models import RoutingDecision
from ..follow_up.scheduler import FollowUpScheduler
from ..follow_up.sequences import SequenceSelector

console = Console()

PRIORITY_COLORS = {"critical": "red", "high": "yellow", "medium": "blue", "low": "dim"}


def get_manager(config_path: Optional[str] = None) -> ScoringModelManager:
    """Get scoring model manager."""
    path = Path(config_path) if config_path else None
    return ScoringModelManager(path)


def load_lead(path: str) -> LeadAttributes:
    """Read a lead snapshot from a JSON file."""
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{path} is not valid JSON: {e}", param_hint="LEAD_JSON")

    if not isinstance(data, dict):
        raise click.BadParameter(f"{path} must contain a JSON object", param_hint="LEAD_JSON")

    return LeadAttributes.from_dict(data)


@click.group()
@click.version_option(version="1.0.0", prog_name="leadintel")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Lead Intelligence Engine - score inbound leads and plan follow-ups.

    \b
    Quick Start:
      leadintel score lead.json --explain      # Score a lead
      leadintel predict lead.json              # Conversion estimate
      leadintel plan lead.json -a rep-7        # Build a follow-up schedule
      leadintel sequences                      # List follow-up sequences
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ============================================================================
# SCORING COMMANDS
# ============================================================================

@cli.command()
@click.argument("lead_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--explain", is_flag=True, help="Show every scoring factor")
@click.option("--config", "config_path", help="Custom scoring model path")
def score(lead_json: str, explain: bool, config_path: Optional[str]):
    """Score a lead from a JSON file."""
    model = get_manager(config_path).model
    scorer = LeadScorer(model)
    lead = load_lead(lead_json)
    breakdown = scorer.score(lead)

    table = Table(title=f"Score: {breakdown.total} ({scorer.temperature_for(breakdown.total)})")
    table.add_column("Dimension", style="cyan")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Weight", justify="right", style="dim")

    for name, weight in model.weights.as_dict().items():
        table.add_row(name, f"{getattr(breakdown, name):g}", f"{weight:.2f}")

    console.print(table)
    console.print(f"Priority: [bold]{scorer.priority_for(breakdown.total).value}[/bold]")

    if explain:
        console.print(Panel(scorer.explain(breakdown), title="Explanation"))


@cli.command()
@click.argument("lead_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "config_path", help="Custom scoring model path")
def predict(lead_json: str, config_path: Optional[str]):
    """Estimate conversion probability, timing and deal value."""
    model = get_manager(config_path).model
    lead = load_lead(lead_json)
    breakdown = LeadScorer(model).score(lead)
    prediction = ConversionPredictor(model).predict(lead, breakdown)

    positive = ", ".join(f.value for f in prediction.factors.positive) or "(none)"
    negative = ", ".join(f.value for f in prediction.factors.negative) or "(none)"

    console.print(Panel.fit(
        f"Score: [bold]{breakdown.total}[/bold]\n"
        f"Probability: [cyan]{prediction.probability:.0%}[/cyan]\n"
        f"Confidence: [cyan]{prediction.confidence:.0%}[/cyan]\n"
        f"Time to conversion: [cyan]{prediction.time_to_conversion} days[/cyan]\n"
        f"Estimated value: [green]${prediction.estimated_value:,}[/green]\n\n"
        f"[bold]Positive:[/bold] {positive}\n"
        f"[bold]Negative:[/bold] {negative}",
        title="Conversion Prediction"
    ))


@cli.command()
@click.argument("lead_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--assignee", "-a", help="Salesperson the lead is routed to")
@click.option("--priority", "-p", type=click.Choice([p.value for p in LeadPriority]),
              help="Routing priority (defaults to the score-based priority)")
@click.option("--config", "config_path", help="Custom scoring model path")
def plan(lead_json: str, assignee: Optional[str], priority: Optional[str], config_path: Optional[str]):
    """Build a follow-up schedule for a lead."""
    model = get_manager(config_path).model
    scorer = LeadScorer(model)
    lead = load_lead(lead_json)
    breakdown = scorer.score(lead)
    prediction = ConversionPredictor(model).predict(lead, breakdown)

    routing = RoutingDecision(
        assigned_to=assignee,
        priority=LeadPriority(priority) if priority else scorer.priority_for(breakdown.total),
    )

    scheduler = FollowUpScheduler()
    schedule = scheduler.build_schedule(lead, breakdown, routing, prediction)

    table = Table(title=f"Follow-up plan: {schedule.sequence_id or 'default'} (score {breakdown.total})")
    table.add_column("When", style="dim")
    table.add_column("Type")
    table.add_column("Priority", justify="center")
    table.add_column("Assignee", style="cyan")
    table.add_column("Mode")
    table.add_column("Subject", max_width=45)

    for action in schedule.actions:
        color = PRIORITY_COLORS[action.priority.value]
        table.add_row(
            action.scheduled_at.strftime("%Y-%m-%d %H:%M"),
            action.type.value,
            f"[{color}]{action.priority.value}[/{color}]",
            action.assigned_to,
            "auto" if action.is_automated else "manual",
            scheduler.render_subject(action, lead) or "[dim]-[/dim]",
        )

    console.print(table)


@cli.command()
def sequences():
    """List configured follow-up sequences in selection order."""
    table = Table(title="Follow-up Sequences")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="cyan")
    table.add_column("Trigger")
    table.add_column("Steps", justify="right")

    for index, sequence in enumerate(SequenceSelector().sequences, 1):
        trigger = sequence.triggers
        parts = []
        if trigger.lead_score:
            parts.append(f"score {trigger.lead_score.min or 0}-{trigger.lead_score.max or 100}")
        if trigger.budget_range:
            parts.append(f"budget in {', '.join(trigger.budget_range)}")
        if trigger.industry:
            parts.append(f"industry in {', '.join(trigger.industry)}")
        if trigger.urgency:
            parts.append(f"urgency in {', '.join(trigger.urgency)}")
        table.add_row(str(index), sequence.id, "; ".join(parts) or "any", str(len(sequence.steps)))

    console.print(table)


# ============================================================================
# CONFIGURATION COMMANDS
# ============================================================================

@cli.group()
def config():
    """Inspect and tune the scoring model."""
    pass


@config.command("show")
@click.option("--config", "config_path", help="Custom scoring model path")
def config_show(config_path: Optional[str]):
    """Show the active scoring model."""
    manager = get_manager(config_path)
    model = manager.model

    weights = "\n".join(f"  {name}: {weight:.2f}" for name, weight in model.weights.as_dict().items())
    console.print(Panel.fit(
        f"Version: [cyan]{model.version}[/cyan]\n"
        f"File: [dim]{manager.config_path}[/dim]\n\n"
        f"[bold]Weights:[/bold]\n{weights}\n\n"
        f"[bold]Thresholds:[/bold] hot {model.thresholds.hot}, "
        f"warm {model.thresholds.warm}, cold {model.thresholds.cold}",
        title="Scoring Model"
    ))


@config.command("set-weight")
@click.argument("dimension", type=click.Choice(DIMENSIONS))
@click.argument("weight", type=float)
@click.argument("rebalance", type=click.Choice(DIMENSIONS))
@click.option("--config", "config_path", help="Custom scoring model path")
def config_set_weight(dimension: str, weight: float, rebalance: str, config_path: Optional[str]):
    """Set WEIGHT for DIMENSION, moving the difference onto REBALANCE."""
    if dimension == rebalance:
        raise click.BadParameter("REBALANCE must differ from DIMENSION")

    manager = get_manager(config_path)
    current = manager.model.weights.as_dict()
    adjusted = current[rebalance] - (weight - current[dimension])
    if adjusted < 0:
        raise click.ClickException(f"Not enough weight on {rebalance} to rebalance")

    manager.update_weights(**{dimension: weight, rebalance: round(adjusted, 6)})
    console.print(f"[green]✓ {dimension}={weight:.2f}, {rebalance}={adjusted:.2f}[/green]")


@config.command("set-threshold")
@click.option("--hot", type=int, required=True)
@click.option("--warm", type=int, required=True)
@click.option("--cold", type=int, required=True)
@click.option("--config", "config_path", help="Custom scoring model path")
def config_set_threshold(hot: int, warm: int, cold: int, config_path: Optional[str]):
    """Update temperature thresholds."""
    if not hot > warm > cold >= 0:
        raise click.BadParameter("Thresholds must satisfy hot > warm > cold >= 0")

    get_manager(config_path).update_thresholds(hot, warm, cold)
    console.print(f"[green]✓ Thresholds: hot {hot}, warm {warm}, cold {cold}[/green]")


@config.command("set-multiplier")
@click.argument("factor", type=click.Choice([f.value for f in ConversionFactor]))
@click.argument("multiplier", type=float)
@click.option("--config", "config_path", help="Custom scoring model path")
def config_set_multiplier(factor: str, multiplier: float, config_path: Optional[str]):
    """Set the conversion MULTIPLIER for FACTOR."""
    if multiplier <= 0:
        raise click.BadParameter("MULTIPLIER must be positive")

    get_manager(config_path).set_conversion_multiplier(ConversionFactor(factor), multiplier)
    console.print(f"[green]✓ {factor} = {multiplier}[/green]")


if __name__ == "__main__":
    cli()
