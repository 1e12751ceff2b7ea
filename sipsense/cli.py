"""
Sipsense CLI
Inspect recommendations and notifications, or run a live simulated session
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from sipsense.kernel import catalog
from sipsense.kernel.config import load_config
from sipsense.kernel.daemon import WellnessDaemon
from sipsense.kernel.state_model import SnapshotUpdateRejected
from sipsense.kernel.time_utils import ManualClock, resolve_tz


app = typer.Typer(help="Sipsense wellness kernel CLI")
console = Console()

URGENCY_STYLE = {"high": "red", "medium": "yellow", "low": "green"}
TYPE_STYLE = {"urgent": "red", "suggestion": "blue", "reminder": "yellow", "achievement": "green"}

SetOption = typer.Option(None, "--set", "-s", help="Snapshot override, e.g. water_intake=0")
AtOption = typer.Option(None, help="Evaluate at this local time (ISO 8601), default now")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    config: str = typer.Option(None, help="Path to kernel.yaml"),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    load_config(config)


def _parse_overrides(pairs: list[str] | None) -> dict:
    overrides = {}
    for pair in pairs or []:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{pair}'")
        overrides[key.strip()] = yaml.safe_load(raw)
    return overrides


def _session(at: str | None, pairs: list[str] | None) -> WellnessDaemon:
    cfg = load_config()
    clock = None
    if at:
        when = datetime.fromisoformat(at)
        if when.tzinfo is None:
            when = when.replace(tzinfo=resolve_tz(cfg.timezone))
        clock = ManualClock(when)

    daemon = WellnessDaemon(config=cfg, clock=clock)
    try:
        daemon.update_snapshot(_parse_overrides(pairs))
    except SnapshotUpdateRejected as e:
        console.print(f"[red]Rejected: {e}[/red]")
        raise typer.Exit(code=2)
    return daemon


def _print_recommendation(daemon: WellnessDaemon) -> None:
    s = daemon.get_recommendation()
    style = URGENCY_STYLE[s.urgency.value]
    console.print(f"\n[bold]{s.drink}[/bold]  [{style}]{s.urgency.value} urgency[/{style}]")
    console.print(f"{s.reason}")
    console.print(f"₹{s.cost} · {s.calories} kcal · {s.timing}")
    console.print(f"Benefits: {', '.join(s.benefits)}  [dim](rule: {s.rule})[/dim]\n")


def _print_notifications(daemon: WellnessDaemon) -> None:
    feed = daemon.list_active_notifications()
    if not feed:
        console.print("[dim]No notifications right now[/dim]")
        return

    table = Table(title="Smart Notifications")
    table.add_column("#", style="cyan")
    table.add_column("Priority")
    table.add_column("Type")
    table.add_column("Title", style="bold")
    table.add_column("Message")
    table.add_column("Drink")
    for n in feed:
        style = TYPE_STYLE[n.type.value]
        drink = f"{n.drink.name} (₹{n.drink.cost})" if n.drink else ""
        table.add_row(
            str(n.id), str(n.priority), f"[{style}]{n.type.value}[/{style}]", n.title, n.message, drink
        )
    console.print(table)


@app.command()
def status(
    set_: list[str] = SetOption,
    at: str = AtOption,
):
    """Show snapshot, wellness score breakdown and the current recommendation"""
    daemon = _session(at, set_)
    snap = daemon.get_snapshot()
    insights = daemon.get_insights()

    table = Table(title="Activity Snapshot")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="magenta")
    for key, value in snap.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)

    breakdown = daemon.get_score_breakdown()
    console.print(
        f"\n[bold]Health score:[/bold] {breakdown.score}/100 ({insights['score_band']})"
    )
    for part in ("steps", "heart_rate", "sleep", "hydration", "workout"):
        console.print(f"  {part}: {getattr(breakdown, part):.1f}")

    hydration = insights["hydration"]
    console.print(
        f"Heart rate: {snap.heart_rate} bpm ({insights['heart_rate_status']}) · "
        f"Hydration: {hydration['intake_ml']}/{hydration['goal_ml']} ml "
        f"({hydration['percent']}%, {hydration['status']})"
    )
    _print_recommendation(daemon)


@app.command()
def recommend(
    set_: list[str] = SetOption,
    at: str = AtOption,
):
    """Print the drink recommendation for a snapshot"""
    _print_recommendation(_session(at, set_))


@app.command()
def notifications(
    set_: list[str] = SetOption,
    at: str = AtOption,
):
    """Run one notification pass and print the active feed"""
    daemon = _session(at, set_)
    asyncio.run(daemon.evaluate_notifications())
    _print_notifications(daemon)


@app.command("catalog")
def catalog_cmd(
    goal: str = typer.Option("hydration", help=f"One of: {', '.join(catalog.goals())}"),
):
    """List drink alternatives for a goal"""
    try:
        drinks = catalog.alternatives(goal)
    except catalog.UnknownGoal as e:
        console.print(f"[red]{e.args[0]}[/red]")
        raise typer.Exit(code=2)

    table = Table(title=f"{goal.title()} drinks")
    table.add_column("Drink", style="cyan")
    table.add_column("When")
    table.add_column("Cost", style="green")
    table.add_column("kcal")
    table.add_column("Benefit")
    for d in drinks:
        table.add_row(d.name, d.time, f"₹{d.cost}", str(d.calories), d.benefit)
    console.print(table)


@app.command()
def run(
    seconds: float = typer.Option(60.0, help="How long to run the live session"),
    set_: list[str] = SetOption,
):
    """Run a live simulated session and print notifications as they arrive"""
    daemon = _session(None, set_)

    async def _run() -> None:
        feed = daemon.bus.listen("notifications")
        await daemon.start()
        console.print(f"[bold]Session running for {seconds:.0f}s[/bold] (Ctrl+C to stop)")
        loop = asyncio.get_running_loop()
        deadline = loop.time() + seconds
        try:
            while (remaining := deadline - loop.time()) > 0:
                try:
                    event = await asyncio.wait_for(feed.get(), timeout=remaining)
                except asyncio.TimeoutError:
                    break
                style = TYPE_STYLE[event["type"]]
                console.print(
                    f"[{style}]● {event['title']}[/{style}] (p{event['priority']}) {event['message']}"
                )
        finally:
            await daemon.stop()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        pass

    console.print(f"\nFinal score: {daemon.get_score()}/100")
    _print_recommendation(daemon)
    _print_notifications(daemon)


if __name__ == "__main__":
    app()
