"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from diettrend.app_logging import configure_logging
from diettrend.config import get_settings, reload_settings
from diettrend.data.series_loader import load_series
from diettrend.labels.parser import parse_label
from diettrend.planning.budget import calculate_budget, update_deficit_mode
from diettrend.planning.compass import LimitStatus, MacroSnapshot, calculate_compass
from diettrend.profiles.body_calc import Sex
from diettrend.tracking.diagnostics import build_health_report, format_health_report
from diettrend.tracking.metrics import compute_metric_trend

app = typer.Typer(
    help="Diet tracking: weight trends, energy budget and nutrition labels",
    no_args_is_help=True,
)
console = Console()

config_app = typer.Typer(help="Show or create the configuration file")
app.add_typer(config_app, name="config")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def parse_day(date_str: Optional[str]) -> Optional[date]:
    """Parse an optional YYYY-MM-DD option."""
    if date_str is None:
        return None
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        console.print(f"[red]Invalid date '{date_str}', expected YYYY-MM-DD[/red]")
        raise typer.Exit(1)


def load_series_or_exit(csv_path: Path) -> dict[date, float]:
    """Load a CSV series, turning loader errors into a CLI error."""
    try:
        return load_series(csv_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Could not load {csv_path}: {e}[/red]")
        raise typer.Exit(1)


def wants_json(json_output: bool) -> bool:
    """Apply the configured default output format to a --json flag."""
    return json_output or get_settings().defaults.output_format == "json"


def _fmt(value: Optional[float], format_spec: str = ".1f") -> str:
    return "-" if value is None else format(value, format_spec)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Path to config.yaml"
    ),
) -> None:
    """Configure logging and settings before any command."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)
    try:
        if config_path is not None:
            reload_settings(config_path)
        else:
            get_settings()
    except (ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1)


# ============================================================================
# Trend Commands
# ============================================================================


@app.command()
def trend(
    csv_path: Path = typer.Argument(..., help="CSV with date,value columns (kg)"),
    today_str: Optional[str] = typer.Option(
        None, "--today", help="Reference day (YYYY-MM-DD, default: today)"
    ),
    tail: Optional[int] = typer.Option(
        None, "--tail", "-n", help="Number of real days to show"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the EWMA weight trend with a 14-day projection."""
    settings = get_settings()
    engine = settings.trend.engine()
    history = load_series_or_exit(csv_path)
    today = parse_day(today_str)

    points = engine.compute_trend(history, today=today)
    stats = engine.get_stats(points)

    if wants_json(json_output):
        output_json({
            "success": True,
            "command": "trend",
            "data": {
                "points": [p.to_dict() for p in points],
                "stats": None if stats is None else {
                    "current_trend": stats.current_trend,
                    "weekly_change": stats.weekly_change,
                    "daily_imbalance": stats.daily_imbalance,
                },
            },
        })
        return

    if not points:
        console.print("[yellow]No measurements found[/yellow]")
        return

    tail_days = tail if tail is not None else settings.defaults.tail_days
    real = [p for p in points if not p.is_projected]
    projected = [p for p in points if p.is_projected]

    table = Table(title="Weight trend")
    table.add_column("Date")
    table.add_column("Weight", justify="right")
    table.add_column("Trend", justify="right")
    table.add_column("Imbalance", justify="right")
    table.add_column("", style="dim")

    for point in real[-tail_days:] + projected:
        if point.is_projected:
            note = "projected"
        elif point.is_interpolated:
            note = "filled"
        else:
            note = ""
        table.add_row(
            point.date.isoformat(),
            _fmt(point.raw_value),
            _fmt(point.trend_value, ".2f"),
            _fmt(point.imbalance, "+.0f"),
            note,
        )

    console.print(table)

    if stats is None:
        console.print("[dim]Not enough data for trend statistics yet[/dim]")
    else:
        direction = "deficit" if stats.daily_imbalance < 0 else "surplus"
        console.print(f"Current trend: [bold]{stats.current_trend:.1f} kg[/bold]")
        console.print(f"Weekly change: {stats.weekly_change:+.2f} kg")
        console.print(f"Implied {direction}: {abs(stats.daily_imbalance):.0f} kcal/day")


@app.command()
def metric(
    csv_path: Path = typer.Argument(..., help="CSV with date,value columns"),
    ignore_latest: bool = typer.Option(
        False, "--ignore-latest", help="Drop the most recent (partial) day"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the smoothed current value and 7-day change of any metric."""
    settings = get_settings()
    history = load_series_or_exit(csv_path)
    result = compute_metric_trend(
        history,
        ignore_most_recent_day=ignore_latest,
        smoothing=settings.trend.smoothing,
    )

    if wants_json(json_output):
        output_json({
            "success": True,
            "command": "metric",
            "data": {"current": result.current, "delta_7_day": result.delta_7_day},
        })
        return

    if not result.has_data:
        console.print("[yellow]No measurements found[/yellow]")
        return

    console.print(f"Current (EWMA): [bold]{result.current:.2f}[/bold]")
    console.print(f"7-day change:   {_fmt(result.delta_7_day, '+.2f')}")


@app.command()
def report(
    weight_csv: Path = typer.Option(..., "--weight", help="Weight CSV (kg)"),
    body_fat_csv: Optional[Path] = typer.Option(
        None, "--body-fat", help="Body fat CSV (fraction 0-1)"
    ),
    vo2_csv: Optional[Path] = typer.Option(None, "--vo2", help="VO2max CSV (ml/kg/min)"),
    active_csv: Optional[Path] = typer.Option(
        None, "--active", help="Active energy CSV (kcal)"
    ),
    height_cm: Optional[float] = typer.Option(None, "--height", help="Height in cm"),
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    sex: Sex = typer.Option(Sex.UNSPECIFIED, "--sex", help="Biological sex"),
    today_str: Optional[str] = typer.Option(
        None, "--today", help="Reference day (YYYY-MM-DD, default: today)"
    ),
) -> None:
    """Show a combined weight, body composition and activity report."""
    settings = get_settings()
    health = build_health_report(
        weight_history=load_series_or_exit(weight_csv),
        body_fat_history=load_series_or_exit(body_fat_csv) if body_fat_csv else None,
        vo2_history=load_series_or_exit(vo2_csv) if vo2_csv else None,
        active_energy_history=load_series_or_exit(active_csv) if active_csv else None,
        height_cm=height_cm,
        age=age,
        sex=sex,
        today=parse_day(today_str),
        engine=settings.trend.engine(),
    )
    console.print(format_health_report(health))


# ============================================================================
# Budget Commands
# ============================================================================


@app.command()
def budget(
    bmr: Optional[float] = typer.Option(None, "--bmr", help="Basal metabolic rate (kcal)"),
    active: float = typer.Option(0.0, "--active", help="Active energy burned yesterday (kcal)"),
    eaten: float = typer.Option(0.0, "--eaten", help="Energy consumed today (kcal)"),
    deficit: Optional[float] = typer.Option(
        None, "--deficit", help="Daily deficit (default: from config)"
    ),
    auto: Optional[bool] = typer.Option(
        None, "--auto/--no-auto", help="Auto-deficit (default: from config)"
    ),
    deficit_mode: Optional[bool] = typer.Option(
        None, "--deficit-mode/--maintenance-mode", help="Current auto-deficit mode"
    ),
    weight_today: Optional[float] = typer.Option(
        None, "--weight-today", help="Today's weight, applied to the auto-deficit bounds"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Calculate today's energy budget."""
    cfg = get_settings().deficit
    base_deficit = deficit if deficit is not None else cfg.base_deficit
    auto_enabled = auto if auto is not None else cfg.auto_enabled
    mode = deficit_mode if deficit_mode is not None else cfg.in_deficit_mode

    if auto_enabled:
        mode = update_deficit_mode(weight_today, cfg.upper_bound, cfg.lower_bound, mode)

    result = calculate_budget(
        bmr=bmr,
        active_energy_yesterday=active,
        dietary_energy_today=eaten,
        base_deficit=base_deficit,
        auto_deficit_enabled=auto_enabled,
        is_currently_in_deficit_mode=mode,
    )

    if wants_json(json_output):
        output_json({
            "success": True,
            "command": "budget",
            "data": result.to_dict(),
        })
        return

    color = "green" if result.remaining_energy >= 0 else "red"
    console.print(f"TDEE:       {result.total_energy_expenditure:.0f} kcal")
    console.print(
        f"Deficit:    {result.effective_deficit:.0f} kcal"
        f" ({'active' if result.is_deficit_active else 'maintenance'})"
    )
    console.print(f"Daily goal: [bold]{result.daily_goal:.0f} kcal[/bold]")
    console.print(f"Remaining:  [{color}]{result.remaining_energy:.0f} kcal[/{color}]")


@app.command()
def compass(
    kcal: float = typer.Option(0.0, "--kcal", help="Energy eaten today (kcal)"),
    protein: float = typer.Option(0.0, "--protein", help="Protein (g)"),
    fiber: float = typer.Option(0.0, "--fiber", help="Fiber (g)"),
    fat: float = typer.Option(0.0, "--fat", help="Fat (g)"),
    sat_fat: float = typer.Option(0.0, "--sat-fat", help="Saturated fat (g)"),
    sugar: float = typer.Option(0.0, "--sugar", help="Sugar (g)"),
    sodium: float = typer.Option(0.0, "--sodium", help="Sodium (g)"),
    weight_kg: Optional[float] = typer.Option(None, "--weight", help="Body weight (kg)"),
) -> None:
    """Compare today's intake with protein, fiber, fat, sugar and salt guidelines."""
    intake = MacroSnapshot(
        kcal=kcal,
        protein=protein,
        fiber=fiber,
        fat=fat,
        sat_fat=sat_fat,
        sugar=sugar,
        sodium=sodium,
    )
    result = calculate_compass(intake, weight_kg=weight_kg)

    colors = {LimitStatus.OK: "green", LimitStatus.LOW: "yellow", LimitStatus.HIGH: "red"}
    table = Table(title="Health compass")
    table.add_column("Gauge")
    table.add_column("Value", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Status")
    for reading in result.readings():
        color = colors[reading.status]
        table.add_row(
            reading.label,
            f"{reading.value:.1f}{reading.unit}",
            f"{reading.target:.1f}{reading.unit}",
            f"[{color}]{reading.status.value}[/{color}]",
        )
    console.print(table)


# ============================================================================
# Label Commands
# ============================================================================


@app.command()
def label(
    text_path: Optional[Path] = typer.Argument(
        None, help="File with OCR text (default: read stdin)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Extract nutrient values from nutrition-label OCR text."""
    if text_path is None or str(text_path) == "-":
        text = sys.stdin.read()
    else:
        try:
            text = text_path.read_text(encoding="utf-8")
        except OSError as e:
            console.print(f"[red]Could not read {text_path}: {e}[/red]")
            raise typer.Exit(1)

    result = parse_label(text, get_settings().labels)

    if wants_json(json_output):
        output_json({
            "success": True,
            "command": "label",
            "data": {"has_data": result.has_data, "nutrients": result.as_dict()},
        })
        return

    if not result.has_data:
        console.print("[yellow]No nutrient values recognized; enter them manually.[/yellow]")
        return

    table = Table(title="Nutrition label")
    table.add_column("Nutrient")
    table.add_column("Value", justify="right")
    for name, value in result.as_dict().items():
        table.add_row(name, _fmt(value))
    console.print(table)


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("show")
def config_show() -> None:
    """Print the active settings as JSON."""
    output_json(get_settings().to_dict())


@config_app.command("init")
def config_init(
    path: Optional[Path] = typer.Option(None, "--path", help="Where to write config.yaml"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a config.yaml with the current settings."""
    settings = get_settings()
    target = path if path is not None else Path.home() / ".diettrend" / "config.yaml"
    if target.exists() and not force:
        console.print(f"[yellow]{target} already exists (use --force to overwrite)[/yellow]")
        raise typer.Exit(1)
    settings.save(target)
    console.print(f"[green]Wrote {target}[/green]")


if __name__ == "__main__":
    app()
