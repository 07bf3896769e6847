# -*- coding: utf-8 -*-
"""
N-Print CLI
====================

Command-line front end of the nitrogen-footprint engine.

Usage:
    nprint calculate --tables tables.yaml --country France --inputs me.yaml
    nprint countries --tables tables.yaml
    nprint servings --tables tables.yaml --json
    nprint version
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nprint.calculation import build_chart_series, calculate
from nprint.catalog import country_sewage_outlook, list_countries, serving_size_rows
from nprint.config import HEADER_POLICIES, get_config
from nprint.exceptions import NPrintException
from nprint.models import ChartSeries, CalculationResult, SewageTreatment, UserInputs
from nprint.snapshot import ReferenceTables, load_reference_tables

logger = logging.getLogger(__name__)

# Create the main app
app = typer.Typer(
    name="nprint",
    help="N-Print: nitrogen footprint calculator",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    level = logging.getLevelName(get_config().log_level.upper())
    if verbose:
        level = logging.DEBUG
    elif not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _emit_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


def _load_tables(path: Path, header_policy: Optional[str]) -> ReferenceTables:
    if header_policy is not None and header_policy not in HEADER_POLICIES:
        console.print(
            f"[red]ERROR[/red] Unknown header policy '{header_policy}' "
            f"(expected one of: {', '.join(HEADER_POLICIES)})"
        )
        raise typer.Exit(1)
    try:
        return load_reference_tables(path, header_policy=header_policy)
    except NPrintException as e:
        console.print(f"[red]ERROR[/red] {escape(e.message)}")
        if e.context:
            console.print(f"[dim]{escape(str(e.context))}[/dim]")
        raise typer.Exit(1)


def _parse_food_options(food: List[str]) -> Dict[str, str]:
    servings: Dict[str, str] = {}
    for item in food:
        category, sep, count = item.rpartition("=")
        if not sep or not category.strip():
            console.print(f"[red]ERROR[/red] Expected CATEGORY=COUNT, got '{escape(item)}'")
            raise typer.Exit(1)
        servings[category.strip()] = count
    return servings


def _load_inputs(path: Optional[Path], food: List[str]) -> UserInputs:
    data: Dict[str, Any] = {}
    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix.lower() == ".json":
                    data = json.load(f) or {}
                else:
                    data = yaml.safe_load(f) or {}
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            console.print(f"[red]ERROR[/red] Failed to read inputs from {path}: {escape(str(e))}")
            raise typer.Exit(1)

    if food:
        servings = dict(data.get("food_servings") or {})
        servings.update(_parse_food_options(food))
        data = {**data, "food_servings": servings}

    try:
        return UserInputs.model_validate(data)
    except ValidationError as e:
        console.print(f"[red]ERROR[/red] Invalid inputs: {escape(str(e))}")
        raise typer.Exit(1)


def _render_result(result: CalculationResult, outlook: Optional[str]) -> None:
    summary = Table(title=f"Nitrogen footprint: {result.country}")
    summary.add_column("", style="cyan")
    summary.add_column("You (kg N/yr)", justify="right", style="green")
    summary.add_column("Country average (kg N/yr)", justify="right", style="yellow")
    summary.add_row("Total", f"{result.total_n:.2f}", f"{result.average_n:.2f}")
    summary.add_row(
        "Food",
        f"{result.details.total_user_food:.2f}",
        f"{result.details.total_average_food:.2f}",
    )
    summary.add_row(
        "Energy",
        f"{result.details.total_user_energy:.2f}",
        f"{result.details.total_average_energy:.2f}",
    )
    console.print(summary)

    food = Table(title="Food breakdown")
    food.add_column("Bucket", style="cyan")
    food.add_column("You", justify="right", style="green")
    food.add_column("Country average", justify="right", style="yellow")
    for bucket in ("meat", "dairy", "plant"):
        food.add_row(
            bucket,
            f"{getattr(result.food_breakdown, bucket):.2f}",
            f"{getattr(result.average_food_breakdown, bucket):.2f}",
        )
    console.print(food)

    points = build_chart_series(result, ChartSeries.ENERGY)
    if points:
        energy = Table(title="Energy breakdown")
        energy.add_column("Component", style="cyan")
        energy.add_column("kg N/yr", justify="right", style="green")
        energy.add_column("Share", justify="right", style="dim")
        for point in points:
            energy.add_row(point.label, f"{point.value:.2f}", f"{point.percent_of_total:.2f}%")
        console.print(energy)

    details = result.details
    console.print(
        f"  ISO3: [cyan]{details.iso3 or '-'}[/cyan]  "
        f"Income: [cyan]{details.income_tier or '-'}[/cyan]  "
        f"Sewage: [cyan]{result.sewage_treatment.value}[/cyan]"
    )
    if outlook:
        console.print(f"  [dim]{outlook}[/dim]")
    for warning in result.warnings:
        console.print(f"  [yellow]WARNING[/yellow] {escape(warning)}")
    console.print(f"  [dim]Provenance: {result.provenance_hash}[/dim]")


@app.command("calculate")
def calculate_footprint(
    tables: Path = typer.Option(..., "--tables", "-t", help="Reference tables (JSON or YAML)"),
    country: str = typer.Option(..., "--country", "-c", help="Country to calculate for"),
    inputs: Optional[Path] = typer.Option(None, "--inputs", "-i", help="User inputs (JSON or YAML)"),
    food: List[str] = typer.Option([], "--food", "-f", help="Weekly servings as CATEGORY=COUNT"),
    sewage: SewageTreatment = typer.Option(
        SewageTreatment.UNKNOWN, "--sewage", "-s", case_sensitive=False,
        help="Household sewage treatment level",
    ),
    header_policy: Optional[str] = typer.Option(None, "--header-policy", help="strict or warn"),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Calculate the nitrogen footprint for a country and a set of inputs"""
    _configure_logging(verbose)
    snapshot = _load_tables(tables, header_policy)
    user_inputs = _load_inputs(inputs, food)

    try:
        outcome = calculate(snapshot, user_inputs, country, sewage)
    except NPrintException as e:
        console.print(f"[red]ERROR[/red] {escape(e.message)}")
        raise typer.Exit(1)

    if not outcome.ok:
        if output_json:
            _emit_json({"status": "ERROR", **outcome.to_dict()})
        else:
            console.print(f"[red]FAIL[/red] {escape(outcome.message)} ({outcome.reason.value})")
        raise typer.Exit(1)

    outlook = country_sewage_outlook(snapshot, country)
    if output_json:
        _emit_json({"status": "OK", "sewage_outlook": outlook, **outcome.to_dict()})
    else:
        _render_result(outcome, outlook)


@app.command()
def countries(
    tables: Path = typer.Option(..., "--tables", "-t", help="Reference tables (JSON or YAML)"),
    header_policy: Optional[str] = typer.Option(None, "--header-policy", help="strict or warn"),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """List the selectable countries"""
    _configure_logging(verbose)
    snapshot = _load_tables(tables, header_policy)
    names = list_countries(snapshot)

    if output_json:
        _emit_json(names)
        return
    if not names:
        console.print("[yellow]No countries found[/yellow]")
        return
    for name in names:
        console.print(name)


@app.command()
def servings(
    tables: Path = typer.Option(..., "--tables", "-t", help="Reference tables (JSON or YAML)"),
    header_policy: Optional[str] = typer.Option(None, "--header-policy", help="strict or warn"),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Show the serving size of each food category"""
    _configure_logging(verbose)
    snapshot = _load_tables(tables, header_policy)
    rows = serving_size_rows(snapshot)

    if output_json:
        _emit_json([{"category": r.category, "grams": r.grams} for r in rows])
        return
    if not rows:
        console.print("[yellow]No serving sizes found[/yellow]")
        return

    table = Table(title="Serving sizes")
    table.add_column("Food", style="cyan")
    table.add_column("Serving (g)", justify="right", style="green")
    for row in rows:
        table.add_row(row.category, f"{row.grams:g}")
    console.print(table)


@app.command()
def version():
    """Show N-Print version"""
    from nprint._version import __version__

    console.print(f"[bold green]N-Print v{__version__}[/bold green]")
    console.print("Nitrogen footprint calculator")


if __name__ == "__main__":
    app()
