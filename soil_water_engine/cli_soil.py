"""CLI commands for soil water analysis."""

import csv
import json
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from soil_water_engine.config import get_settings
from soil_water_engine.engine import analyze_batch, analyze_soil, moisture_tension_curve
from soil_water_engine.errors import SoilWaterError
from soil_water_engine.logging_config import (
    get_logger,
    level_for_verbosity,
    setup_logging,
)
from soil_water_engine.models import ResultTier
from soil_water_engine.texture import classify_texture, texture_group
from soil_water_engine.validation import validate_input

console = Console()
logger = get_logger(__name__)

TIER_CHOICES = [tier.value for tier in ResultTier]


@click.group()
@click.option("--verbose", "-v", count=True, help="Increase logging verbosity")
@click.option("--log-file", type=click.Path(path_type=Path), help="Also log to file")
def soil(verbose: int, log_file: Path | None) -> None:
    """Soil water characteristic commands."""
    setup_logging(
        level=level_for_verbosity(verbose),
        log_file=str(log_file) if log_file else None,
        enable_file_logging=log_file is not None,
    )


def _analysis_options(func):
    """Shared organic matter / density / gravel / EC options."""
    func = click.option(
        "--ec",
        "electrical_conductivity",
        type=float,
        help="Electrical conductivity (dS/m, 0-20)",
    )(func)
    func = click.option(
        "--gravel", "gravel_content", type=float, help="Gravel content (% volume, 0-80)"
    )(func)
    func = click.option(
        "--density",
        "bulk_density_factor",
        type=float,
        help="Bulk density factor (0.9-1.8, 1.0 = reference)",
    )(func)
    func = click.option(
        "--om", "organic_matter", type=float, help="Organic matter (%, 0-8)"
    )(func)
    return func


def _with_defaults(**given: float | None) -> dict[str, float]:
    defaults = get_settings().defaults
    return {
        name: getattr(defaults, name) if value is None else value
        for name, value in given.items()
    }


@soil.command()
@click.argument("sand", type=float)
@click.argument("clay", type=float)
@_analysis_options
@click.option(
    "--tier",
    type=click.Choice(TIER_CHOICES, case_sensitive=False),
    help="Result view to show (default from settings)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def analyze(
    sand: float,
    clay: float,
    organic_matter: float | None,
    bulk_density_factor: float | None,
    gravel_content: float | None,
    electrical_conductivity: float | None,
    tier: str | None,
    output_format: str,
) -> None:
    """Estimate soil water characteristics.

    SAND: Sand content (% by mass)
    CLAY: Clay content (% by mass)
    """
    settings = get_settings()
    params = _with_defaults(
        organic_matter=organic_matter,
        bulk_density_factor=bulk_density_factor,
        gravel_content=gravel_content,
        electrical_conductivity=electrical_conductivity,
    )

    try:
        result = analyze_soil(sand, clay, **params)
    except SoilWaterError as e:
        logger.error(f"Error analyzing soil: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    view = result.to_tier_view(tier or settings.output.tier)

    if output_format == "json":
        click.echo(json.dumps(view, indent=2))
    else:
        _print_view(
            f"Soil water characteristics: sand {sand}%, clay {clay}%, "
            f"silt {result.input.silt:g}%",
            view,
            settings.output.precision,
        )


@soil.command()
@click.argument("sand", type=float)
@click.argument("clay", type=float)
def classify(sand: float, clay: float) -> None:
    """Show the USDA texture class for a sand/clay mix.

    SAND: Sand content (% by mass)
    CLAY: Clay content (% by mass)
    """
    try:
        soil_input = validate_input(sand, clay, organic_matter=0.0)
    except SoilWaterError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    texture = classify_texture(soil_input.sand, soil_input.clay)
    click.echo(f"{texture.value} ({texture_group(texture).value} group)")


@soil.command()
@click.argument("sand", type=float)
@click.argument("clay", type=float)
@_analysis_options
@click.option(
    "--tension",
    "tensions",
    type=float,
    multiple=True,
    help="Tension in kPa (repeatable; default 0-1500 kPa series)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def curve(
    sand: float,
    clay: float,
    organic_matter: float | None,
    bulk_density_factor: float | None,
    gravel_content: float | None,
    electrical_conductivity: float | None,
    tensions: tuple[float, ...],
    output_format: str,
) -> None:
    """Print the moisture-tension curve.

    SAND: Sand content (% by mass)
    CLAY: Clay content (% by mass)
    """
    settings = get_settings()
    params = _with_defaults(
        organic_matter=organic_matter,
        bulk_density_factor=bulk_density_factor,
        gravel_content=gravel_content,
        electrical_conductivity=electrical_conductivity,
    )

    try:
        result = analyze_soil(sand, clay, **params)
        points = (
            moisture_tension_curve(result, tensions)
            if tensions
            else moisture_tension_curve(result)
        )
    except SoilWaterError as e:
        logger.error(f"Error computing retention curve: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if output_format == "json":
        click.echo(json.dumps([p.model_dump() for p in points], indent=2))
        return

    digits = settings.output.precision
    table = Table(title=f"Moisture-tension curve ({result.texture_class.value})")
    table.add_column("Tension (kPa)", justify="right")
    table.add_column("Moisture (%)", justify="right")
    table.add_column("K (mm/hr)", justify="right")
    for point in points:
        table.add_row(
            f"{point.tension:g}",
            f"{point.moisture:.{digits}f}",
            f"{point.conductivity:.{digits + 2}g}",
        )
    console.print(table)


@soil.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output", type=click.Path(path_type=Path), help="Output file (default: stdout)"
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "csv"]),
    default="json",
    help="Output format",
)
@click.option(
    "--tier",
    type=click.Choice(TIER_CHOICES, case_sensitive=False),
    help="Result view for each row (default from settings)",
)
def batch(
    input_file: Path, output: Path | None, output_format: str, tier: str | None
) -> None:
    """Analyze every soil in a CSV or JSON file.

    INPUT_FILE: CSV with a header row, or a JSON list of objects, with
    sand, clay and organic_matter columns
    """
    settings = get_settings()
    tier = tier or settings.output.tier

    try:
        samples = _load_samples(input_file)
    except (OSError, ValueError) as e:
        logger.error(f"Error reading {input_file}: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if not samples:
        click.echo("No samples found in input file", err=True)
        raise click.Abort()

    outcomes = analyze_batch(samples)

    rows = []
    for outcome in outcomes:
        row: dict[str, Any] = {"index": outcome.index, **outcome.sample}
        if outcome.result is not None:
            row.update(outcome.result.to_tier_view(tier))
        else:
            row["error"] = outcome.error
            row["error_type"] = outcome.error_type
        rows.append(row)

    if output_format == "json":
        text = json.dumps(rows, indent=2, default=str)
        if output:
            output.write_text(text)
            click.echo(f"Results written to {output}", err=True)
        else:
            click.echo(text)
    else:
        _output_csv(rows, output)

    succeeded = sum(1 for outcome in outcomes if outcome.ok)
    click.echo(
        f"Summary: {succeeded}/{len(outcomes)} samples analyzed successfully",
        err=True,
    )


def _print_view(title: str, view: dict[str, Any], digits: int) -> None:
    """Print a tier view as rich tables."""
    table = Table(title=title)
    table.add_column("Property")
    table.add_column("Value", justify="right")

    nested = {}
    for key, value in view.items():
        if isinstance(value, dict):
            nested[key] = value
        elif isinstance(value, list):
            continue
        else:
            table.add_row(key.replace("_", " ").title(), _format_value(value, digits))
    console.print(table)

    for section, values in nested.items():
        sub = Table(title=section.replace("_", " ").title())
        sub.add_column("Property")
        sub.add_column("Value", justify="right")
        for key, value in values.items():
            sub.add_row(key.replace("_", " "), _format_value(value, digits))
        console.print(sub)

    for message in view.get("warnings", []):
        console.print(f"[yellow]Warning:[/yellow] {message}")


def _format_value(value: Any, digits: int) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.{digits}f}"
    if isinstance(value, dict):
        return ", ".join(f"{k}={_format_value(v, digits)}" for k, v in value.items())
    return str(value)


def _load_samples(input_file: Path) -> list[dict[str, Any]]:
    """Load sample rows from a CSV or JSON file."""
    if input_file.suffix.lower() == ".json":
        data = json.loads(input_file.read_text())
        if not isinstance(data, list):
            raise ValueError("JSON input must be a list of objects")
        return [item for item in data if isinstance(item, dict)]

    with open(input_file, newline="") as f:
        return list(csv.DictReader(f))


def _output_csv(rows: list[dict[str, Any]], output_file: Path | None) -> None:
    """Write flat batch rows as CSV; nested sections are JSON-encoded."""
    fieldnames: list[str] = []
    for row in rows:
        for key in row:
            if key not in fieldnames:
                fieldnames.append(key)

    flat_rows = [
        {
            key: json.dumps(value) if isinstance(value, dict | list) else value
            for key, value in row.items()
        }
        for row in rows
    ]

    if output_file:
        with open(output_file, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(flat_rows)
        click.echo(f"CSV results written to {output_file}", err=True)
    else:
        writer = csv.DictWriter(sys.stdout, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(flat_rows)


if __name__ == "__main__":
    soil()
