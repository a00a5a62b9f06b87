"""Entry point for the ``soil-water`` command."""

import click

from soil_water_engine import __version__
from soil_water_engine.cli_soil import soil


@click.group()
@click.version_option(version=__version__, prog_name="soil-water")
def main() -> None:
    """Soil Water Engine: Saxton & Rawls soil water characteristics."""


main.add_command(soil, name="soil")


if __name__ == "__main__":
    main()
