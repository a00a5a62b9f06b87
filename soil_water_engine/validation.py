"""Input validation for soil water analysis."""

import math

from soil_water_engine.errors import RangeError
from soil_water_engine.logging_config import get_logger
from soil_water_engine.models import SoilInput

logger = get_logger(__name__)

# Valid domains (inclusive). Clay above 60% and organic matter above 8% fall
# outside the Saxton & Rawls (2006) calibration data.
SAND_RANGE = (0.0, 100.0)
CLAY_RANGE = (0.0, 60.0)
ORGANIC_MATTER_RANGE = (0.0, 8.0)
DENSITY_FACTOR_RANGE = (0.9, 1.8)
GRAVEL_RANGE = (0.0, 80.0)
EC_RANGE = (0.0, 20.0)


def _check_range(name: str, value: float, bounds: tuple[float, float]) -> None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise RangeError(name, value, message=f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise RangeError(
            name, value, message=f"{name} must be a finite number, got {value}"
        )

    minimum, maximum = bounds
    if not minimum <= value <= maximum:
        raise RangeError(name, value, minimum, maximum)


def validate_input(
    sand: float,
    clay: float,
    organic_matter: float,
    bulk_density_factor: float = 1.0,
    gravel_content: float = 0.0,
    electrical_conductivity: float = 0.0,
) -> SoilInput:
    """Validate soil parameters and build a SoilInput.

    Checks run in a fixed order and stop at the first violation.

    Args:
        sand: Sand content (% by mass)
        clay: Clay content (% by mass)
        organic_matter: Organic matter content (%)
        bulk_density_factor: Ratio of actual to reference bulk density
        gravel_content: Rock fragment content (% by volume)
        electrical_conductivity: Saturated paste EC (dS/m)

    Returns:
        Validated, immutable SoilInput

    Raises:
        RangeError: If a parameter is not a finite number or is out of range
    """
    _check_range("sand", sand, SAND_RANGE)
    _check_range("clay", clay, CLAY_RANGE)

    if sand + clay > 100.0:
        raise RangeError(
            "sand+clay",
            sand + clay,
            0.0,
            100.0,
            message=(
                f"sand + clay must not exceed 100%, got {sand + clay} "
                f"(sand={sand}, clay={clay})"
            ),
        )

    _check_range("organic_matter", organic_matter, ORGANIC_MATTER_RANGE)
    _check_range("bulk_density_factor", bulk_density_factor, DENSITY_FACTOR_RANGE)
    _check_range("gravel_content", gravel_content, GRAVEL_RANGE)
    _check_range("electrical_conductivity", electrical_conductivity, EC_RANGE)

    logger.debug(
        f"Validated input sand={sand}, clay={clay}, om={organic_matter}, "
        f"df={bulk_density_factor}, gravel={gravel_content}, "
        f"ec={electrical_conductivity}"
    )

    return SoilInput(
        sand=float(sand),
        clay=float(clay),
        organic_matter=float(organic_matter),
        bulk_density_factor=float(bulk_density_factor),
        gravel_content=float(gravel_content),
        electrical_conductivity=float(electrical_conductivity),
    )
