"""
Organic matter and bulk density calibration tables.

Saxton & Rawls (2006) tabulate soil water characteristics for representative
sandy, silty and clayey soils at several organic matter contents (Table 3)
and density factors (Table 5). Moisture values are volumetric fractions,
conductivity is in mm/hr.

The organic matter table replaces a regression estimate with the
interpolated table value. The density table scales an already adjusted
value by its change relative to the reference density factor 1.0.
"""

from soil_water_engine.logging_config import get_logger
from soil_water_engine.models import SoilProperty, TextureClass, TextureGroup
from soil_water_engine.texture import texture_group

logger = get_logger(__name__)

ORGANIC_MATTER_POINTS = (0.5, 2.5, 5.0, 7.5)
DENSITY_FACTOR_POINTS = (0.9, 1.0, 1.1, 1.2)
REFERENCE_DENSITY_FACTOR = 1.0

ORGANIC_MATTER_TABLE: dict[TextureGroup, dict[SoilProperty, tuple[float, ...]]] = {
    TextureGroup.SANDY: {
        SoilProperty.WILTING_POINT: (0.06, 0.08, 0.10, 0.13),
        SoilProperty.FIELD_CAPACITY: (0.15, 0.18, 0.22, 0.26),
        SoilProperty.SATURATION: (0.40, 0.45, 0.52, 0.59),
        SoilProperty.CONDUCTIVITY: (37.6, 48.8, 65.9, 86.9),
    },
    TextureGroup.SILTY: {
        SoilProperty.WILTING_POINT: (0.13, 0.14, 0.15, 0.16),
        SoilProperty.FIELD_CAPACITY: (0.30, 0.32, 0.35, 0.37),
        SoilProperty.SATURATION: (0.42, 0.48, 0.56, 0.64),
        SoilProperty.CONDUCTIVITY: (5.2, 12.1, 26.8, 49.6),
    },
    TextureGroup.CLAYEY: {
        SoilProperty.WILTING_POINT: (0.20, 0.21, 0.22, 0.23),
        SoilProperty.FIELD_CAPACITY: (0.33, 0.34, 0.36, 0.38),
        SoilProperty.SATURATION: (0.43, 0.47, 0.51, 0.56),
        SoilProperty.CONDUCTIVITY: (2.8, 5.1, 9.1, 14.9),
    },
}

DENSITY_TABLE: dict[TextureGroup, dict[SoilProperty, tuple[float, ...]]] = {
    TextureGroup.SANDY: {
        SoilProperty.WILTING_POINT: (0.08, 0.08, 0.08, 0.08),
        SoilProperty.FIELD_CAPACITY: (0.19, 0.18, 0.17, 0.17),
        SoilProperty.SATURATION: (0.50, 0.45, 0.39, 0.34),
        SoilProperty.CONDUCTIVITY: (78.6, 48.8, 27.5, 13.4),
    },
    TextureGroup.SILTY: {
        SoilProperty.WILTING_POINT: (0.14, 0.14, 0.14, 0.14),
        SoilProperty.FIELD_CAPACITY: (0.33, 0.32, 0.31, 0.30),
        SoilProperty.SATURATION: (0.53, 0.48, 0.43, 0.38),
        SoilProperty.CONDUCTIVITY: (23.1, 12.1, 5.3, 1.6),
    },
    TextureGroup.CLAYEY: {
        SoilProperty.WILTING_POINT: (0.21, 0.21, 0.21, 0.21),
        SoilProperty.FIELD_CAPACITY: (0.35, 0.34, 0.34, 0.33),
        SoilProperty.SATURATION: (0.52, 0.47, 0.42, 0.36),
        SoilProperty.CONDUCTIVITY: (12.5, 5.1, 1.4, 0.1),
    },
}


def interpolate(x: float, points: tuple[float, ...], values: tuple[float, ...]) -> float:
    """Piecewise-linear interpolation with x clamped to the table range.

    Args:
        x: Lookup key
        points: Ascending table keys
        values: Table values, one per key

    Returns:
        Interpolated value
    """
    if len(points) != len(values) or not points:
        raise ValueError("points and values must be non-empty and equal in length")

    clamped = min(max(x, points[0]), points[-1])

    lower = 0
    while lower < len(points) - 1 and points[lower + 1] < clamped:
        lower += 1
    upper = min(lower + 1, len(points) - 1)

    if lower == upper:
        return values[lower]

    fraction = (clamped - points[lower]) / (points[upper] - points[lower])
    return values[lower] + fraction * (values[upper] - values[lower])


def organic_matter_table_value(
    organic_matter: float, texture_class: TextureClass | str, prop: SoilProperty | str
) -> float:
    """Table 3 value for a property at an organic matter content (%)."""
    group = texture_group(texture_class)
    column = ORGANIC_MATTER_TABLE[group][SoilProperty(prop)]
    return interpolate(organic_matter, ORGANIC_MATTER_POINTS, column)


def density_table_value(
    density_factor: float, texture_class: TextureClass | str, prop: SoilProperty | str
) -> float:
    """Table 5 value for a property at a density factor."""
    group = texture_group(texture_class)
    column = DENSITY_TABLE[group][SoilProperty(prop)]
    return interpolate(density_factor, DENSITY_FACTOR_POINTS, column)


def adjust_for_organic_matter(
    value: float,
    organic_matter: float,
    texture_class: TextureClass | str,
    prop: SoilProperty | str,
) -> float:
    """Replace a regression estimate with the organic matter table value.

    Args:
        value: Regression estimate being replaced
        organic_matter: Organic matter content (%), clamped to 0.5-7.5
        texture_class: Texture class selecting the table group
        prop: Property column to read

    Returns:
        Calibrated value in the property's unit
    """
    adjusted = organic_matter_table_value(organic_matter, texture_class, prop)
    logger.debug(
        f"OM adjustment {SoilProperty(prop).value} for {TextureClass(texture_class).value} "
        f"at OM={organic_matter}: {value:.4f} -> {adjusted:.4f}"
    )
    return adjusted


def adjust_for_density(
    value: float,
    density_factor: float,
    texture_class: TextureClass | str,
    prop: SoilProperty | str,
) -> float:
    """Scale a value by the density table's change from the reference density.

    Args:
        value: Value after organic matter adjustment
        density_factor: Bulk density factor, clamped to 0.9-1.2
        texture_class: Texture class selecting the table group
        prop: Property column to read

    Returns:
        Density-adjusted value in the property's unit
    """
    reference = density_table_value(REFERENCE_DENSITY_FACTOR, texture_class, prop)
    at_density = density_table_value(density_factor, texture_class, prop)
    adjusted = value * at_density / reference
    logger.debug(
        f"Density adjustment {SoilProperty(prop).value} for "
        f"{TextureClass(texture_class).value} at DF={density_factor}: "
        f"{value:.4f} -> {adjusted:.4f}"
    )
    return adjusted
