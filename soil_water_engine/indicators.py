"""Derived soil quality indicators and classifications."""

from soil_water_engine.models import ConfidenceInterval, DrainageClass, RiskLevel

PARTICLE_DENSITY = 2.65  # g/cm³, mineral particle density

# Upper Ksat bounds (mm/hr, exclusive) for each drainage class
DRAINAGE_THRESHOLDS: tuple[tuple[float, DrainageClass], ...] = (
    (0.1, DrainageClass.VERY_POORLY_DRAINED),
    (1.0, DrainageClass.POORLY_DRAINED),
    (10.0, DrainageClass.MODERATELY_DRAINED),
    (100.0, DrainageClass.WELL_DRAINED),
)

# Saxton & Rawls (2006) regression fit: (R², standard error)
REGRESSION_FIT: dict[str, tuple[float, float]] = {
    "wilting_point": (0.86, 0.02),
    "field_capacity": (0.63, 0.05),
    "saturation": (0.29, 0.04),
    "air_entry_tension": (0.78, 2.9),
    "saturated_conductivity": (0.45, 0.3),
}


def drainage_class(saturated_conductivity: float) -> DrainageClass:
    """Classify drainage from saturated conductivity (mm/hr)."""
    for upper, drainage in DRAINAGE_THRESHOLDS:
        if saturated_conductivity < upper:
            return drainage
    return DrainageClass.EXCESSIVELY_DRAINED


def bulk_density(theta_sat: float, density_factor: float) -> float:
    """Bulk density (g/cm³) from saturation porosity and the density factor."""
    return (1.0 - theta_sat) * PARTICLE_DENSITY * density_factor


def compaction_risk(bulk_density: float, field_capacity_fraction: float) -> RiskLevel:
    """Rate compaction risk from bulk density and field capacity (0-1)."""
    index = bulk_density + (1.0 - field_capacity_fraction)
    if index > 2.0:
        return RiskLevel.HIGH
    if index > 1.7:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def erosion_risk(
    sand: float, clay: float, organic_matter: float, saturated_conductivity: float
) -> RiskLevel:
    """Rate erosion risk from texture (%), organic matter (%) and Ksat (mm/hr)."""
    index = (
        sand / 100
        - 0.5 * (clay / 100)
        - 2 * (organic_matter / 100)
        + saturated_conductivity / 1000
    )
    if index > 0.8:
        return RiskLevel.HIGH
    if index > 0.4:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def soil_quality_index(
    plant_available_water: float, saturated_conductivity: float
) -> float:
    """Score soil water quality on a 0-10 scale.

    Args:
        plant_available_water: Plant-available water (% volume)
        saturated_conductivity: Saturated conductivity (mm/hr)

    Returns:
        Score clamped to [0, 10]
    """
    score = 5.0

    if plant_available_water > 15:
        score += 2
    elif plant_available_water > 10:
        score += 1
    elif plant_available_water < 5:
        score -= 1

    if 10 < saturated_conductivity < 100:
        score += 1.5
    elif saturated_conductivity < 1 or saturated_conductivity > 500:
        score -= 1

    return max(0.0, min(10.0, score))


def confidence_intervals() -> dict[str, ConfidenceInterval]:
    """Regression fit statistics for each estimated property."""
    return {
        name: ConfidenceInterval(r_squared=r2, standard_error=se)
        for name, (r2, se) in REGRESSION_FIT.items()
    }
