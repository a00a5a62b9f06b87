"""Soil water characteristic analysis.

``analyze_soil`` runs the full pipeline for one soil: validation, base
pedotransfer estimate, organic matter and density calibration, optional
gravel and salinity corrections, and derived classifications. Every
function here is pure; the returned models are frozen.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from soil_water_engine.calibration import adjust_for_density, adjust_for_organic_matter
from soil_water_engine.corrections import adjust_for_gravel, adjust_for_salinity
from soil_water_engine.errors import SoilWaterError
from soil_water_engine.indicators import (
    bulk_density,
    compaction_risk,
    confidence_intervals,
    drainage_class,
    erosion_risk,
    soil_quality_index,
)
from soil_water_engine.logging_config import get_logger
from soil_water_engine.models import (
    BatchOutcome,
    RetentionPoint,
    SoilProperty,
    SoilWaterResult,
)
from soil_water_engine.pedotransfer import (
    estimate_base,
    moisture_at_tension,
    retention_coefficient,
    retention_slope,
    unsaturated_conductivity,
)
from soil_water_engine.texture import classify_texture, texture_group
from soil_water_engine.validation import validate_input

logger = get_logger(__name__)

DEFAULT_TENSIONS_KPA: tuple[float, ...] = (
    0, 1, 3, 5, 10, 20, 33, 100, 300, 500, 1000, 1500,
)

BATCH_FIELDS = (
    "sand",
    "clay",
    "organic_matter",
    "bulk_density_factor",
    "gravel_content",
    "electrical_conductivity",
)


def analyze_soil(
    sand: float,
    clay: float,
    organic_matter: float,
    bulk_density_factor: float = 1.0,
    gravel_content: float = 0.0,
    electrical_conductivity: float = 0.0,
) -> SoilWaterResult:
    """Estimate soil water characteristics for one soil.

    Args:
        sand: Sand content (% by mass)
        clay: Clay content (% by mass, at most 60)
        organic_matter: Organic matter content (%, at most 8)
        bulk_density_factor: Ratio of actual to reference bulk density
        gravel_content: Rock fragments (% by volume)
        electrical_conductivity: Saturated paste EC (dS/m)

    Returns:
        SoilWaterResult with moisture values in percent and Ksat in mm/hr

    Raises:
        RangeError: If an input is outside its valid range
        ComputationError: If an intermediate value is degenerate
    """
    soil = validate_input(
        sand,
        clay,
        organic_matter,
        bulk_density_factor,
        gravel_content,
        electrical_conductivity,
    )

    texture = classify_texture(soil.sand, soil.clay)
    base = estimate_base(soil.sand, soil.clay, soil.organic_matter)

    om = soil.organic_matter
    df = soil.bulk_density_factor

    theta_33 = adjust_for_organic_matter(
        base.theta_33, om, texture, SoilProperty.FIELD_CAPACITY
    )
    theta_1500 = adjust_for_organic_matter(
        base.theta_1500, om, texture, SoilProperty.WILTING_POINT
    )
    theta_sat = adjust_for_organic_matter(
        base.theta_sat, om, texture, SoilProperty.SATURATION
    )

    theta_33 = adjust_for_density(theta_33, df, texture, SoilProperty.FIELD_CAPACITY)
    theta_1500 = adjust_for_density(
        theta_1500, df, texture, SoilProperty.WILTING_POINT
    )
    theta_sat = adjust_for_density(theta_sat, df, texture, SoilProperty.SATURATION)
    ksat = adjust_for_density(
        base.saturated_conductivity, df, texture, SoilProperty.CONDUCTIVITY
    )

    field_capacity = theta_33 * 100
    wilting_point = theta_1500 * 100
    plant_available_water = field_capacity - wilting_point
    density = bulk_density(base.theta_sat, df)

    # Retention curve through the calibrated (33 kPa, FC) and (1500 kPa, WP);
    # Ksat keeps the regression lambda.
    slope_b = retention_slope(theta_33, theta_1500)
    lambda_ = 1.0 / slope_b

    warnings: list[str] = []

    air_entry: float | None = base.air_entry_tension
    if air_entry <= 0:
        warnings.append(
            f"Air-entry tension is not defined for this texture "
            f"(regression gave {air_entry:.2f} kPa)"
        )
        air_entry = None

    gravel = None
    if soil.gravel_content > 0:
        gravel = adjust_for_gravel(
            soil.gravel_content, density, plant_available_water, ksat
        )

    salinity = None
    if soil.electrical_conductivity > 0:
        salinity, exhausted = adjust_for_salinity(
            soil.electrical_conductivity,
            theta_sat,
            theta_33,
            theta_1500,
            lambda_,
        )
        if exhausted:
            warnings.append(
                f"Osmotic stress at EC {soil.electrical_conductivity} dS/m "
                f"leaves no plant-available water"
            )

    for message in warnings:
        logger.warning(message)

    result = SoilWaterResult(
        input=soil,
        texture_class=texture,
        texture_group=texture_group(texture),
        field_capacity=field_capacity,
        wilting_point=wilting_point,
        saturation=theta_sat * 100,
        plant_available_water=plant_available_water,
        saturated_conductivity=ksat,
        air_entry_tension=air_entry,
        lambda_=lambda_,
        coefficient_a=retention_coefficient(theta_33, slope_b),
        slope_b=slope_b,
        bulk_density=density,
        unsaturated_conductivity=unsaturated_conductivity(
            theta_33, theta_sat, ksat, lambda_
        ),
        drainage_class=drainage_class(ksat),
        compaction_risk=compaction_risk(density, theta_33),
        erosion_risk=erosion_risk(soil.sand, soil.clay, om, ksat),
        soil_quality_index=soil_quality_index(plant_available_water, ksat),
        confidence=confidence_intervals(),
        gravel=gravel,
        salinity=salinity,
        warnings=warnings,
    )

    logger.debug(
        f"Analyzed {texture.value}: FC={field_capacity:.2f}% WP={wilting_point:.2f}% "
        f"PAW={plant_available_water:.2f}% Ksat={ksat:.2f} mm/hr"
    )
    return result


def moisture_tension_curve(
    result: SoilWaterResult, tensions: Sequence[float] = DEFAULT_TENSIONS_KPA
) -> list[RetentionPoint]:
    """Moisture and conductivity at each tension for an analyzed soil.

    Args:
        result: Analysis to draw the curve for
        tensions: Matric tensions in kPa

    Returns:
        One RetentionPoint per tension, in the order given
    """
    theta_sat = result.saturation / 100
    theta_33 = result.field_capacity / 100
    air_entry = result.air_entry_tension or 0.0

    points = []
    for tension in tensions:
        theta = moisture_at_tension(
            tension, theta_sat, theta_33, result.lambda_, air_entry
        )
        points.append(
            RetentionPoint(
                tension=tension,
                moisture=theta * 100,
                conductivity=unsaturated_conductivity(
                    theta, theta_sat, result.saturated_conductivity, result.lambda_
                ),
            )
        )
    return points


def analyze_batch(samples: Iterable[Mapping[str, Any]]) -> list[BatchOutcome]:
    """Analyze several soils, capturing per-row errors.

    Args:
        samples: Mappings with ``sand``, ``clay`` and ``organic_matter`` and
            optionally the other analyze_soil parameters

    Returns:
        One BatchOutcome per sample, in input order
    """
    rows = list(samples)
    logger.info(f"Analyzing {len(rows)} soil samples")

    outcomes = []
    for i, sample in enumerate(rows):
        try:
            kwargs = {
                name: float(sample[name])
                for name in BATCH_FIELDS
                if name in sample and sample[name] not in (None, "")
            }
            for required in ("sand", "clay", "organic_matter"):
                if required not in kwargs:
                    raise KeyError(required)

            outcomes.append(
                BatchOutcome(index=i, sample=dict(sample), result=analyze_soil(**kwargs))
            )

        except (SoilWaterError, KeyError, ValueError, TypeError) as e:
            logger.warning(f"Sample {i} failed: {e}")
            message = f"missing field {e}" if isinstance(e, KeyError) else str(e)
            outcomes.append(
                BatchOutcome(
                    index=i,
                    sample=dict(sample),
                    error=message,
                    error_type=type(e).__name__,
                )
            )

        if (i + 1) % 10 == 0:
            logger.info(f"Processed {i + 1}/{len(rows)} samples")

    succeeded = sum(1 for outcome in outcomes if outcome.ok)
    logger.info(f"Completed batch: {succeeded}/{len(rows)} samples analyzed")
    return outcomes
