"""
Gravel and salinity corrections applied after the fine-earth analysis.

Both follow Saxton & Rawls (2006): equations 19-22 convert fine-earth
values to a whole-soil basis for a given rock fragment volume, and
equations 23-24 add the osmotic potential of the soil solution to the
matric tension at field capacity.
"""

from soil_water_engine.errors import ComputationError
from soil_water_engine.indicators import PARTICLE_DENSITY
from soil_water_engine.logging_config import get_logger
from soil_water_engine.models import GravelAdjustment, SalinityAdjustment
from soil_water_engine.pedotransfer import FIELD_CAPACITY_TENSION_KPA, moisture_at_tension

logger = get_logger(__name__)

OSMOTIC_KPA_PER_DS_M = 36.0


def adjust_for_gravel(
    gravel_content: float,
    bulk_density: float,
    plant_available_water: float,
    saturated_conductivity: float,
) -> GravelAdjustment:
    """Whole-soil values for a soil with rock fragments.

    Args:
        gravel_content: Rock fragments (% by volume)
        bulk_density: Fine-earth bulk density (g/cm³)
        plant_available_water: Fine-earth plant-available water (%)
        saturated_conductivity: Fine-earth Ksat (mm/hr)

    Returns:
        GravelAdjustment on a whole-soil basis

    Raises:
        ComputationError: If the fine-earth bulk density is not positive
    """
    if bulk_density <= 0:
        raise ComputationError(
            "gravel_bulk_density",
            "fine-earth bulk density is not positive",
            bulk_density=bulk_density,
        )

    rv = gravel_content / 100
    alpha = bulk_density / PARTICLE_DENSITY
    rw = rv / (alpha + rv * (1 - alpha))

    whole_density = bulk_density * (1 - rv) + PARTICLE_DENSITY * rv
    ratio = (1 - rw) / (1 - rw * (1 - 1.5 * alpha))

    adjustment = GravelAdjustment(
        volume_fraction=rv,
        weight_fraction=rw,
        bulk_density=whole_density,
        plant_available_water=plant_available_water * (1 - rv),
        saturated_conductivity=saturated_conductivity * ratio,
        conductivity_ratio=ratio,
    )
    logger.debug(
        f"Gravel {gravel_content}% (Rw={rw:.3f}): PAW {plant_available_water:.2f} -> "
        f"{adjustment.plant_available_water:.2f}, Ksat ratio {ratio:.3f}"
    )
    return adjustment


def adjust_for_salinity(
    electrical_conductivity: float,
    theta_sat: float,
    theta_33: float,
    theta_1500: float,
    lambda_: float,
) -> tuple[SalinityAdjustment, bool]:
    """Effective available water under saline conditions.

    Args:
        electrical_conductivity: Saturated paste EC (dS/m)
        theta_sat: Saturation moisture (fraction)
        theta_33: Field capacity moisture (fraction)
        theta_1500: Wilting point moisture (fraction)
        lambda_: Pore-size distribution index

    Returns:
        Tuple of (SalinityAdjustment, exhausted) where exhausted is True when
        osmotic stress leaves no plant-available water
    """
    osmotic = OSMOTIC_KPA_PER_DS_M * electrical_conductivity
    # Salts concentrate as the soil drains from saturation to field capacity
    osmotic_fc = osmotic * theta_sat / theta_33

    effective_fc = moisture_at_tension(
        FIELD_CAPACITY_TENSION_KPA + osmotic_fc, theta_sat, theta_33, lambda_
    )
    available = (effective_fc - theta_1500) * 100
    exhausted = available <= 0

    adjustment = SalinityAdjustment(
        electrical_conductivity=electrical_conductivity,
        osmotic_potential=-osmotic,
        osmotic_potential_fc=-osmotic_fc,
        effective_field_capacity=effective_fc * 100,
        effective_plant_available_water=max(available, 0.0),
    )
    logger.debug(
        f"Salinity EC={electrical_conductivity} dS/m: osmotic at FC "
        f"{osmotic_fc:.1f} kPa, effective PAW {adjustment.effective_plant_available_water:.2f}%"
    )
    return adjustment, exhausted
