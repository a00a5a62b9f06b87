"""
Saxton & Rawls (2006) pedotransfer functions.

Regression estimates of soil moisture at wilting point, field capacity and
saturation, air-entry tension, the tension-moisture parameters A, B and
lambda, and saturated hydraulic conductivity. Sand, clay and organic
matter enter the regressions as fractions (0-1); moisture values are
volumetric fractions.
"""

import math

from soil_water_engine.errors import ComputationError, RangeError
from soil_water_engine.logging_config import get_logger
from soil_water_engine.models import BaseEstimate

logger = get_logger(__name__)

FIELD_CAPACITY_TENSION_KPA = 33.0
WILTING_POINT_TENSION_KPA = 1500.0
KSAT_COEFFICIENT = 1930.0  # mm/hr

_LOG_TENSION_SPAN = math.log(WILTING_POINT_TENSION_KPA) - math.log(
    FIELD_CAPACITY_TENSION_KPA
)


def _wilting_point(s: float, c: float, om: float) -> float:
    t = (
        -0.024 * s
        + 0.487 * c
        + 0.006 * om
        + 0.005 * (s * om)
        - 0.013 * (c * om)
        + 0.068 * (s * c)
        + 0.031
    )
    return t + (0.14 * t - 0.02)


def _field_capacity(s: float, c: float, om: float) -> float:
    t = (
        -0.251 * s
        + 0.195 * c
        + 0.011 * om
        + 0.006 * (s * om)
        - 0.027 * (c * om)
        + 0.452 * (s * c)
        + 0.299
    )
    return t + (1.283 * t**2 - 0.374 * t - 0.015)


def _saturation_excess(s: float, c: float, om: float) -> float:
    """Moisture held between saturation and 33 kPa, theta(S-33)."""
    t = (
        0.278 * s
        + 0.034 * c
        + 0.022 * om
        - 0.018 * (s * om)
        - 0.027 * (c * om)
        - 0.584 * (s * c)
        + 0.078
    )
    return t + (0.636 * t - 0.107)


def _air_entry_tension(s: float, c: float, theta_s33: float) -> float:
    t = (
        -21.67 * s
        - 27.93 * c
        - 81.97 * theta_s33
        + 71.12 * (s * theta_s33)
        + 8.29 * (c * theta_s33)
        + 14.05 * (s * c)
        + 27.16
    )
    return t + (0.02 * t**2 - 0.113 * t - 0.70)


def retention_slope(theta_33: float, theta_1500: float) -> float:
    """Slope B of the log tension-moisture line through 33 and 1500 kPa.

    Raises:
        ComputationError: If theta_1500 is not positive or not below theta_33
    """
    if theta_1500 <= 0 or theta_33 <= theta_1500:
        raise ComputationError(
            "slope_b",
            "retention curve needs 0 < theta_1500 < theta_33",
            theta_33=theta_33,
            theta_1500=theta_1500,
        )
    return _LOG_TENSION_SPAN / (math.log(theta_33) - math.log(theta_1500))


def retention_coefficient(theta_33: float, slope_b: float) -> float:
    """Coefficient A of the power-law tension-moisture curve."""
    return math.exp(math.log(FIELD_CAPACITY_TENSION_KPA) + slope_b * math.log(theta_33))


def saturated_conductivity(theta_sat: float, theta_33: float, lambda_: float) -> float:
    """Saturated hydraulic conductivity (mm/hr) from the drainable porosity.

    Raises:
        ComputationError: If theta_sat <= theta_33 or the result is not finite
    """
    drainable = theta_sat - theta_33
    if drainable <= 0:
        raise ComputationError(
            "saturated_conductivity",
            "saturation does not exceed field capacity",
            theta_sat=theta_sat,
            theta_33=theta_33,
        )

    ksat = KSAT_COEFFICIENT * drainable ** (3.0 - lambda_)
    if not math.isfinite(ksat) or ksat < 0:
        raise ComputationError(
            "saturated_conductivity",
            "conductivity is undefined",
            drainable_porosity=drainable,
            lambda_=lambda_,
        )
    return ksat


def estimate_base(sand: float, clay: float, organic_matter: float) -> BaseEstimate:
    """Estimate soil water characteristics at reference density.

    Args:
        sand: Sand content (%)
        clay: Clay content (%)
        organic_matter: Organic matter content (%)

    Returns:
        BaseEstimate with volumetric fractions and Ksat in mm/hr

    Raises:
        ComputationError: If an intermediate value is degenerate
    """
    s = sand / 100
    c = clay / 100
    om = organic_matter / 100

    theta_1500 = _wilting_point(s, c, om)
    theta_33 = _field_capacity(s, c, om)
    theta_s33 = _saturation_excess(s, c, om)
    theta_sat = theta_33 + theta_s33 - 0.097 * s + 0.043

    if theta_1500 <= 0:
        raise ComputationError(
            "wilting_point",
            "wilting point moisture is not positive",
            theta_1500=theta_1500,
        )
    if theta_33 <= theta_1500:
        raise ComputationError(
            "field_capacity",
            "field capacity does not exceed wilting point",
            theta_33=theta_33,
            theta_1500=theta_1500,
        )
    if theta_sat <= theta_33:
        raise ComputationError(
            "saturation",
            "saturation does not exceed field capacity",
            theta_sat=theta_sat,
            theta_33=theta_33,
        )

    slope_b = retention_slope(theta_33, theta_1500)
    lambda_ = 1.0 / slope_b
    coefficient_a = retention_coefficient(theta_33, slope_b)
    ksat = saturated_conductivity(theta_sat, theta_33, lambda_)

    logger.debug(
        f"Base estimate for S={s:.3f} C={c:.3f} OM={om:.4f}: "
        f"theta33={theta_33:.4f} theta1500={theta_1500:.4f} "
        f"thetaS={theta_sat:.4f} lambda={lambda_:.4f} Ksat={ksat:.3f}"
    )

    return BaseEstimate(
        theta_1500=theta_1500,
        theta_33=theta_33,
        theta_s33=theta_s33,
        theta_sat=theta_sat,
        air_entry_tension=_air_entry_tension(s, c, theta_s33),
        slope_b=slope_b,
        coefficient_a=coefficient_a,
        lambda_=lambda_,
        saturated_conductivity=ksat,
    )


def moisture_at_tension(
    tension: float,
    theta_sat: float,
    theta_33: float,
    lambda_: float,
    air_entry_tension: float = 0.0,
) -> float:
    """Volumetric moisture (fraction) held at a matric tension in kPa.

    Below the air-entry tension the soil is saturated. Between air entry
    and 33 kPa moisture falls linearly; above 33 kPa it follows the
    power-law retention curve through field capacity.
    """
    if tension < 0 or not math.isfinite(tension):
        raise RangeError(
            "tension", tension, message=f"tension must be >= 0 kPa, got {tension}"
        )

    air_entry = min(max(air_entry_tension, 0.0), FIELD_CAPACITY_TENSION_KPA)

    if tension <= air_entry:
        return theta_sat
    if tension < FIELD_CAPACITY_TENSION_KPA:
        return theta_33 + (FIELD_CAPACITY_TENSION_KPA - tension) * (
            theta_sat - theta_33
        ) / (FIELD_CAPACITY_TENSION_KPA - air_entry)
    return theta_33 * (tension / FIELD_CAPACITY_TENSION_KPA) ** (-lambda_)


def unsaturated_conductivity(
    theta: float, theta_sat: float, ksat: float, lambda_: float
) -> float:
    """Unsaturated conductivity (mm/hr) at moisture theta."""
    if theta >= theta_sat:
        return ksat
    return ksat * (theta / theta_sat) ** (3.0 + 2.0 / lambda_)
