"""Descriptive comparison of several soil analyses."""

import math
from collections.abc import Sequence

from soil_water_engine.logging_config import get_logger
from soil_water_engine.models import (
    ComparisonSummary,
    ParameterStatistics,
    SoilWaterResult,
)

logger = get_logger(__name__)

COMPARED_PARAMETERS = (
    "field_capacity",
    "wilting_point",
    "plant_available_water",
    "saturation",
    "saturated_conductivity",
)
HIGH_VARIABILITY_CV = 20.0  # percent


def _statistics(values: list[float]) -> ParameterStatistics:
    mean = sum(values) / len(values)
    # Population standard deviation
    std = math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))
    return ParameterStatistics(
        minimum=min(values),
        maximum=max(values),
        mean=mean,
        range=max(values) - min(values),
        standard_deviation=std,
        coefficient_of_variation=std / mean * 100 if mean else None,
    )


def compare_results(results: Sequence[SoilWaterResult]) -> ComparisonSummary:
    """Summarize spread of the key soil water parameters across analyses.

    Args:
        results: At least two analyses

    Returns:
        ComparisonSummary with per-parameter statistics

    Raises:
        ValueError: If fewer than two results are given
    """
    if len(results) < 2:
        raise ValueError("At least two analyses are required for comparison")

    statistics = {
        name: _statistics([getattr(result, name) for result in results])
        for name in COMPARED_PARAMETERS
    }
    high_variability = [
        name
        for name, stats in statistics.items()
        if stats.coefficient_of_variation is not None
        and stats.coefficient_of_variation > HIGH_VARIABILITY_CV
    ]

    if high_variability:
        logger.info(f"High variability across analyses in: {high_variability}")

    return ComparisonSummary(
        analysis_count=len(results),
        texture_classes=[result.texture_class for result in results],
        statistics=statistics,
        high_variability=high_variability,
    )
