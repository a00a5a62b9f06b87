"""Soil Water Engine: soil water characteristics from texture and organic matter."""

__version__ = "0.1.0"

from .comparison import compare_results
from .engine import analyze_batch, analyze_soil, moisture_tension_curve
from .errors import ComputationError, RangeError, SoilWaterError
from .models import (
    BatchOutcome,
    ComparisonSummary,
    DrainageClass,
    ResultTier,
    RetentionPoint,
    RiskLevel,
    SoilInput,
    SoilWaterResult,
    TextureClass,
    TextureGroup,
)
from .texture import classify_texture
from .validation import validate_input

__all__ = [
    "BatchOutcome",
    "ComparisonSummary",
    "ComputationError",
    "DrainageClass",
    "RangeError",
    "ResultTier",
    "RetentionPoint",
    "RiskLevel",
    "SoilInput",
    "SoilWaterError",
    "SoilWaterResult",
    "TextureClass",
    "TextureGroup",
    "analyze_batch",
    "analyze_soil",
    "classify_texture",
    "compare_results",
    "moisture_tension_curve",
    "validate_input",
]
