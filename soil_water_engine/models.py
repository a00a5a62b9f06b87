"""
Pydantic models for soil water characteristic analysis.

Inputs are validated before a SoilInput is built (see validation.py), and
every result object is frozen: an analysis is computed once and never
mutated afterwards.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class TextureClass(str, Enum):
    """USDA texture classes produced by the threshold classifier."""

    SAND = "Sand"
    LOAMY_SAND = "Loamy Sand"
    SANDY_LOAM = "Sandy Loam"
    LOAM = "Loam"
    SILT = "Silt"
    SILTY_LOAM = "Silty Loam"
    SANDY_CLAY_LOAM = "Sandy Clay Loam"
    CLAY_LOAM = "Clay Loam"
    SILTY_CLAY_LOAM = "Silty Clay Loam"
    SANDY_CLAY = "Sandy Clay"
    SILTY_CLAY = "Silty Clay"
    CLAY = "Clay"


class TextureGroup(str, Enum):
    """Coarse texture groups used by the calibration tables."""

    SANDY = "sandy"
    SILTY = "silty"
    CLAYEY = "clayey"


class SoilProperty(str, Enum):
    """Properties covered by the organic matter and density tables."""

    FIELD_CAPACITY = "field_capacity"
    WILTING_POINT = "wilting_point"
    SATURATION = "saturation"
    CONDUCTIVITY = "saturated_conductivity"


class DrainageClass(str, Enum):
    """Drainage classes derived from saturated conductivity."""

    VERY_POORLY_DRAINED = "Very Poorly Drained"
    POORLY_DRAINED = "Poorly Drained"
    MODERATELY_DRAINED = "Moderately Drained"
    WELL_DRAINED = "Well Drained"
    EXCESSIVELY_DRAINED = "Excessively Drained"


class RiskLevel(str, Enum):
    """Three-level risk rating."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class ResultTier(str, Enum):
    """Result views offered to callers on different subscription plans."""

    FREE = "free"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class SoilInput(BaseModel):
    """Validated soil texture and amendment parameters.

    Build instances with ``validate_input`` so the ordered range checks run
    first and report the offending parameter.
    """

    sand: float = Field(ge=0.0, le=100.0, description="Sand content (% by mass)")
    clay: float = Field(ge=0.0, le=60.0, description="Clay content (% by mass)")
    organic_matter: float = Field(
        ge=0.0, le=8.0, description="Organic matter content (%)"
    )
    bulk_density_factor: float = Field(
        1.0,
        ge=0.9,
        le=1.8,
        description="Ratio of actual to reference bulk density (1.0 = reference)",
    )
    gravel_content: float = Field(
        0.0, ge=0.0, le=80.0, description="Rock fragments (% by volume)"
    )
    electrical_conductivity: float = Field(
        0.0, ge=0.0, le=20.0, description="Saturated paste EC (dS/m)"
    )

    @property
    def silt(self) -> float:
        """Silt content (%), the remainder of sand and clay."""
        return 100.0 - self.sand - self.clay

    class Config:
        """Pydantic configuration."""

        frozen = True
        extra = "forbid"


class BaseEstimate(BaseModel):
    """Saxton & Rawls regression output at reference density.

    Moisture values are volumetric fractions (0-1).
    """

    theta_1500: float = Field(description="Wilting point moisture (1500 kPa)")
    theta_33: float = Field(description="Field capacity moisture (33 kPa)")
    theta_s33: float = Field(description="Moisture between saturation and 33 kPa")
    theta_sat: float = Field(description="Saturation moisture")
    air_entry_tension: float = Field(description="Air-entry tension (kPa), raw")
    slope_b: float = Field(description="Slope of the log tension-moisture curve (B)")
    coefficient_a: float = Field(description="Tension-moisture coefficient (A)")
    lambda_: float = Field(
        alias="lambda", description="Pore-size distribution index (1/B)"
    )
    saturated_conductivity: float = Field(
        ge=0.0, description="Saturated hydraulic conductivity (mm/hr)"
    )

    class Config:
        """Pydantic configuration."""

        frozen = True
        populate_by_name = True


class ConfidenceInterval(BaseModel):
    """Regression fit statistics for one estimated property."""

    r_squared: float = Field(ge=0.0, le=1.0, description="Coefficient of determination")
    standard_error: float = Field(
        ge=0.0, description="Standard error of estimate, in the property's unit"
    )

    class Config:
        """Pydantic configuration."""

        frozen = True


class GravelAdjustment(BaseModel):
    """Whole-soil values corrected for rock fragments."""

    volume_fraction: float = Field(ge=0.0, le=1.0, description="Gravel volume fraction")
    weight_fraction: float = Field(ge=0.0, le=1.0, description="Gravel weight fraction")
    bulk_density: float = Field(ge=0.0, description="Whole-soil bulk density (g/cm³)")
    plant_available_water: float = Field(
        ge=0.0, description="Whole-soil plant-available water (%)"
    )
    saturated_conductivity: float = Field(
        ge=0.0, description="Whole-soil saturated conductivity (mm/hr)"
    )
    conductivity_ratio: float = Field(
        ge=0.0, le=1.0, description="Bulk to fine-earth conductivity ratio (Kb/Ks)"
    )

    class Config:
        """Pydantic configuration."""

        frozen = True


class SalinityAdjustment(BaseModel):
    """Osmotic effects of soil salinity on available water."""

    electrical_conductivity: float = Field(ge=0.0, description="EC (dS/m)")
    osmotic_potential: float = Field(
        le=0.0, description="Osmotic potential at saturation (kPa)"
    )
    osmotic_potential_fc: float = Field(
        le=0.0, description="Osmotic potential at field capacity (kPa)"
    )
    effective_field_capacity: float = Field(
        ge=0.0, description="Field capacity under combined matric and osmotic stress (%)"
    )
    effective_plant_available_water: float = Field(
        ge=0.0, description="Plant-available water under saline conditions (%)"
    )

    class Config:
        """Pydantic configuration."""

        frozen = True


class RetentionPoint(BaseModel):
    """One point on the moisture-tension curve."""

    tension: float = Field(ge=0.0, description="Matric tension (kPa)")
    moisture: float = Field(ge=0.0, description="Volumetric moisture (%)")
    conductivity: float = Field(ge=0.0, description="Unsaturated conductivity (mm/hr)")

    class Config:
        """Pydantic configuration."""

        frozen = True


class SoilWaterResult(BaseModel):
    """Soil water characteristics and derived classifications for one soil."""

    input: SoilInput = Field(description="Validated input parameters")

    texture_class: TextureClass
    texture_group: TextureGroup

    field_capacity: float = Field(description="Field capacity (% volume)")
    wilting_point: float = Field(description="Wilting point (% volume)")
    saturation: float = Field(description="Saturation (% volume)")
    plant_available_water: float = Field(
        ge=0.0, description="Field capacity minus wilting point (% volume)"
    )
    saturated_conductivity: float = Field(
        ge=0.0, description="Saturated hydraulic conductivity (mm/hr)"
    )

    air_entry_tension: float | None = Field(
        None, description="Air-entry tension (kPa); None when not defined"
    )
    lambda_: float = Field(
        alias="lambda",
        description="Pore-size distribution index of the calibrated retention curve",
    )
    coefficient_a: float = Field(description="Tension-moisture coefficient A")
    slope_b: float = Field(description="Tension-moisture slope B")
    bulk_density: float = Field(ge=0.0, description="Bulk density (g/cm³)")
    unsaturated_conductivity: float = Field(
        ge=0.0, description="Unsaturated conductivity at field capacity (mm/hr)"
    )

    drainage_class: DrainageClass
    compaction_risk: RiskLevel
    erosion_risk: RiskLevel
    soil_quality_index: float = Field(ge=0.0, le=10.0, description="Quality score 0-10")

    confidence: dict[str, ConfidenceInterval] = Field(default_factory=dict)
    gravel: GravelAdjustment | None = None
    salinity: SalinityAdjustment | None = None

    warnings: list[str] = Field(
        default_factory=list, description="Warnings about undefined or degraded values"
    )

    class Config:
        """Pydantic configuration."""

        frozen = True
        populate_by_name = True

    def to_tier_view(self, tier: ResultTier | str = ResultTier.FREE) -> dict[str, Any]:
        """Flatten the result into the fields shown for a subscription tier."""
        tier = ResultTier(tier)

        view: dict[str, Any] = {
            "texture_class": self.texture_class.value,
            "field_capacity": self.field_capacity,
            "wilting_point": self.wilting_point,
            "plant_available_water": self.plant_available_water,
            "saturation": self.saturation,
            "saturated_conductivity": self.saturated_conductivity,
            "soil_quality_index": self.soil_quality_index,
            "drainage_class": self.drainage_class.value,
            "compaction_risk": self.compaction_risk.value,
            "erosion_risk": self.erosion_risk.value,
            "bulk_density": self.bulk_density,
        }

        if tier in (ResultTier.PROFESSIONAL, ResultTier.ENTERPRISE):
            view["air_entry_tension"] = self.air_entry_tension
            view["lambda"] = self.lambda_
            view["unsaturated_conductivity"] = self.unsaturated_conductivity
            if self.gravel is not None:
                view["gravel"] = self.gravel.model_dump()
            if self.confidence:
                view["confidence"] = {
                    name: ci.model_dump() for name, ci in self.confidence.items()
                }

        if tier == ResultTier.ENTERPRISE:
            if self.salinity is not None:
                view["salinity"] = self.salinity.model_dump()
            view["coefficient_a"] = self.coefficient_a
            view["slope_b"] = self.slope_b

        if self.warnings:
            view["warnings"] = list(self.warnings)

        return view


class BatchOutcome(BaseModel):
    """Result or error for one row of a batch analysis."""

    index: int = Field(ge=0, description="Zero-based row position in the batch")
    sample: dict[str, Any] = Field(description="Row as supplied by the caller")
    result: SoilWaterResult | None = None
    error: str | None = None
    error_type: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the row produced a result."""
        return self.result is not None


class ParameterStatistics(BaseModel):
    """Descriptive statistics for one parameter across several analyses."""

    minimum: float
    maximum: float
    mean: float
    range: float
    standard_deviation: float
    coefficient_of_variation: float | None = Field(
        None, description="Standard deviation over mean (%); None when mean is 0"
    )


class ComparisonSummary(BaseModel):
    """Comparison of several soil analyses."""

    analysis_count: int = Field(ge=2)
    texture_classes: list[TextureClass]
    statistics: dict[str, ParameterStatistics]
    high_variability: list[str] = Field(
        default_factory=list,
        description="Parameters whose coefficient of variation exceeds the threshold",
    )
