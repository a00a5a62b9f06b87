"""Tests for the soil water analysis pipeline."""

import pytest
from pydantic import ValidationError

from soil_water_engine.engine import (
    DEFAULT_TENSIONS_KPA,
    analyze_batch,
    analyze_soil,
    moisture_tension_curve,
)
from soil_water_engine.errors import ComputationError, RangeError
from soil_water_engine.models import (
    DrainageClass,
    ResultTier,
    RiskLevel,
    SoilWaterResult,
    TextureClass,
    TextureGroup,
)


class TestScenarios:
    """Reference soils with hand-checked results."""

    def test_clay_loam(self, loam_kwargs):
        """Sand 33%, clay 33%, no organic matter."""
        result = analyze_soil(**loam_kwargs)

        assert isinstance(result, SoilWaterResult)
        assert result.texture_class == TextureClass.CLAY_LOAM
        assert result.texture_group == TextureGroup.CLAYEY
        # Organic matter below the table range uses the 0.5% row
        assert result.field_capacity == pytest.approx(33.0)
        assert result.wilting_point == pytest.approx(20.0)
        assert result.saturation == pytest.approx(43.0)
        assert result.plant_available_water == pytest.approx(13.0)
        assert result.saturated_conductivity == pytest.approx(2.34, rel=2e-2)
        assert result.drainage_class == DrainageClass.MODERATELY_DRAINED
        assert result.air_entry_tension == pytest.approx(7.17, rel=1e-2)
        assert result.bulk_density == pytest.approx(1.519, rel=2e-3)
        assert result.compaction_risk == RiskLevel.HIGH
        assert result.erosion_risk == RiskLevel.LOW
        assert result.soil_quality_index == pytest.approx(6.0)
        assert result.gravel is None
        assert result.salinity is None
        assert result.warnings == []

    def test_sand(self):
        """Sand 85%, clay 5%, 1% organic matter."""
        result = analyze_soil(85, 5, 1.0)

        assert result.texture_class == TextureClass.SAND
        assert result.texture_group == TextureGroup.SANDY
        assert result.field_capacity == pytest.approx(15.75)
        assert result.wilting_point == pytest.approx(6.5)
        assert result.plant_available_water == pytest.approx(9.25)
        assert result.saturation == pytest.approx(41.25)
        assert result.saturated_conductivity == pytest.approx(97.0, rel=2e-2)
        assert result.drainage_class == DrainageClass.WELL_DRAINED
        assert result.erosion_risk == RiskLevel.HIGH
        assert result.soil_quality_index == pytest.approx(6.5)
        # Regression gives a negative air-entry tension for this sand
        assert result.air_entry_tension is None
        assert len(result.warnings) == 1
        assert "Air-entry" in result.warnings[0]

    def test_coarse_sand_excessively_drained(self):
        result = analyze_soil(95, 2, 0.5)

        assert result.texture_class == TextureClass.SAND
        assert result.saturated_conductivity > 100
        assert result.drainage_class == DrainageClass.EXCESSIVELY_DRAINED

    def test_clay(self):
        """Sand 20%, clay 50%, 3% organic matter."""
        result = analyze_soil(20, 50, 3.0)

        assert result.texture_class == TextureClass.CLAY
        assert result.field_capacity == pytest.approx(34.4)
        assert result.wilting_point == pytest.approx(21.2)
        assert result.saturation == pytest.approx(47.8)
        assert result.saturated_conductivity < 1.0
        assert result.saturated_conductivity == pytest.approx(0.776, rel=2e-2)
        assert result.drainage_class == DrainageClass.POORLY_DRAINED
        assert result.compaction_risk == RiskLevel.MODERATE
        assert result.erosion_risk == RiskLevel.LOW
        assert result.soil_quality_index == pytest.approx(5.0)

    def test_clay_above_limit(self):
        with pytest.raises(RangeError) as exc_info:
            analyze_soil(20, 70, 2.0)
        assert exc_info.value.parameter == "clay"

    def test_sum_above_100(self):
        with pytest.raises(RangeError) as exc_info:
            analyze_soil(60, 45, 2.0)
        assert exc_info.value.parameter == "sand+clay"

    def test_clay_at_limit(self):
        result = analyze_soil(20, 60, 2.0)
        assert result.texture_class == TextureClass.CLAY

    def test_pure_sand_degenerate(self):
        with pytest.raises(ComputationError) as exc_info:
            analyze_soil(100, 0, 0)
        assert exc_info.value.quantity == "wilting_point"


class TestInvariants:
    """Properties that hold across the valid domain."""

    def test_idempotent(self):
        assert analyze_soil(40, 20, 2.5) == analyze_soil(40, 20, 2.5)

    def test_result_is_frozen(self):
        result = analyze_soil(40, 20, 2.5)
        with pytest.raises(ValidationError):
            result.field_capacity = 50.0

    @pytest.mark.parametrize("om", [0.0, 2.5, 8.0])
    @pytest.mark.parametrize("df", [0.9, 1.0, 1.4, 1.8])
    def test_field_capacity_above_wilting_point(self, om, df):
        for sand in range(0, 101, 10):
            for clay in range(0, 61, 10):
                if sand + clay > 100:
                    continue
                try:
                    result = analyze_soil(sand, clay, om, bulk_density_factor=df)
                except ComputationError:
                    # Extreme sands fall outside the regression's support
                    continue
                assert result.field_capacity >= result.wilting_point
                assert result.plant_available_water >= 0
                assert result.saturation > result.field_capacity
                assert result.saturated_conductivity >= 0
                assert 0 <= result.soil_quality_index <= 10

    def test_density_factor_one_matches_default(self):
        assert analyze_soil(40, 20, 2.5, bulk_density_factor=1.0) == analyze_soil(
            40, 20, 2.5
        )

    def test_compaction_lowers_saturation_and_conductivity(self):
        loose = analyze_soil(40, 20, 2.5)
        dense = analyze_soil(40, 20, 2.5, bulk_density_factor=1.2)

        assert dense.saturation < loose.saturation
        assert dense.saturated_conductivity < loose.saturated_conductivity
        assert dense.bulk_density > loose.bulk_density

    def test_confidence_included(self):
        result = analyze_soil(40, 20, 2.5)
        assert "field_capacity" in result.confidence
        assert result.confidence["field_capacity"].r_squared == pytest.approx(0.63)


class TestCorrectionsInPipeline:
    """Gravel and salinity corrections run only when requested."""

    def test_gravel(self, loam_kwargs):
        result = analyze_soil(**loam_kwargs, gravel_content=25)

        assert result.gravel is not None
        assert result.gravel.volume_fraction == pytest.approx(0.25)
        assert result.gravel.plant_available_water == pytest.approx(13.0 * 0.75)
        assert result.gravel.saturated_conductivity < result.saturated_conductivity
        # Fine-earth values are unchanged
        assert result.plant_available_water == pytest.approx(13.0)

    def test_salinity(self, loam_kwargs):
        result = analyze_soil(**loam_kwargs, electrical_conductivity=4)

        assert result.salinity is not None
        assert result.salinity.osmotic_potential == pytest.approx(-144.0)
        assert (
            result.salinity.effective_plant_available_water
            < result.plant_available_water
        )

    def test_severe_salinity_warns(self):
        result = analyze_soil(65, 15, 2.5, electrical_conductivity=20)

        assert result.salinity.effective_plant_available_water == 0.0
        assert any("Osmotic stress" in w for w in result.warnings)

    def test_mild_salinity_leaves_water(self):
        result = analyze_soil(10, 10, 2.5, electrical_conductivity=2)

        assert result.salinity.effective_plant_available_water > 0
        assert not any("Osmotic stress" in w for w in result.warnings)

    def test_effective_field_capacity_on_curve(self, loam_kwargs):
        """Effective FC is the curve moisture at matric plus osmotic stress."""
        result = analyze_soil(**loam_kwargs, electrical_conductivity=6)
        tension = 33 - result.salinity.osmotic_potential_fc
        (point,) = moisture_tension_curve(result, [tension])

        assert result.salinity.effective_field_capacity == pytest.approx(point.moisture)
        assert result.salinity.effective_plant_available_water == pytest.approx(
            point.moisture - result.wilting_point
        )


class TestTierView:
    """Test result views by subscription tier."""

    BASE_KEYS = {
        "texture_class",
        "field_capacity",
        "wilting_point",
        "plant_available_water",
        "saturation",
        "saturated_conductivity",
        "soil_quality_index",
        "drainage_class",
        "compaction_risk",
        "erosion_risk",
        "bulk_density",
    }

    def test_free(self, loam_kwargs):
        view = analyze_soil(**loam_kwargs).to_tier_view(ResultTier.FREE)
        assert set(view) == self.BASE_KEYS
        assert view["texture_class"] == "Clay Loam"
        assert view["drainage_class"] == "Moderately Drained"

    def test_professional(self, loam_kwargs):
        result = analyze_soil(**loam_kwargs, gravel_content=10, electrical_conductivity=2)
        view = result.to_tier_view("professional")

        assert {"air_entry_tension", "lambda", "unsaturated_conductivity"} <= set(view)
        assert "gravel" in view
        assert "confidence" in view
        assert "salinity" not in view
        assert "slope_b" not in view

    def test_enterprise(self, loam_kwargs):
        result = analyze_soil(**loam_kwargs, electrical_conductivity=2)
        view = result.to_tier_view(ResultTier.ENTERPRISE)

        assert view["salinity"]["electrical_conductivity"] == 2.0
        assert view["lambda"] == pytest.approx(result.lambda_)
        assert "coefficient_a" in view
        assert "slope_b" in view

    def test_warnings_shown_in_every_tier(self):
        view = analyze_soil(85, 5, 1.0).to_tier_view(ResultTier.FREE)
        assert view["warnings"]

    def test_unknown_tier(self, loam_kwargs):
        with pytest.raises(ValueError):
            analyze_soil(**loam_kwargs).to_tier_view("platinum")


class TestMoistureTensionCurve:
    """Test curve generation from an analysis."""

    def test_default_tensions(self, loam_kwargs):
        result = analyze_soil(**loam_kwargs)
        points = moisture_tension_curve(result)

        assert [p.tension for p in points] == list(DEFAULT_TENSIONS_KPA)
        assert points[0].moisture == pytest.approx(result.saturation)
        assert points[0].conductivity == pytest.approx(result.saturated_conductivity)

        at_33 = next(p for p in points if p.tension == 33)
        assert at_33.moisture == pytest.approx(result.field_capacity)

    def test_non_increasing(self):
        points = moisture_tension_curve(analyze_soil(40, 20, 2.5))
        moisture = [p.moisture for p in points]
        conductivity = [p.conductivity for p in points]
        assert all(a >= b for a, b in zip(moisture, moisture[1:], strict=False))
        assert all(a >= b for a, b in zip(conductivity, conductivity[1:], strict=False))

    def test_custom_tensions(self, loam_kwargs):
        points = moisture_tension_curve(analyze_soil(**loam_kwargs), [50, 10])
        assert [p.tension for p in points] == [50, 10]
        assert points[0].moisture < points[1].moisture

    def test_undefined_air_entry(self):
        """Sands without an air-entry tension leave saturation immediately."""
        result = analyze_soil(85, 5, 1.0)
        points = moisture_tension_curve(result, [0, 1])
        assert points[0].moisture == pytest.approx(result.saturation)
        assert points[1].moisture < result.saturation

    def test_negative_tension(self, loam_kwargs):
        with pytest.raises(RangeError):
            moisture_tension_curve(analyze_soil(**loam_kwargs), [-5])

    @pytest.mark.parametrize(
        "sand,clay,om,df",
        [
            (85, 5, 1.0, 1.0),
            (65, 15, 2.5, 1.0),
            (10, 10, 2.5, 1.0),
            (33, 33, 0.0, 1.0),
            (20, 50, 3.0, 1.0),
            (65, 15, 2.5, 1.2),
            (20, 50, 3.0, 0.9),
        ],
    )
    def test_passes_through_reported_moisture(self, sand, clay, om, df):
        """The curve meets the reported FC at 33 kPa and WP at 1500 kPa."""
        result = analyze_soil(sand, clay, om, bulk_density_factor=df)
        at_33, at_1500 = moisture_tension_curve(result, [33, 1500])

        assert at_33.moisture == pytest.approx(result.field_capacity)
        assert at_1500.moisture == pytest.approx(result.wilting_point)

    def test_slope_matches_lambda(self, loam_kwargs):
        result = analyze_soil(**loam_kwargs)
        assert result.lambda_ * result.slope_b == pytest.approx(1.0)


class TestAnalyzeBatch:
    """Test batch analysis with per-row errors."""

    def test_mixed_batch(self):
        samples = [
            {"sand": 33, "clay": 33, "organic_matter": 0},
            {"sand": 20, "clay": 70, "organic_matter": 2},
            {"sand": 40, "organic_matter": 2},
            {"sand": "abc", "clay": 20, "organic_matter": 2},
            {"sand": 100, "clay": 0, "organic_matter": 0},
        ]
        outcomes = analyze_batch(samples)

        assert [o.index for o in outcomes] == [0, 1, 2, 3, 4]
        assert outcomes[0].ok
        assert outcomes[0].result.texture_class == TextureClass.CLAY_LOAM

        assert not outcomes[1].ok
        assert outcomes[1].error_type == "RangeError"
        assert "clay" in outcomes[1].error

        assert outcomes[2].error_type == "KeyError"
        assert outcomes[2].error == "missing field 'clay'"

        assert outcomes[3].error_type == "ValueError"
        assert outcomes[4].error_type == "ComputationError"

    def test_non_scalar_cell(self):
        """A list or object cell fails its own row only."""
        outcomes = analyze_batch(
            [
                {"sand": [40], "clay": 20, "organic_matter": 2},
                {"sand": 40, "clay": {"value": 20}, "organic_matter": 2},
                {"sand": 40, "clay": 20, "organic_matter": 2},
            ]
        )

        assert [o.error_type for o in outcomes[:2]] == ["TypeError", "TypeError"]
        assert outcomes[0].sample["sand"] == [40]
        assert outcomes[2].ok

    def test_string_values_from_csv(self):
        outcomes = analyze_batch(
            [
                {
                    "sand": "40",
                    "clay": "20",
                    "organic_matter": "2.5",
                    "bulk_density_factor": "",
                    "gravel_content": "15",
                }
            ]
        )
        assert outcomes[0].ok
        assert outcomes[0].result.input.bulk_density_factor == 1.0
        assert outcomes[0].result.gravel is not None

    def test_sample_preserved(self):
        sample = {"sand": 40, "clay": 20, "organic_matter": 2.5, "site": "A1"}
        outcome = analyze_batch([sample])[0]
        assert outcome.sample == sample

    def test_empty(self):
        assert analyze_batch([]) == []

    def test_matches_single_analysis(self):
        outcome = analyze_batch([{"sand": 40, "clay": 20, "organic_matter": 2.5}])[0]
        assert outcome.result == analyze_soil(40, 20, 2.5)
