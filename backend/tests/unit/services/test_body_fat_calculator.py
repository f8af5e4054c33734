"""
Unit tests for BodyFatCalculator service.

Tests the Navy formula, clamping, mass split and category thresholds.
"""

import math

import pytest
from trinity.domain.measurements import (
    BodyFatCategory,
    FemaleMeasurements,
    Gender,
    InvalidInput,
    MaleMeasurements,
)
from trinity.services.body_fat_calculator import BodyFatCalculator, round_half_up


def navy_male(height_cm, waist_cm, neck_cm):
    raw = (
        86.010 * math.log10(waist_cm - neck_cm)
        - 70.041 * math.log10(height_cm / 2.54)
        + 36.76
    )
    return max(2.0, min(50.0, raw))


def navy_female(height_cm, waist_cm, neck_cm, hip_cm):
    raw = (
        163.205 * math.log10(waist_cm + hip_cm - neck_cm)
        - 97.684 * math.log10(height_cm / 2.54)
        - 78.387
    )
    return max(2.0, min(50.0, raw))


class TestNavyBodyFatCalculation:
    """Tests for Navy body fat percentage calculation."""

    def test_male_matches_formula(self):
        """Male result equals the Navy formula (height in inches)."""
        bfp = BodyFatCalculator.calculate_navy_body_fat(
            gender=Gender.MALE,
            height_cm=180.0,
            waist_cm=60.0,
            neck_cm=40.0,
        )
        assert bfp == pytest.approx(navy_male(180.0, 60.0, 40.0))
        assert bfp == pytest.approx(19.05, abs=0.01)

    def test_female_matches_formula(self):
        """Female result equals the Navy formula with hip."""
        bfp = BodyFatCalculator.calculate_navy_body_fat(
            gender=Gender.FEMALE,
            height_cm=165.0,
            waist_cm=60.0,
            neck_cm=40.0,
            hip_cm=30.0,
        )
        assert bfp == pytest.approx(navy_female(165.0, 60.0, 40.0, 30.0))
        assert 20 < bfp < 25

    def test_accepts_plain_strings(self):
        bfp = BodyFatCalculator.calculate_navy_body_fat(
            gender="male",
            height_cm=180.0,
            waist_cm=60.0,
            neck_cm=40.0,
        )
        assert bfp == pytest.approx(navy_male(180.0, 60.0, 40.0))

    def test_non_positive_values(self):
        """Raises InvalidInput for zero or negative measurements."""
        for height, waist, neck in [(0, 90, 40), (180, -90, 40), (180, 90, 0)]:
            with pytest.raises(InvalidInput, match="must be positive"):
                BodyFatCalculator.calculate_navy_body_fat(
                    gender=Gender.MALE,
                    height_cm=height,
                    waist_cm=waist,
                    neck_cm=neck,
                )

    def test_female_missing_hip(self):
        """Raises InvalidInput when a woman has no hip measurement."""
        with pytest.raises(InvalidInput, match="Hip measurement is required"):
            BodyFatCalculator.calculate_navy_body_fat(
                gender=Gender.FEMALE,
                height_cm=165.0,
                waist_cm=75.0,
                neck_cm=35.0,
                hip_cm=None,
            )

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            BodyFatCalculator.calculate_navy_body_fat(
                gender=Gender.FEMALE,
                height_cm=165.0,
                waist_cm=75.0,
                neck_cm=35.0,
                hip_cm=-1.0,
            )

    def test_clamped_high(self):
        """Typical adult circumferences saturate at the 50% ceiling."""
        bfp = BodyFatCalculator.calculate_navy_body_fat(
            gender=Gender.MALE,
            height_cm=180.0,
            waist_cm=92.0,
            neck_cm=38.0,
        )
        assert bfp == 50.0

    def test_clamped_low(self):
        bfp = BodyFatCalculator.calculate_navy_body_fat(
            gender=Gender.MALE,
            height_cm=190.0,
            waist_cm=45.0,
            neck_cm=40.0,
        )
        assert bfp == 2.0

    @pytest.mark.parametrize(
        "waist_cm,neck_cm",
        [(40.0, 40.0), (35.0, 40.0), (40.0001, 40.0)],
    )
    def test_non_positive_log_argument_hits_lower_bound(self, waist_cm, neck_cm):
        """waist <= neck has no real log value; result is the lower bound."""
        bfp = BodyFatCalculator.calculate_navy_body_fat(
            gender=Gender.MALE,
            height_cm=180.0,
            waist_cm=waist_cm,
            neck_cm=neck_cm,
        )
        assert bfp == 2.0

    def test_female_non_positive_log_argument(self):
        bfp = BodyFatCalculator.calculate_navy_body_fat(
            gender=Gender.FEMALE,
            height_cm=165.0,
            waist_cm=10.0,
            neck_cm=40.0,
            hip_cm=20.0,
        )
        assert bfp == 2.0


class TestFatAndLeanMass:
    """Tests for fat and lean mass calculation."""

    def test_fat_mass(self):
        assert BodyFatCalculator.calculate_fat_mass(80.0, 20.0) == pytest.approx(16.0)

    def test_lean_mass(self):
        assert BodyFatCalculator.calculate_lean_mass(80.0, 20.0) == pytest.approx(64.0)

    def test_fat_plus_lean_is_weight(self):
        weight, bfp = 73.3, 17.77
        fat_mass = BodyFatCalculator.calculate_fat_mass(weight, bfp)
        lean_mass = BodyFatCalculator.calculate_lean_mass(weight, bfp)
        assert fat_mass + lean_mass == pytest.approx(weight)

    def test_invalid_weight(self):
        with pytest.raises(InvalidInput, match="Weight must be positive"):
            BodyFatCalculator.calculate_fat_mass(0.0, 20.0)

    def test_invalid_percentage(self):
        with pytest.raises(
            InvalidInput, match="Body fat percentage must be between 0 and 100"
        ):
            BodyFatCalculator.calculate_fat_mass(80.0, 150.0)


class TestCategorize:
    """Category thresholds differ by gender."""

    @pytest.mark.parametrize(
        "bfp,expected",
        [
            (5.9, BodyFatCategory.ESSENTIAL),
            (6.0, BodyFatCategory.ATHLETIC),
            (13.9, BodyFatCategory.ATHLETIC),
            (14.0, BodyFatCategory.FITNESS),
            (18.0, BodyFatCategory.AVERAGE),
            (24.9, BodyFatCategory.AVERAGE),
            (25.0, BodyFatCategory.OBESE),
        ],
    )
    def test_male_thresholds(self, bfp, expected):
        assert BodyFatCalculator.categorize(Gender.MALE, bfp) == expected

    @pytest.mark.parametrize(
        "bfp,expected",
        [
            (15.9, BodyFatCategory.ESSENTIAL),
            (16.0, BodyFatCategory.ATHLETIC),
            (20.0, BodyFatCategory.FITNESS),
            (25.0, BodyFatCategory.AVERAGE),
            (31.9, BodyFatCategory.AVERAGE),
            (32.0, BodyFatCategory.OBESE),
        ],
    )
    def test_female_thresholds(self, bfp, expected):
        assert BodyFatCalculator.categorize(Gender.FEMALE, bfp) == expected


class TestBodyComposition:
    """Tests for the full composition result."""

    def test_reference_male(self):
        """87.5 kg / 180 cm / neck 38 / waist 92."""
        result = BodyFatCalculator.calculate_body_composition(
            MaleMeasurements(weight_kg=87.5, height_cm=180, neck_cm=38, waist_cm=92)
        )
        expected = round_half_up(navy_male(180, 92, 38), 1)
        assert result.body_fat_percent == expected
        assert 2 <= result.body_fat_percent <= 50
        assert abs(result.fat_mass_kg + result.lean_mass_kg - 87.5) <= 0.1 + 1e-9

    def test_rounded_to_one_decimal(self):
        result = BodyFatCalculator.calculate_body_composition(
            MaleMeasurements(weight_kg=80.0, height_cm=180, neck_cm=40, waist_cm=60)
        )
        assert result.body_fat_percent == 19.1
        assert result.fat_mass_kg == 15.2
        assert result.lean_mass_kg == 64.8
        assert result.category == BodyFatCategory.AVERAGE
        assert result.label == "Nella Media"
        assert result.icon == "📊"

    def test_female_uses_hip(self):
        result = BodyFatCalculator.calculate_body_composition(
            FemaleMeasurements(
                weight_kg=60.0, height_cm=165, neck_cm=40, waist_cm=60, hip_cm=30
            )
        )
        assert result.body_fat_percent == round_half_up(
            navy_female(165, 60, 40, 30), 1
        )
        assert result.category == BodyFatCategory.FITNESS

    def test_saturated_result_is_obese_category(self):
        result = BodyFatCalculator.calculate_body_composition(
            MaleMeasurements(weight_kg=87.5, height_cm=180, neck_cm=38, waist_cm=92)
        )
        assert result.body_fat_percent == 50.0
        assert result.category == BodyFatCategory.OBESE
        assert result.label == "Elevato"


class TestRoundHalfUp:
    def test_ties_go_up(self):
        assert round_half_up(43.75, 1) == 43.8
        assert round_half_up(2.5) == 3.0

    def test_negative_ties_go_toward_positive(self):
        assert round_half_up(-2.5) == -2.0

    def test_magnitudes_beyond_scaling_are_returned_unchanged(self):
        assert round_half_up(1e308, 1) == 1e308

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_non_finite_rejected(self, value):
        with pytest.raises(InvalidInput, match="finite"):
            round_half_up(value, 1)


class TestExtremeInputs:
    """Very large or non-finite inputs never escape as arithmetic errors."""

    def test_huge_weight_composition(self):
        result = BodyFatCalculator.calculate_body_composition(
            MaleMeasurements(weight_kg=1e308, height_cm=180, neck_cm=40, waist_cm=60)
        )
        assert result.body_fat_percent == 19.1
        assert math.isfinite(result.fat_mass_kg)
        assert math.isfinite(result.lean_mass_kg)

    @pytest.mark.parametrize("height_cm", [math.inf, math.nan])
    def test_navy_rejects_non_finite_height(self, height_cm):
        with pytest.raises(InvalidInput, match="must be positive"):
            BodyFatCalculator.calculate_navy_body_fat(
                gender=Gender.MALE, height_cm=height_cm, waist_cm=90, neck_cm=40
            )

    def test_fat_mass_rejects_infinite_weight(self):
        with pytest.raises(InvalidInput, match="Weight must be positive"):
            BodyFatCalculator.calculate_fat_mass(math.inf, 20.0)
