"""
Body fat calculator service.

Implements the U.S. Navy circumference method used by the check-in flow.
Height is converted to inches; circumferences enter the formula in
centimetres. All results are clamped to 2-50% and rounded to 1 decimal.
"""

import math
from typing import Dict, Optional, Tuple

from trinity.domain.measurements import (
    BodyCompositionResult,
    BodyFatCategory,
    FemaleMeasurements,
    Gender,
    InvalidInput,
    Measurements,
)

MIN_BODY_FAT = 2.0
MAX_BODY_FAT = 50.0

# Upper bounds (exclusive) per category, checked in order
CATEGORY_THRESHOLDS: Dict[Gender, Tuple[Tuple[float, BodyFatCategory], ...]] = {
    Gender.MALE: (
        (6, BodyFatCategory.ESSENTIAL),
        (14, BodyFatCategory.ATHLETIC),
        (18, BodyFatCategory.FITNESS),
        (25, BodyFatCategory.AVERAGE),
    ),
    Gender.FEMALE: (
        (16, BodyFatCategory.ESSENTIAL),
        (20, BodyFatCategory.ATHLETIC),
        (25, BodyFatCategory.FITNESS),
        (32, BodyFatCategory.AVERAGE),
    ),
}

CATEGORY_DISPLAY: Dict[BodyFatCategory, Tuple[str, str]] = {
    BodyFatCategory.ESSENTIAL: ("Grasso Essenziale", "🔥"),
    BodyFatCategory.ATHLETIC: ("Atletico", "💪"),
    BodyFatCategory.FITNESS: ("Fitness", "✅"),
    BodyFatCategory.AVERAGE: ("Nella Media", "📊"),
    BodyFatCategory.OBESE: ("Elevato", "⚠️"),
}


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties going up, the way the mobile client rounds."""
    if not math.isfinite(value):
        raise InvalidInput("Value must be a finite number")

    factor = 10**digits
    scaled = value * factor
    # Magnitudes this large carry no fractional digits
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / factor


class BodyFatCalculator:
    """Service for calculating body fat percentage and body composition."""

    @staticmethod
    def calculate_navy_body_fat(
        gender: Gender,
        height_cm: float,
        waist_cm: float,
        neck_cm: float,
        hip_cm: Optional[float] = None,
    ) -> float:
        """
        Calculate body fat percentage using U.S. Navy method.

        Args:
            gender: Gender.MALE or Gender.FEMALE
            height_cm: Height in centimeters
            waist_cm: Waist circumference in centimeters
            neck_cm: Neck circumference in centimeters
            hip_cm: Hip circumference in centimeters (required for women)

        Returns:
            Unrounded body fat percentage, clamped to 2-50

        Raises:
            InvalidInput: If inputs are invalid or missing required measurements
        """
        if not all(
            math.isfinite(value) and value > 0
            for value in (height_cm, waist_cm, neck_cm)
        ):
            raise InvalidInput("Height, waist, and neck must be positive values")

        if gender == Gender.FEMALE and (
            hip_cm is None or not math.isfinite(hip_cm) or hip_cm <= 0
        ):
            raise InvalidInput("Hip measurement is required for women")

        height_in = height_cm / 2.54

        if gender == Gender.MALE:
            span = waist_cm - neck_cm
            coefficient, height_coefficient, constant = 86.010, 70.041, 36.76
        else:
            span = waist_cm + hip_cm - neck_cm
            coefficient, height_coefficient, constant = 163.205, 97.684, -78.387

        # log10 diverges to -inf as span -> 0, so it lands on the lower bound
        if span <= 0:
            return MIN_BODY_FAT

        bfp = (
            coefficient * math.log10(span)
            - height_coefficient * math.log10(height_in)
            + constant
        )

        return max(MIN_BODY_FAT, min(MAX_BODY_FAT, bfp))

    @staticmethod
    def calculate_fat_mass(weight_kg: float, body_fat_percentage: float) -> float:
        """
        Calculate fat mass from total weight and body fat percentage.

        Returns the unrounded value; callers round for display.
        """
        if not math.isfinite(weight_kg) or weight_kg <= 0:
            raise InvalidInput("Weight must be positive")
        if body_fat_percentage < 0 or body_fat_percentage > 100:
            raise InvalidInput("Body fat percentage must be between 0 and 100")

        return (body_fat_percentage / 100.0) * weight_kg

    @staticmethod
    def calculate_lean_mass(weight_kg: float, body_fat_percentage: float) -> float:
        """Calculate lean body mass (total weight minus fat mass)."""
        fat_mass = BodyFatCalculator.calculate_fat_mass(weight_kg, body_fat_percentage)
        return weight_kg - fat_mass

    @staticmethod
    def categorize(gender: Gender, body_fat_percentage: float) -> BodyFatCategory:
        for upper_bound, category in CATEGORY_THRESHOLDS[Gender(gender)]:
            if body_fat_percentage < upper_bound:
                return category
        return BodyFatCategory.OBESE

    @classmethod
    def calculate_body_composition(
        cls, measurements: Measurements
    ) -> BodyCompositionResult:
        """
        Run the full Navy analysis on a measurement set.

        Category is decided on the unrounded percentage; the three numeric
        outputs are rounded to 1 decimal.
        """
        hip_cm = (
            measurements.hip_cm
            if isinstance(measurements, FemaleMeasurements)
            else None
        )
        bfp = cls.calculate_navy_body_fat(
            gender=measurements.gender,
            height_cm=measurements.height_cm,
            waist_cm=measurements.waist_cm,
            neck_cm=measurements.neck_cm,
            hip_cm=hip_cm,
        )
        fat_mass = cls.calculate_fat_mass(measurements.weight_kg, bfp)
        lean_mass = measurements.weight_kg - fat_mass

        category = cls.categorize(measurements.gender, bfp)
        label, icon = CATEGORY_DISPLAY[category]

        return BodyCompositionResult(
            body_fat_percent=round_half_up(bfp, 1),
            fat_mass_kg=round_half_up(fat_mass, 1),
            lean_mass_kg=round_half_up(lean_mass, 1),
            category=category,
            label=label,
            icon=icon,
        )
