"""
Health metrics service.

BMI, ideal ranges, measurement plausibility, caloric needs and the insight
report shown on the body composition dashboard. Every function is pure:
the same inputs always give the same result.

Text returned to callers is the Italian copy used by the mobile client.
"""

import logging
import math
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from trinity.domain.measurements import (
    AccuracyScore,
    BMICategory,
    BMIResult,
    BodyCompositionResult,
    BodyCompositionSummary,
    BodyFatCategory,
    FemaleMeasurements,
    Gender,
    InsightReport,
    InvalidInput,
    Measurements,
    Range,
    parse_gender,
)
from trinity.services.body_fat_calculator import BodyFatCalculator, round_half_up

logger = logging.getLogger(__name__)

BMI_DISPLAY: Dict[BMICategory, Tuple[str, str]] = {
    BMICategory.UNDERWEIGHT: ("Sottopeso", "📉"),
    BMICategory.NORMAL: ("Normale", "✅"),
    BMICategory.OVERWEIGHT: ("Sovrappeso", "⚠️"),
    BMICategory.OBESE: ("Obesità", "🚨"),
}

IDEAL_BMI_MIN = 18.5
IDEAL_BMI_MAX = 24.9

# (upper age bound exclusive, range); the last entry covers 60+
IDEAL_BODY_FAT_TABLE: Dict[Gender, Tuple[Tuple[Optional[int], Range], ...]] = {
    Gender.MALE: (
        (30, Range(7, 17)),
        (40, Range(12, 21)),
        (50, Range(14, 23)),
        (60, Range(16, 25)),
        (None, Range(17, 25)),
    ),
    Gender.FEMALE: (
        (30, Range(16, 24)),
        (40, Range(17, 25)),
        (50, Range(19, 28)),
        (60, Range(22, 31)),
        (None, Range(22, 33)),
    ),
}

# Plausibility heuristics. Reproducible behaviour, not validated medical guidance.
WAIST_NECK_RATIO_BOUNDS = (1.1, 3.0)
WAIST_HIP_RATIO_BOUNDS = (0.6, 1.2)
WAIST_DEVIATION_LIMIT = 0.3

MEASUREMENT_TIPS = (
    "💡 Misura sempre nello stesso momento della giornata",
    "💡 Assicurati che il metro sia parallelo al pavimento",
)


class ActivityLevel(float, Enum):
    """Common activity multipliers for the caloric needs estimate."""

    SEDENTARY = 1.2
    LIGHT = 1.375
    MODERATE = 1.55
    ACTIVE = 1.725
    VERY_ACTIVE = 1.9


def calculate_bmi(weight_kg: float, height_cm: float) -> BMIResult:
    """
    Calculate BMI (Body Mass Index).

    Args:
        weight_kg: Weight in kilograms
        height_cm: Height in centimeters

    Returns:
        BMIResult with the value rounded to 1 decimal, category, label and icon

    Raises:
        InvalidInput: If weight or height is not positive
    """
    if not _positive_finite(weight_kg, height_cm):
        raise InvalidInput("Weight and height must be positive numbers")

    height_m_squared = _height_m_squared(height_cm)
    bmi = weight_kg / height_m_squared

    if bmi < 18.5:
        category = BMICategory.UNDERWEIGHT
    elif bmi < 25:
        category = BMICategory.NORMAL
    elif bmi < 30:
        category = BMICategory.OVERWEIGHT
    else:
        category = BMICategory.OBESE

    label, icon = BMI_DISPLAY[category]
    return BMIResult(
        bmi=round_half_up(bmi, 1), category=category, label=label, icon=icon
    )


def calculate_body_composition(measurements: Measurements) -> BodyCompositionResult:
    """Navy method body composition for a measurement set."""
    return BodyFatCalculator.calculate_body_composition(measurements)


def ideal_weight_range(height_cm: float) -> Range:
    """Weight range (kg) corresponding to BMI 18.5-24.9 at the given height."""
    if not _positive_finite(height_cm):
        raise InvalidInput("Height must be a positive number")

    height_m_squared = _height_m_squared(height_cm)
    return Range(
        min=round_half_up(IDEAL_BMI_MIN * height_m_squared, 1),
        max=round_half_up(IDEAL_BMI_MAX * height_m_squared, 1),
    )


def ideal_body_fat_range(gender: Union[Gender, str], age: int) -> Range:
    """Healthy body fat percentage range for a gender and age bracket."""
    brackets = IDEAL_BODY_FAT_TABLE[parse_gender(gender)]
    for upper_age, body_fat_range in brackets[:-1]:
        if age < upper_age:
            return body_fat_range
    return brackets[-1][1]


def score_measurements(measurements: Measurements) -> AccuracyScore:
    """
    Score how plausible a measurement set looks (0-100).

    Deductions:
        -20 waist/neck ratio outside 1.1-3.0 (warning)
        -15 women only: waist/hip ratio outside 0.6-1.2 (warning)
        -10 waist more than 30% away from the BMI-implied waist (feedback)

    A summary line for the score tier and two measuring tips are always
    included in the feedback.
    """
    feedback = []
    warnings = []
    score = 100

    waist_to_neck = measurements.waist_cm / measurements.neck_cm
    low, high = WAIST_NECK_RATIO_BOUNDS
    if waist_to_neck < low or waist_to_neck > high:
        score -= 20
        warnings.append("Rapporto vita/collo inusuale - verifica le misurazioni")

    if isinstance(measurements, FemaleMeasurements):
        waist_to_hip = measurements.waist_cm / measurements.hip_cm
        low, high = WAIST_HIP_RATIO_BOUNDS
        if waist_to_hip < low or waist_to_hip > high:
            score -= 15
            warnings.append(
                "Rapporto vita/fianchi inusuale - verifica le misurazioni"
            )

    bmi = calculate_bmi(measurements.weight_kg, measurements.height_cm).bmi
    expected_waist = measurements.height_cm * (0.5 if bmi > 25 else 0.45)
    deviation = abs(measurements.waist_cm - expected_waist) / expected_waist
    if deviation > WAIST_DEVIATION_LIMIT:
        score -= 10
        feedback.append("Circonferenza vita potrebbe non essere coerente con IMC")

    if score >= 90:
        feedback.append("✅ Misurazioni sembrano accurate")
    elif score >= 75:
        feedback.append("⚠️ Misurazioni accettabili ma ricontrollare")
    else:
        feedback.append("❌ Misurazioni potrebbero essere imprecise")

    feedback.extend(MEASUREMENT_TIPS)

    return AccuracyScore(score=max(0, score), feedback=feedback, warnings=warnings)


def daily_calories(
    weight_kg: float,
    height_cm: float,
    age: int,
    gender: Union[Gender, str],
    activity_multiplier: Union[ActivityLevel, float] = 1.5,
) -> int:
    """
    Daily calorie needs: Mifflin-St Jeor BMR times an activity multiplier.

    Inputs are not range checked.
    """
    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age
    bmr += 5 if parse_gender(gender) == Gender.MALE else -161

    return int(round_half_up(bmr * float(activity_multiplier)))


def compose_insights(
    bmi_result: BMIResult,
    age: int,
    gender: Union[Gender, str],
    body_composition: Optional[BodyCompositionResult] = None,
) -> InsightReport:
    """
    Build the insight and recommendation lists for the dashboard.

    Args:
        bmi_result: Result of calculate_bmi
        age: Age in years
        gender: Gender.MALE or Gender.FEMALE
        body_composition: Navy analysis, when circumferences are available

    Returns:
        InsightReport; body_composition summary is set only when a
        composition was supplied
    """
    gender = parse_gender(gender)
    insights = []
    recommendations = []
    ideal = ideal_body_fat_range(gender, age)

    insights.append(f"Il tuo IMC è {_display(bmi_result.bmi)} ({bmi_result.label})")

    if body_composition:
        insights.append(
            f"{body_composition.icon} Grasso corporeo: "
            f"{_display(body_composition.body_fat_percent)}% ({body_composition.label})"
        )
        insights.append(f"💪 Massa magra: {_display(body_composition.lean_mass_kg)} kg")
        insights.append(f"📊 Massa grassa: {_display(body_composition.fat_mass_kg)} kg")

        if body_composition.body_fat_percent < ideal.min:
            comparison = f"Sotto il range ideale ({ideal.min}-{ideal.max}%)"
            recommendations.append(
                "Considera di aumentare leggermente la massa grassa per la salute"
            )
        elif body_composition.body_fat_percent > ideal.max:
            comparison = f"Sopra il range ideale ({ideal.min}-{ideal.max}%)"
            recommendations.append("Concentrati sulla riduzione del grasso corporeo")
        else:
            comparison = f"Nel range ideale ({ideal.min}-{ideal.max}%)"
            recommendations.append("Mantieni la tua attuale composizione corporea")

        insights.append(f"🎯 {comparison}")

    if bmi_result.category == BMICategory.UNDERWEIGHT:
        insights.append("Potresti beneficiare di un aumento di peso graduale")
        recommendations.append(
            "Considera una dieta ricca di nutrienti e calorie salutari"
        )
        recommendations.append(
            "Focus su esercizi di forza per aumentare la massa muscolare"
        )
        if not body_composition:
            recommendations.append(
                "💡 Misura la composizione corporea per dati più precisi"
            )

    elif bmi_result.category == BMICategory.NORMAL:
        insights.append("Il tuo peso è nella norma per la tua altezza")
        recommendations.append(
            "Mantieni uno stile di vita attivo e una dieta equilibrata"
        )
        if body_composition and body_composition.category == BodyFatCategory.ATHLETIC:
            recommendations.append("Eccellente composizione corporea! Continua così")

    elif bmi_result.category == BMICategory.OVERWEIGHT:
        insights.append("Un leggero calo di peso potrebbe migliorare la tua salute")
        if body_composition:
            if body_composition.category in (
                BodyFatCategory.ATHLETIC,
                BodyFatCategory.FITNESS,
            ):
                insights.append(
                    "⚠️ IMC elevato ma composizione corporea buona - "
                    "probabilmente massa muscolare"
                )
                recommendations.append(
                    'Il tuo "sovrappeso" potrebbe essere massa muscolare'
                )
            else:
                recommendations.append("Deficit calorico moderato (300-500 cal/giorno)")
                recommendations.append(
                    "Combina cardio e pesi per preservare massa magra"
                )
        else:
            recommendations.append(
                "Considera un deficit calorico moderato (300-500 cal/giorno)"
            )
            recommendations.append(
                "💡 Misura la composizione corporea per distinguere muscolo da grasso"
            )

    elif bmi_result.category == BMICategory.OBESE:
        insights.append(
            "La perdita di peso è fortemente raccomandata per la tua salute"
        )
        recommendations.append(
            "Consulta un medico prima di iniziare qualsiasi programma"
        )
        if body_composition:
            recommendations.append(
                f"Obiettivo: ridurre {fat_loss_target_kg(body_composition, ideal)} "
                "kg di grasso"
            )
        recommendations.append(
            "Deficit calorico controllato con supporto professionale"
        )

    if age > 40:
        insights.append(
            "Dopo i 40 anni, mantenere la massa muscolare diventa cruciale"
        )
        recommendations.append("Includi esercizi di resistenza 2-3 volte a settimana")
        if body_composition:
            protein_g = int(round_half_up(body_composition.lean_mass_kg * 1.6))
            recommendations.append(
                f"Proteine: ~{protein_g}g al giorno per preservare massa magra"
            )

    if gender == Gender.FEMALE and age > 30:
        recommendations.append(
            "Monitora i cambiamenti ormonali che possono influire sulla "
            "composizione corporea"
        )

    summary = None
    if body_composition:
        summary = BodyCompositionSummary(
            fat_mass=f"{_display(body_composition.fat_mass_kg)} kg",
            lean_mass=f"{_display(body_composition.lean_mass_kg)} kg",
            category=body_composition.label,
            comparison=(
                f"{_display(body_composition.body_fat_percent)}% vs ideale "
                f"{ideal.min}-{ideal.max}%"
            ),
        )

    logger.debug(
        f"[INSIGHTS] bmi={bmi_result.bmi} category={bmi_result.category.value} "
        f"with_composition={body_composition is not None}"
    )

    return InsightReport(
        insights=insights, recommendations=recommendations, body_composition=summary
    )


def _display(value: float) -> str:
    """Format a number without a trailing '.0', as the client shows it."""
    return f"{value:.1f}".rstrip("0").rstrip(".")


def fat_loss_target_kg(body_composition: BodyCompositionResult, ideal: Range) -> int:
    """Kilograms of fat to lose to reach the top of the ideal range."""
    excess = body_composition.body_fat_percent - ideal.max
    fat_per_point = body_composition.fat_mass_kg / body_composition.body_fat_percent
    target = excess * fat_per_point
    return int(round_half_up(target))


def _positive_finite(*values: float) -> bool:
    return all(math.isfinite(value) and value > 0 for value in values)


def _height_m_squared(height_cm: float) -> float:
    height_m = height_cm / 100
    squared = height_m * height_m
    if not math.isfinite(squared) or squared <= 0:
        raise InvalidInput("Height is out of range")
    return squared
