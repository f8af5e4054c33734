"""
Body measurement domain models.

Immutable value records passed into and returned from the health metrics
calculations. Measurement sets are a tagged variant: a woman's measurement
set always carries a hip circumference, a man's never does.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class InvalidInput(ValueError):
    """Raised when a measurement violates a numeric precondition."""


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class BMICategory(str, Enum):
    UNDERWEIGHT = "underweight"
    NORMAL = "normal"
    OVERWEIGHT = "overweight"
    OBESE = "obese"


class BodyFatCategory(str, Enum):
    ESSENTIAL = "essential"
    ATHLETIC = "athletic"
    FITNESS = "fitness"
    AVERAGE = "average"
    OBESE = "obese"


def _positive(description: str):
    return Field(..., gt=0, strict=True, description=description)


class _MeasurementSet(BaseModel):
    """Shared validation: every value is a finite number greater than zero."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    weight_kg: float = _positive("Weight in kilograms")
    height_cm: float = _positive("Height in centimeters")
    neck_cm: float = _positive("Neck circumference in centimeters")
    waist_cm: float = _positive("Waist circumference in centimeters")

    def __init__(self, **values: Any):
        try:
            super().__init__(**values)
        except ValidationError as e:
            name = e.errors()[0]["loc"][0]
            raise InvalidInput(f"{name} must be a positive number") from None


class MaleMeasurements(_MeasurementSet):
    """Measurement set for the male Navy formula."""

    @property
    def gender(self) -> Gender:
        return Gender.MALE


class FemaleMeasurements(_MeasurementSet):
    """Measurement set for the female Navy formula (hip is mandatory)."""

    hip_cm: float = _positive("Hip circumference in centimeters")

    @property
    def gender(self) -> Gender:
        return Gender.FEMALE


Measurements = Union[MaleMeasurements, FemaleMeasurements]


def parse_gender(value: Union[Gender, str]) -> Gender:
    try:
        return Gender(value)
    except ValueError:
        raise InvalidInput("Gender must be 'male' or 'female'") from None


def measurements_for(
    gender: Union[Gender, str],
    weight_kg: float,
    height_cm: float,
    neck_cm: float,
    waist_cm: float,
    hip_cm: Optional[float] = None,
) -> Measurements:
    """
    Build the measurement variant matching ``gender``.

    ``hip_cm`` is ignored for men and required for women.

    Raises:
        InvalidInput: If gender is unknown, a value is not positive or a
            woman's hip circumference is missing
    """
    gender = parse_gender(gender)
    if gender is Gender.MALE:
        return MaleMeasurements(
            weight_kg=weight_kg,
            height_cm=height_cm,
            neck_cm=neck_cm,
            waist_cm=waist_cm,
        )

    if hip_cm is None:
        raise InvalidInput("Hip measurement is required for women")
    return FemaleMeasurements(
        weight_kg=weight_kg,
        height_cm=height_cm,
        neck_cm=neck_cm,
        waist_cm=waist_cm,
        hip_cm=hip_cm,
    )


@dataclass(frozen=True)
class Range:
    min: float
    max: float


@dataclass(frozen=True)
class BMIResult:
    bmi: float
    category: BMICategory
    label: str
    icon: str


@dataclass(frozen=True)
class BodyCompositionResult:
    body_fat_percent: float
    fat_mass_kg: float
    lean_mass_kg: float
    category: BodyFatCategory
    label: str
    icon: str


@dataclass(frozen=True)
class AccuracyScore:
    """Heuristic plausibility score for a measurement set (0-100)."""

    score: int
    feedback: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class BodyCompositionSummary:
    fat_mass: str
    lean_mass: str
    category: str
    comparison: str


@dataclass(frozen=True)
class InsightReport:
    insights: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    body_composition: Optional[BodyCompositionSummary] = None
