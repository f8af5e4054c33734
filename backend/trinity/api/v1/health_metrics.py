"""
Stateless health metric endpoints.

Thin HTTP wrappers over trinity.services.health_metrics used by the
onboarding and check-in screens before anything is saved.
"""

from typing import List, Optional
from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field

from trinity.config import settings
from trinity.domain.measurements import (
    AccuracyScore,
    BMIResult,
    BodyCompositionResult,
    Gender,
    InsightReport,
    InvalidInput,
    measurements_for,
)
from trinity.services import health_metrics

router = APIRouter(prefix="/health-metrics")


class BMIRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    weight_kg: float = Field(..., gt=0, description="Weight in kilograms")
    height_cm: float = Field(..., gt=0, description="Height in centimeters")


class MeasurementSetRequest(BaseModel):
    """Measurement set for the Navy method and accuracy check."""

    model_config = ConfigDict(allow_inf_nan=False)

    gender: Gender
    weight_kg: float = Field(..., gt=0, description="Weight in kilograms")
    height_cm: float = Field(..., gt=0, description="Height in centimeters")
    neck_cm: float = Field(..., gt=0, description="Neck circumference in centimeters")
    waist_cm: float = Field(..., gt=0, description="Waist circumference in centimeters")
    hip_cm: Optional[float] = Field(
        None, gt=0, description="Hip circumference (required for women)"
    )


class CaloriesRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    gender: Gender
    weight_kg: float = Field(..., gt=0)
    height_cm: float = Field(..., gt=0)
    age: int = Field(..., ge=1, le=150)
    activity_multiplier: float = Field(
        default_factory=lambda: settings.default_activity_multiplier,
        gt=0,
        description="1.2 (sedentary) to 1.9 (very active)",
    )


class InsightRequest(BaseModel):
    """BMI inputs plus optional circumferences for the Navy analysis."""

    model_config = ConfigDict(allow_inf_nan=False)

    gender: Gender
    age: int = Field(..., ge=1, le=150)
    weight_kg: float = Field(..., gt=0)
    height_cm: float = Field(..., gt=0)
    neck_cm: Optional[float] = Field(None, gt=0)
    waist_cm: Optional[float] = Field(None, gt=0)
    hip_cm: Optional[float] = Field(None, gt=0)


class BMIResponse(BaseModel):
    bmi: float
    category: str
    label: str
    icon: str

    @classmethod
    def from_result(cls, result: BMIResult) -> "BMIResponse":
        return cls(
            bmi=result.bmi,
            category=result.category.value,
            label=result.label,
            icon=result.icon,
        )


class BodyCompositionResponse(BaseModel):
    body_fat_percent: float
    fat_mass_kg: float
    lean_mass_kg: float
    category: str
    label: str
    icon: str

    @classmethod
    def from_result(cls, result: BodyCompositionResult) -> "BodyCompositionResponse":
        return cls(
            body_fat_percent=result.body_fat_percent,
            fat_mass_kg=result.fat_mass_kg,
            lean_mass_kg=result.lean_mass_kg,
            category=result.category.value,
            label=result.label,
            icon=result.icon,
        )


class AccuracyResponse(BaseModel):
    score: int
    feedback: List[str]
    warnings: List[str]

    @classmethod
    def from_result(cls, result: AccuracyScore) -> "AccuracyResponse":
        return cls(
            score=result.score,
            feedback=list(result.feedback),
            warnings=list(result.warnings),
        )


class RangeResponse(BaseModel):
    min: float
    max: float


class CaloriesResponse(BaseModel):
    daily_calories: int


class BodyCompositionSummaryResponse(BaseModel):
    fat_mass: str
    lean_mass: str
    category: str
    comparison: str


class InsightResponse(BaseModel):
    insights: List[str]
    recommendations: List[str]
    body_composition: Optional[BodyCompositionSummaryResponse] = None

    @classmethod
    def from_report(cls, report: InsightReport) -> "InsightResponse":
        summary = None
        if report.body_composition:
            summary = BodyCompositionSummaryResponse(
                fat_mass=report.body_composition.fat_mass,
                lean_mass=report.body_composition.lean_mass,
                category=report.body_composition.category,
                comparison=report.body_composition.comparison,
            )
        return cls(
            insights=list(report.insights),
            recommendations=list(report.recommendations),
            body_composition=summary,
        )


def _bad_request(error: InvalidInput) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@router.post("/bmi", response_model=BMIResponse, status_code=status.HTTP_200_OK)
async def calculate_bmi(request: BMIRequest):
    """BMI value and category."""
    try:
        result = health_metrics.calculate_bmi(request.weight_kg, request.height_cm)
    except InvalidInput as e:
        raise _bad_request(e)
    return BMIResponse.from_result(result)


@router.post(
    "/body-composition",
    response_model=BodyCompositionResponse,
    status_code=status.HTTP_200_OK,
)
async def calculate_body_composition(request: MeasurementSetRequest):
    """U.S. Navy body composition. Women must send hip_cm."""
    try:
        measurements = measurements_for(**request.model_dump())
        result = health_metrics.calculate_body_composition(measurements)
    except InvalidInput as e:
        raise _bad_request(e)
    return BodyCompositionResponse.from_result(result)


@router.get(
    "/ideal-weight", response_model=RangeResponse, status_code=status.HTTP_200_OK
)
async def get_ideal_weight_range(
    height_cm: float = Query(
        ..., gt=0, allow_inf_nan=False, description="Height in centimeters"
    ),
):
    try:
        result = health_metrics.ideal_weight_range(height_cm)
    except InvalidInput as e:
        raise _bad_request(e)
    return RangeResponse(min=result.min, max=result.max)


@router.get(
    "/ideal-body-fat", response_model=RangeResponse, status_code=status.HTTP_200_OK
)
async def get_ideal_body_fat_range(
    gender: Gender = Query(...),
    age: int = Query(..., ge=1, le=150),
):
    result = health_metrics.ideal_body_fat_range(gender, age)
    return RangeResponse(min=result.min, max=result.max)


@router.post(
    "/accuracy", response_model=AccuracyResponse, status_code=status.HTTP_200_OK
)
async def score_measurements(request: MeasurementSetRequest):
    """Heuristic plausibility check of a measurement set."""
    try:
        measurements = measurements_for(**request.model_dump())
        result = health_metrics.score_measurements(measurements)
    except InvalidInput as e:
        raise _bad_request(e)
    return AccuracyResponse.from_result(result)


@router.post(
    "/calories", response_model=CaloriesResponse, status_code=status.HTTP_200_OK
)
async def calculate_daily_calories(request: CaloriesRequest):
    """Mifflin-St Jeor daily calorie needs."""
    try:
        calories = health_metrics.daily_calories(
            request.weight_kg,
            request.height_cm,
            request.age,
            request.gender,
            request.activity_multiplier,
        )
    except InvalidInput as e:
        raise _bad_request(e)
    return CaloriesResponse(daily_calories=calories)


@router.post(
    "/insights", response_model=InsightResponse, status_code=status.HTTP_200_OK
)
async def compose_insights(request: InsightRequest):
    """
    Insight report.

    Body composition is included only when neck and waist (and hip for
    women) are sent.
    """
    try:
        bmi = health_metrics.calculate_bmi(request.weight_kg, request.height_cm)

        composition = None
        if request.neck_cm is not None and request.waist_cm is not None:
            measurements = measurements_for(
                request.gender,
                weight_kg=request.weight_kg,
                height_cm=request.height_cm,
                neck_cm=request.neck_cm,
                waist_cm=request.waist_cm,
                hip_cm=request.hip_cm,
            )
            composition = health_metrics.calculate_body_composition(measurements)

        report = health_metrics.compose_insights(
            bmi, request.age, request.gender, composition
        )
    except InvalidInput as e:
        raise _bad_request(e)

    return InsightResponse.from_report(report)
