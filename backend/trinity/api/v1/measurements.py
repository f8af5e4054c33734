"""
Body measurement endpoints.

Handles CRUD operations for weekly body measurements, progress between
check-ins and the dashboard insight report.
"""

import logging
from dataclasses import asdict
from uuid import UUID
from datetime import date, datetime
from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, status, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from trinity.api.v1.health_metrics import (
    AccuracyResponse,
    BMIResponse,
    BodyCompositionResponse,
    InsightResponse,
)
from trinity.db.database import get_db
from trinity.domain.measurements import Gender
from trinity.services.body_measurement_service import BodyMeasurementService
from trinity.utils.auth import ensure_owner, get_current_user_id, get_optional_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


class MeasurementCreateRequest(BaseModel):
    """Request model for creating a measurement."""

    model_config = ConfigDict(allow_inf_nan=False)

    measured_at: datetime = Field(..., description="Date/time of measurement")
    height_cm: float = Field(..., gt=0, description="Height in centimeters")
    weight_kg: float = Field(..., gt=0, description="Weight in kilograms")
    neck_cm: float = Field(..., gt=0, description="Neck circumference in centimeters")
    waist_cm: float = Field(..., gt=0, description="Waist circumference in centimeters")
    hip_cm: Optional[float] = Field(
        None, gt=0, description="Hip circumference (required for women)"
    )
    gender: Optional[Gender] = Field(
        None, description="Gender for this check-in; saved to the profile"
    )


class MeasurementUpdateRequest(BaseModel):
    """Request model for updating a measurement."""

    model_config = ConfigDict(allow_inf_nan=False)

    measured_at: Optional[datetime] = None
    height_cm: Optional[float] = Field(None, gt=0)
    weight_kg: Optional[float] = Field(None, gt=0)
    neck_cm: Optional[float] = Field(None, gt=0)
    waist_cm: Optional[float] = Field(None, gt=0)
    hip_cm: Optional[float] = Field(None, gt=0)


class MeasurementResponse(BaseModel):
    """Response model for a measurement."""

    model_config = ConfigDict(from_attributes=True)

    measurement_id: UUID
    user_id: UUID
    measured_at: datetime
    height_cm: float
    weight_kg: float
    neck_cm: float
    waist_cm: float
    hip_cm: Optional[float]
    body_fat_percentage: Optional[float]
    fat_mass_kg: Optional[float]
    lean_mass_kg: Optional[float]
    created_at: datetime


class MeasurementStatsResponse(BaseModel):
    total_measurements: int
    first_measurement_date: Optional[date]
    latest_measurement_date: Optional[date]
    average_frequency_days: float
    has_complete_data: bool


class MeasurementProgressResponse(BaseModel):
    measurement_id: UUID
    previous_measurement_id: UUID
    weight_change: float
    body_fat_change: float
    fat_mass_change: float
    lean_mass_change: float
    days_between: int


class MeasurementInsightsResponse(BaseModel):
    """Full dashboard analysis for a stored measurement."""

    measurement_id: UUID
    bmi: BMIResponse
    body_composition: BodyCompositionResponse
    accuracy: AccuracyResponse
    report: InsightResponse


@router.post(
    "/measurements",
    response_model=MeasurementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_measurement(
    request: MeasurementCreateRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Create a new body measurement.

    Automatically calculates body fat percentage, fat mass, and lean mass.
    Requires authentication.
    """
    service = BodyMeasurementService(db)

    try:
        measurement = service.create_measurement(
            user_id=current_user_id,
            measured_at=request.measured_at,
            height_cm=request.height_cm,
            weight_kg=request.weight_kg,
            neck_cm=request.neck_cm,
            waist_cm=request.waist_cm,
            hip_cm=request.hip_cm,
            gender=request.gender,
        )

        return MeasurementResponse.model_validate(measurement)

    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.exception(f"[MEASUREMENTS] create failed for user {current_user_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create measurement: {str(e)}",
        )


@router.get(
    "/measurements",
    response_model=List[MeasurementResponse],
    status_code=status.HTTP_200_OK,
)
async def get_measurements(
    user_id: UUID = Query(..., description="User ID"),
    limit: Optional[int] = Query(
        None, ge=1, le=100, description="Maximum number of results"
    ),
    authenticated_user_id: Optional[UUID] = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    """
    Get user's measurement history, newest first.

    If authenticated, user_id must match authenticated user.
    """
    ensure_owner(user_id, authenticated_user_id)

    service = BodyMeasurementService(db)
    measurements = service.get_measurements(user_id, limit=limit)

    return [MeasurementResponse.model_validate(m) for m in measurements]


@router.get(
    "/measurements/latest",
    response_model=MeasurementResponse,
    status_code=status.HTTP_200_OK,
)
async def get_latest_measurement(
    user_id: UUID = Query(..., description="User ID"),
    authenticated_user_id: Optional[UUID] = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    """
    Get user's most recent measurement.

    Returns 404 if no measurements exist.
    """
    ensure_owner(user_id, authenticated_user_id)

    service = BodyMeasurementService(db)
    measurement = service.get_latest_measurement(user_id)

    if not measurement:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No measurements found for user",
        )

    return MeasurementResponse.model_validate(measurement)


@router.get(
    "/measurements/stats",
    response_model=MeasurementStatsResponse,
    status_code=status.HTTP_200_OK,
)
async def get_measurement_stats(
    user_id: UUID = Query(..., description="User ID"),
    authenticated_user_id: Optional[UUID] = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    """History summary: count, first/latest dates and average spacing."""
    ensure_owner(user_id, authenticated_user_id)

    stats = BodyMeasurementService(db).get_measurement_stats(user_id)
    return MeasurementStatsResponse(**asdict(stats))


@router.get(
    "/measurements/{measurement_id}",
    response_model=MeasurementResponse,
    status_code=status.HTTP_200_OK,
)
async def get_measurement(
    measurement_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Get a specific measurement by ID.

    Requires authentication. User can only access their own measurements.
    """
    service = BodyMeasurementService(db)
    measurement = service.get_measurement(measurement_id, current_user_id)

    if not measurement:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Measurement not found",
        )

    return MeasurementResponse.model_validate(measurement)


@router.put(
    "/measurements/{measurement_id}",
    response_model=MeasurementResponse,
    status_code=status.HTTP_200_OK,
)
async def update_measurement(
    measurement_id: UUID,
    request: MeasurementUpdateRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Update an existing measurement.

    Recalculates body fat percentage and related metrics automatically.
    """
    service = BodyMeasurementService(db)

    if not service.get_measurement(measurement_id, current_user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Measurement not found",
        )

    try:
        measurement = service.update_measurement(
            measurement_id=measurement_id,
            user_id=current_user_id,
            measured_at=request.measured_at,
            height_cm=request.height_cm,
            weight_kg=request.weight_kg,
            neck_cm=request.neck_cm,
            waist_cm=request.waist_cm,
            hip_cm=request.hip_cm,
        )

        return MeasurementResponse.model_validate(measurement)

    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.exception(f"[MEASUREMENTS] update of {measurement_id} failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update measurement: {str(e)}",
        )


@router.delete(
    "/measurements/{measurement_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_measurement(
    measurement_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Delete a measurement. Requires authentication."""
    service = BodyMeasurementService(db)
    deleted = service.delete_measurement(measurement_id, current_user_id)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Measurement not found",
        )


@router.get(
    "/measurements/{measurement_id}/progress",
    response_model=MeasurementProgressResponse,
    status_code=status.HTTP_200_OK,
)
async def get_measurement_progress(
    measurement_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Changes since the previous check-in.

    Returns 404 when the measurement is the user's first.
    """
    service = BodyMeasurementService(db)
    measurement = service.get_measurement(measurement_id, current_user_id)
    if not measurement:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Measurement not found",
        )

    previous = service.get_previous_measurement(measurement)
    if not previous:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No previous measurement to compare with",
        )

    progress = service.calculate_progress(measurement, previous)
    return MeasurementProgressResponse(
        measurement_id=measurement.measurement_id,
        previous_measurement_id=previous.measurement_id,
        **asdict(progress),
    )


@router.get(
    "/measurements/{measurement_id}/insights",
    response_model=MeasurementInsightsResponse,
    status_code=status.HTTP_200_OK,
)
async def get_measurement_insights(
    measurement_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    BMI, body composition, measurement accuracy and recommendations.

    Uses the gender and age stored on the user's profile.
    """
    service = BodyMeasurementService(db)

    if not service.get_measurement(measurement_id, current_user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Measurement not found",
        )

    try:
        bmi, composition, accuracy, report = service.build_insights(
            current_user_id, measurement_id
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return MeasurementInsightsResponse(
        measurement_id=measurement_id,
        bmi=BMIResponse.from_result(bmi),
        body_composition=BodyCompositionResponse.from_result(composition),
        accuracy=AccuracyResponse.from_result(accuracy),
        report=InsightResponse.from_report(report),
    )
