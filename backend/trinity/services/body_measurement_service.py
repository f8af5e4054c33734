"""
Body measurement service.

Handles CRUD operations for body measurements, automatic Navy body
composition, progress between check-ins and history statistics.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID
from typing import Optional, List, Tuple, Union
from sqlalchemy.orm import Session
from sqlalchemy import and_, desc

from trinity.domain.measurements import (
    AccuracyScore,
    BMIResult,
    BodyCompositionResult,
    Gender,
    InsightReport,
    Measurements,
    measurements_for,
    parse_gender,
)
from trinity.models.body_measurement import BodyMeasurement
from trinity.models.user import User
from trinity.services import health_metrics
from trinity.services.notification_service import (
    Notification,
    NotificationBus,
    NotificationKind,
    notification_bus,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeasurementProgress:
    weight_change: float
    body_fat_change: float
    fat_mass_change: float
    lean_mass_change: float
    days_between: int


@dataclass(frozen=True)
class MeasurementStats:
    total_measurements: int
    first_measurement_date: Optional[date]
    latest_measurement_date: Optional[date]
    average_frequency_days: float
    has_complete_data: bool


def _day(value: datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


class BodyMeasurementService:
    """Service for managing body measurements."""

    def __init__(self, db: Session, bus: NotificationBus = notification_bus):
        self.db = db
        self.bus = bus

    def _load_user(self, user_id: UUID) -> User:
        user = self.db.query(User).filter(User.user_id == user_id).first()
        if not user:
            raise ValueError(f"User {user_id} not found")
        return user

    def _get_user(self, user_id: UUID) -> User:
        user = self._load_user(user_id)
        if not user.gender:
            raise ValueError("User gender must be set before creating measurements")
        return user

    def create_measurement(
        self,
        user_id: UUID,
        measured_at: datetime,
        height_cm: float,
        weight_kg: float,
        neck_cm: float,
        waist_cm: float,
        hip_cm: Optional[float] = None,
        gender: Optional[Union[Gender, str]] = None,
    ) -> BodyMeasurement:
        """
        Create a new body measurement with automatic body composition.

        Args:
            user_id: User ID
            measured_at: Date/time of measurement
            height_cm: Height in centimeters
            weight_kg: Weight in kilograms
            neck_cm: Neck circumference in centimeters
            waist_cm: Waist circumference in centimeters
            hip_cm: Hip circumference (required for women, ignored for men)
            gender: Gender entered with the check-in; saved to the user's
                profile when given

        Returns:
            Created BodyMeasurement object

        Raises:
            ValueError: If user not found, no gender is known or measurements
                are invalid
        """
        user = self._load_user(user_id)

        if gender is not None:
            gender = parse_gender(gender)
        elif user.gender:
            gender = parse_gender(user.gender)
        else:
            raise ValueError("User gender must be set before creating measurements")

        measurements = measurements_for(
            gender,
            weight_kg=weight_kg,
            height_cm=height_cm,
            neck_cm=neck_cm,
            waist_cm=waist_cm,
            hip_cm=hip_cm,
        )
        composition = health_metrics.calculate_body_composition(measurements)

        measurement = BodyMeasurement(
            user_id=user_id,
            measured_at=measured_at,
            height_cm=height_cm,
            weight_kg=weight_kg,
            neck_cm=neck_cm,
            waist_cm=waist_cm,
            hip_cm=getattr(measurements, "hip_cm", None),
            body_fat_percentage=composition.body_fat_percent,
            fat_mass_kg=composition.fat_mass_kg,
            lean_mass_kg=composition.lean_mass_kg,
        )

        if user.gender != gender.value:
            logger.info(
                f"[MEASUREMENTS] Gender for user {user_id} set to {gender.value}"
            )
            user.gender = gender.value

        self.db.add(measurement)
        self.db.commit()
        self.db.refresh(measurement)

        logger.info(
            f"[MEASUREMENTS] Saved {measurement.measurement_id} for user {user_id}: "
            f"{composition.body_fat_percent}% ({composition.category.value})"
        )
        self.bus.publish(
            Notification(
                title="📏 Misurazioni salvate",
                message=(
                    f"Grasso corporeo: {composition.body_fat_percent}% "
                    f"({composition.label})"
                ),
                kind=NotificationKind.SUCCESS,
                data={
                    "user_id": str(user_id),
                    "measurement_id": str(measurement.measurement_id),
                },
            )
        )

        return measurement

    def get_measurements(
        self, user_id: UUID, limit: Optional[int] = None
    ) -> List[BodyMeasurement]:
        """User's measurement history, newest first."""
        query = (
            self.db.query(BodyMeasurement)
            .filter(BodyMeasurement.user_id == user_id)
            .order_by(desc(BodyMeasurement.measured_at))
        )

        if limit:
            query = query.limit(limit)

        return query.all()

    def get_latest_measurement(self, user_id: UUID) -> Optional[BodyMeasurement]:
        return (
            self.db.query(BodyMeasurement)
            .filter(BodyMeasurement.user_id == user_id)
            .order_by(desc(BodyMeasurement.measured_at))
            .first()
        )

    def get_measurement(
        self, measurement_id: UUID, user_id: UUID
    ) -> Optional[BodyMeasurement]:
        """A specific measurement, only if it belongs to ``user_id``."""
        return (
            self.db.query(BodyMeasurement)
            .filter(
                and_(
                    BodyMeasurement.measurement_id == measurement_id,
                    BodyMeasurement.user_id == user_id,
                )
            )
            .first()
        )

    def get_previous_measurement(
        self, measurement: BodyMeasurement
    ) -> Optional[BodyMeasurement]:
        """The check-in taken immediately before ``measurement``."""
        return (
            self.db.query(BodyMeasurement)
            .filter(
                and_(
                    BodyMeasurement.user_id == measurement.user_id,
                    BodyMeasurement.measured_at < measurement.measured_at,
                )
            )
            .order_by(desc(BodyMeasurement.measured_at))
            .first()
        )

    def update_measurement(
        self,
        measurement_id: UUID,
        user_id: UUID,
        measured_at: Optional[datetime] = None,
        height_cm: Optional[float] = None,
        weight_kg: Optional[float] = None,
        neck_cm: Optional[float] = None,
        waist_cm: Optional[float] = None,
        hip_cm: Optional[float] = None,
    ) -> BodyMeasurement:
        """
        Update an existing measurement and recalculate body composition.

        Raises:
            ValueError: If measurement not found or the merged values are invalid
        """
        measurement = self.get_measurement(measurement_id, user_id)
        if not measurement:
            raise ValueError(f"Measurement {measurement_id} not found")

        user = self._get_user(user_id)

        merged = measurements_for(
            user.gender,
            weight_kg=weight_kg if weight_kg is not None else measurement.weight_kg,
            height_cm=height_cm if height_cm is not None else measurement.height_cm,
            neck_cm=neck_cm if neck_cm is not None else measurement.neck_cm,
            waist_cm=waist_cm if waist_cm is not None else measurement.waist_cm,
            hip_cm=hip_cm if hip_cm is not None else measurement.hip_cm,
        )
        composition = health_metrics.calculate_body_composition(merged)

        if measured_at is not None:
            measurement.measured_at = measured_at
        measurement.height_cm = merged.height_cm
        measurement.weight_kg = merged.weight_kg
        measurement.neck_cm = merged.neck_cm
        measurement.waist_cm = merged.waist_cm
        measurement.hip_cm = getattr(merged, "hip_cm", None)
        measurement.body_fat_percentage = composition.body_fat_percent
        measurement.fat_mass_kg = composition.fat_mass_kg
        measurement.lean_mass_kg = composition.lean_mass_kg

        self.db.commit()
        self.db.refresh(measurement)

        logger.info(f"[MEASUREMENTS] Updated {measurement_id} for user {user_id}")
        return measurement

    def delete_measurement(self, measurement_id: UUID, user_id: UUID) -> bool:
        """Delete a measurement. Returns False if it does not exist."""
        measurement = self.get_measurement(measurement_id, user_id)
        if not measurement:
            return False

        self.db.delete(measurement)
        self.db.commit()

        logger.info(f"[MEASUREMENTS] Deleted {measurement_id} for user {user_id}")
        return True

    @staticmethod
    def calculate_progress(
        current: BodyMeasurement, previous: BodyMeasurement
    ) -> MeasurementProgress:
        """
        Change between two check-ins.

        Missing composition values count as zero.
        """
        return MeasurementProgress(
            weight_change=current.weight_kg - previous.weight_kg,
            body_fat_change=(current.body_fat_percentage or 0)
            - (previous.body_fat_percentage or 0),
            fat_mass_change=(current.fat_mass_kg or 0) - (previous.fat_mass_kg or 0),
            lean_mass_change=(current.lean_mass_kg or 0)
            - (previous.lean_mass_kg or 0),
            days_between=(_day(current.measured_at) - _day(previous.measured_at)).days,
        )

    def get_measurement_stats(self, user_id: UUID) -> MeasurementStats:
        """
        Summary of a user's measurement history.

        Average frequency is the number of days spanned divided by the number
        of gaps between measurements (0 with fewer than two).
        """
        measurements = self.get_measurements(user_id)

        if not measurements:
            return MeasurementStats(
                total_measurements=0,
                first_measurement_date=None,
                latest_measurement_date=None,
                average_frequency_days=0.0,
                has_complete_data=False,
            )

        ordered = sorted(measurements, key=lambda m: _day(m.measured_at))
        first_date = _day(ordered[0].measured_at)
        latest_date = _day(ordered[-1].measured_at)
        total_days = (latest_date - first_date).days

        average_frequency = (
            total_days / (len(ordered) - 1) if len(ordered) > 1 else 0.0
        )
        has_complete_data = any(
            m.body_fat_percentage is not None
            and m.fat_mass_kg is not None
            and m.lean_mass_kg is not None
            for m in ordered
        )

        return MeasurementStats(
            total_measurements=len(ordered),
            first_measurement_date=first_date,
            latest_measurement_date=latest_date,
            average_frequency_days=average_frequency,
            has_complete_data=has_complete_data,
        )

    def build_insights(
        self, user_id: UUID, measurement_id: UUID
    ) -> Tuple[BMIResult, BodyCompositionResult, AccuracyScore, InsightReport]:
        """
        Dashboard analysis of a stored measurement.

        Raises:
            ValueError: If the measurement is missing or the user has no age set
        """
        measurement = self.get_measurement(measurement_id, user_id)
        if not measurement:
            raise ValueError(f"Measurement {measurement_id} not found")

        user = self._get_user(user_id)
        if not user.age:
            raise ValueError("User age must be set to generate insights")

        measurements = self.to_measurements(measurement, user.gender)
        bmi = health_metrics.calculate_bmi(measurement.weight_kg, measurement.height_cm)
        composition = health_metrics.calculate_body_composition(measurements)
        accuracy = health_metrics.score_measurements(measurements)
        report = health_metrics.compose_insights(bmi, user.age, user.gender, composition)

        return bmi, composition, accuracy, report

    @staticmethod
    def to_measurements(measurement: BodyMeasurement, gender: str) -> Measurements:
        return measurements_for(
            gender,
            weight_kg=measurement.weight_kg,
            height_cm=measurement.height_cm,
            neck_cm=measurement.neck_cm,
            waist_cm=measurement.waist_cm,
            hip_cm=measurement.hip_cm,
        )
