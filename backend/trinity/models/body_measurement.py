from sqlalchemy import Column, Float, DateTime
from sqlalchemy.sql import func
import uuid
from trinity.db.database import Base
from trinity.db.types import GUID


class BodyMeasurement(Base):
    """A weekly check-in: circumferences plus the Navy composition derived from them."""

    __tablename__ = "body_measurements"

    measurement_id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID(), nullable=False, index=True)
    measured_at = Column(DateTime(timezone=True), nullable=False, index=True)

    height_cm = Column(Float, nullable=False)
    weight_kg = Column(Float, nullable=False)
    neck_cm = Column(Float, nullable=False)
    waist_cm = Column(Float, nullable=False)
    hip_cm = Column(Float, nullable=True)  # women only

    # Calculated metrics
    body_fat_percentage = Column(Float, nullable=True)
    fat_mass_kg = Column(Float, nullable=True)
    lean_mass_kg = Column(Float, nullable=True)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
