from .user import User
from .body_measurement import BodyMeasurement

__all__ = [
    "User",
    "BodyMeasurement",
]
