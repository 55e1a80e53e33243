# Database models package

from weather_api.models.base import BaseModel
from weather_api.models.user import User

__all__ = [
    "BaseModel",
    "User",
]
