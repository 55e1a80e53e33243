# Pydantic schemas package

from weather_api.schemas.base import BaseSchema, TimestampSchema, ErrorResponse, MessageResponse
from weather_api.schemas.auth import (
    UserCreate, UserLogin, UserUpdate, UserPublic, TokenUser,
    AuthResponse, UserResponse
)
from weather_api.schemas.weather import (
    WeatherSnapshot, ForecastBundle, HourlyForecast, DailyForecast,
    AirQualitySample, UpstreamError
)

__all__ = [
    # Base schemas
    "BaseSchema", "TimestampSchema", "ErrorResponse", "MessageResponse",

    # Auth schemas
    "UserCreate", "UserLogin", "UserUpdate", "UserPublic", "TokenUser",
    "AuthResponse", "UserResponse",

    # Weather schemas
    "WeatherSnapshot", "ForecastBundle", "HourlyForecast", "DailyForecast",
    "AirQualitySample", "UpstreamError",
]
