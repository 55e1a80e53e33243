"""
Weather router.

This module contains the authenticated endpoints proxying OpenWeatherMap:
current conditions, forecast and air quality.
"""

from typing import Optional, Union
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from weather_api.core.exceptions import ValidationError
from weather_api.dependencies.auth import get_current_user
from weather_api.dependencies.weather import get_weather_service
from weather_api.schemas.auth import TokenUser
from weather_api.schemas.base import ErrorResponse
from weather_api.schemas.weather import (
    AirQualitySample,
    ForecastBundle,
    UpstreamError,
    WeatherSnapshot,
)
from weather_api.services.openweather import OpenWeatherService

router = APIRouter(
    tags=["weather"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        502: {"model": UpstreamError},
    },
)


def _respond(result: Union[WeatherSnapshot, ForecastBundle, AirQualitySample, UpstreamError]):
    if isinstance(result, UpstreamError):
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=result.model_dump(),
        )
    return result


def _require_city(city: Optional[str]) -> str:
    if not city or not city.strip():
        raise ValidationError(["Parâmetro city é obrigatório"])
    return city.strip()


@router.get("/weather", response_model=WeatherSnapshot)
async def get_current_weather(
    city: Optional[str] = Query(None, description="City name, e.g. 'São Paulo'"),
    current_user: TokenUser = Depends(get_current_user),
    service: OpenWeatherService = Depends(get_weather_service),
):
    """Current weather for a city."""
    result = await service.get_current_weather(_require_city(city))
    return _respond(result)


@router.get("/forecast", response_model=ForecastBundle)
async def get_forecast(
    city: Optional[str] = Query(None, description="City name"),
    current_user: TokenUser = Depends(get_current_user),
    service: OpenWeatherService = Depends(get_weather_service),
):
    """
    Forecast for a city.

    ``hourly`` holds the next eight 3-hour samples; ``daily`` holds up to
    five days, each represented by its first sample.
    """
    result = await service.get_forecast(_require_city(city))
    return _respond(result)


@router.get("/air-quality", response_model=AirQualitySample)
async def get_air_quality(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Latitude in degrees"),
    lon: Optional[float] = Query(None, ge=-180, le=180, description="Longitude in degrees"),
    current_user: TokenUser = Depends(get_current_user),
    service: OpenWeatherService = Depends(get_weather_service),
):
    """Current air quality at a location."""
    if lat is None or lon is None:
        raise ValidationError(["Parâmetros lat e lon são obrigatórios"])

    result = await service.get_air_quality(lat, lon)
    return _respond(result)
