"""
Weather data schemas.

This module contains Pydantic schemas for the normalized OpenWeatherMap
responses: current conditions, forecast and air quality.

Units after normalization:
- Temperature: whole degrees Celsius
- Wind speed: whole km/h
- Visibility: km
- Probability of precipitation: whole percent
- Pollutant concentrations: µg/m³, one decimal
"""

from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field

# Pass-through upstream values keep their JSON type (int stays int)
Number = Union[int, float]


class Coordinates(BaseModel):
    """Geographic coordinates."""
    lat: Number
    lon: Number


class Condition(BaseModel):
    """Weather condition summary (description localized upstream)."""
    main: str
    description: str
    icon: str


class Wind(BaseModel):
    """Wind for current conditions."""
    speed: int = Field(..., description="Wind speed in km/h")
    deg: Number = Field(..., description="Wind bearing in degrees (0=North)")
    direction: str = Field(..., description="16-point compass code")


class HourlyWind(BaseModel):
    """Wind for a forecast sample."""
    speed: int = Field(..., description="Wind speed in km/h")
    direction: str


class WeatherSnapshot(BaseModel):
    """Current weather for a city."""
    city: str
    country: Optional[str] = None
    coord: Coordinates
    temperature: int
    feels_like: int
    temp_min: int
    temp_max: int
    humidity: Number
    pressure: Number
    visibility: Optional[float] = Field(None, description="Visibility in km")
    wind: Wind
    clouds: Number
    weather: Condition
    sunrise: Optional[int] = None
    sunset: Optional[int] = None
    timezone: int = Field(..., description="Shift in seconds from UTC")
    dt: int


class HourlyForecast(BaseModel):
    """One 3-hour forecast sample."""
    dt: int
    time: str = Field(..., description="HH:MM (UTC)")
    temperature: int
    feels_like: int
    humidity: Number
    weather: Condition
    wind: HourlyWind
    pop: int = Field(..., description="Probability of precipitation in percent")
    rain: Number = Field(..., description="Rain volume for the last 3 hours in mm")
    clouds: Number


class DailyForecast(BaseModel):
    """
    One day of forecast.

    Taken from the first sample of that date, not aggregated over the day.
    """
    dt: int
    date: str = Field(..., description="YYYY-MM-DD (UTC)")
    day_name: str
    temp_min: int
    temp_max: int
    humidity: Number
    weather: Condition
    pop: int
    wind_speed: int


class ForecastBundle(BaseModel):
    """Hourly and daily views of a 5 day / 3 hour forecast."""
    city: str
    country: Optional[str] = None
    coord: Coordinates
    timezone: int
    hourly: List[HourlyForecast]
    daily: List[DailyForecast]


class AirQualitySample(BaseModel):
    """Current air quality at a location."""
    aqi: int = Field(..., ge=1, le=5)
    label: str
    color: str
    components: Dict[str, float]
    dt: int


class UpstreamError(BaseModel):
    """Failure reaching or reading the weather provider."""
    error: bool = True
    message: str
