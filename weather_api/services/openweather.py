"""
OpenWeatherMap client and response normalization.

Calls the OpenWeatherMap 2.5 API and reshapes its payloads into the stable
schemas in ``weather_api.schemas.weather`` so API consumers never see the
provider's field layout.

Endpoints used:
- ``data/2.5/weather``        current conditions by city name
- ``data/2.5/forecast``       5 day / 3 hour forecast by city name
- ``data/2.5/air_pollution``  current air pollution by coordinates

Requests use metric units and Brazilian Portuguese descriptions. There are
no retries: any failure becomes an ``UpstreamError`` value for the caller.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, Optional, TypeVar, Union

import httpx

from weather_api.config import settings
from weather_api.schemas.weather import (
    AirQualitySample,
    ForecastBundle,
    UpstreamError,
    WeatherSnapshot,
)
from weather_api.utils.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

WIND_DIRECTIONS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]

# Indexed by datetime.weekday() (Monday == 0)
DAY_NAMES = ["Segunda", "Terça", "Quarta", "Quinta", "Sexta", "Sábado", "Domingo"]

AQI_LEVELS = {
    1: {"label": "Bom", "color": "good"},
    2: {"label": "Razoável", "color": "fair"},
    3: {"label": "Moderado", "color": "moderate"},
    4: {"label": "Ruim", "color": "poor"},
    5: {"label": "Muito Ruim", "color": "very_poor"},
}

HOURLY_SAMPLES = 8  # 8 x 3h = next 24 hours
DAILY_LIMIT = 5
MS_TO_KMH = 3.6

DEFAULT_ERROR_MESSAGE = "Erro ao consultar API"
TRANSPORT_ERROR_MESSAGE = "Não foi possível conectar à API de clima"
INVALID_RESPONSE_MESSAGE = "Resposta inválida da API de clima"


def round_half_away(value: float, ndigits: int = 0) -> Union[int, float]:
    """
    Round half away from zero (2.5 -> 3, -2.5 -> -3).

    Returns an int when ``ndigits`` is 0.
    """
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if ndigits == 0:
        return int(rounded)
    return float(rounded)


def wind_direction(degrees: float) -> str:
    """Map a wind bearing in degrees to a 16-point compass code."""
    index = round_half_away(degrees / 22.5) % 16
    return WIND_DIRECTIONS[index]


def wind_speed_kmh(speed_ms: float) -> int:
    return round_half_away(speed_ms * MS_TO_KMH)


def _utc(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def day_name(timestamp: int) -> str:
    """Portuguese weekday name for a UNIX timestamp (UTC)."""
    return DAY_NAMES[_utc(timestamp).weekday()]


def _condition(item: Dict[str, Any]) -> Dict[str, str]:
    weather = item["weather"][0]
    return {
        "main": weather["main"],
        "description": weather["description"],
        "icon": weather["icon"],
    }


def _coord(raw: Dict[str, Any]) -> Dict[str, float]:
    return {"lat": raw["lat"], "lon": raw["lon"]}


def normalize_current_weather(data: Dict[str, Any]) -> WeatherSnapshot:
    """Reshape a ``data/2.5/weather`` payload."""
    main = data["main"]
    wind = data.get("wind") or {}
    sys_info = data.get("sys") or {}
    deg = wind.get("deg", 0)
    visibility = data.get("visibility")

    return WeatherSnapshot(
        city=data["name"],
        country=sys_info.get("country"),
        coord=_coord(data["coord"]),
        temperature=round_half_away(main["temp"]),
        feels_like=round_half_away(main["feels_like"]),
        temp_min=round_half_away(main["temp_min"]),
        temp_max=round_half_away(main["temp_max"]),
        humidity=main["humidity"],
        pressure=main["pressure"],
        visibility=visibility / 1000 if visibility is not None else None,
        wind={
            "speed": wind_speed_kmh(wind.get("speed", 0)),
            "deg": deg,
            "direction": wind_direction(deg),
        },
        clouds=(data.get("clouds") or {}).get("all", 0),
        weather=_condition(data),
        sunrise=sys_info.get("sunrise"),
        sunset=sys_info.get("sunset"),
        timezone=data.get("timezone", 0),
        dt=data["dt"],
    )


def normalize_forecast(data: Dict[str, Any]) -> ForecastBundle:
    """
    Reshape a ``data/2.5/forecast`` payload.

    One pass over the 3-hour samples builds both views: the first eight
    samples become ``hourly``; the first sample seen for each calendar
    date becomes that day's ``daily`` entry (min/max come from that one
    sample, not the whole day).
    """
    hourly = []
    daily = []
    current_date = None

    for item in data["list"]:
        main = item["main"]
        wind = item.get("wind") or {}
        moment = _utc(item["dt"])
        date = moment.strftime("%Y-%m-%d")
        pop = round_half_away((item.get("pop") or 0) * 100)

        if len(hourly) < HOURLY_SAMPLES:
            hourly.append({
                "dt": item["dt"],
                "time": moment.strftime("%H:%M"),
                "temperature": round_half_away(main["temp"]),
                "feels_like": round_half_away(main["feels_like"]),
                "humidity": main["humidity"],
                "weather": _condition(item),
                "wind": {
                    "speed": wind_speed_kmh(wind.get("speed", 0)),
                    "direction": wind_direction(wind.get("deg", 0)),
                },
                "pop": pop,
                "rain": (item.get("rain") or {}).get("3h", 0),
                "clouds": (item.get("clouds") or {}).get("all", 0),
            })

        if date != current_date:
            current_date = date
            daily.append({
                "dt": item["dt"],
                "date": date,
                "day_name": day_name(item["dt"]),
                "temp_min": round_half_away(main["temp_min"]),
                "temp_max": round_half_away(main["temp_max"]),
                "humidity": main["humidity"],
                "weather": _condition(item),
                "pop": pop,
                "wind_speed": wind_speed_kmh(wind.get("speed", 0)),
            })

    city = data["city"]
    return ForecastBundle(
        city=city["name"],
        country=city.get("country"),
        coord=_coord(city["coord"]),
        timezone=city.get("timezone", 0),
        hourly=hourly,
        daily=daily[:DAILY_LIMIT],
    )


def normalize_air_quality(data: Dict[str, Any]) -> Union[AirQualitySample, UpstreamError]:
    """
    Reshape a ``data/2.5/air_pollution`` payload (first sample only).

    An AQI outside 1-5 has no label and is reported as an upstream error.
    """
    item = data["list"][0]
    aqi = item["main"]["aqi"]
    level = AQI_LEVELS.get(aqi)
    if level is None:
        logger.warning(f"Air quality index out of range: {aqi!r}")
        return UpstreamError(message=f"Índice de qualidade do ar inválido: {aqi}")

    return AirQualitySample(
        aqi=aqi,
        label=level["label"],
        color=level["color"],
        components={
            name: round_half_away(value, 1)
            for name, value in item["components"].items()
        },
        dt=item["dt"],
    )


def parse_error_message(response: httpx.Response) -> str:
    """Pull ``message`` out of an OpenWeatherMap error body."""
    try:
        body = response.json()
    except ValueError:
        return DEFAULT_ERROR_MESSAGE
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return DEFAULT_ERROR_MESSAGE


class OpenWeatherService:
    """
    OpenWeatherMap API client.

    Pass an ``httpx.AsyncClient`` to control transport (tests use
    ``httpx.MockTransport``); otherwise one is created with the configured
    base URL and timeout and closed by ``aclose()``.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        units: Optional[str] = None,
        lang: Optional[str] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.OPENWEATHER_API_KEY
        self.units = units or settings.OPENWEATHER_UNITS
        self.lang = lang or settings.OPENWEATHER_LANG
        self._client = client
        self._owns_client = client is None

        if not self.api_key:
            logger.warning("OPENWEATHER_API_KEY is not set; upstream requests will be rejected")

    async def __aenter__(self) -> "OpenWeatherService":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=settings.OPENWEATHER_BASE_URL,
                timeout=settings.OPENWEATHER_TIMEOUT,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this service created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _fetch(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._get_client().get(
            path, params={**params, "appid": self.api_key or ""}
        )
        response.raise_for_status()
        return response.json()

    async def _request(
        self,
        path: str,
        params: Dict[str, Any],
        normalize: Callable[[Dict[str, Any]], Union[T, UpstreamError]],
    ) -> Union[T, UpstreamError]:
        """Fetch ``path`` and normalize it, turning every failure into UpstreamError."""
        try:
            payload = await self._fetch(path, params)
            return normalize(payload)
        except httpx.HTTPStatusError as exc:
            message = parse_error_message(exc.response)
            logger.warning(
                f"OpenWeatherMap {path} returned {exc.response.status_code}: {message}"
            )
        except httpx.HTTPError as exc:
            message = str(exc) or TRANSPORT_ERROR_MESSAGE
            logger.warning(f"OpenWeatherMap {path} request failed: {exc!r}")
        except (KeyError, IndexError, TypeError, ValueError, ArithmeticError) as exc:
            message = INVALID_RESPONSE_MESSAGE
            logger.warning(f"OpenWeatherMap {path} returned an unexpected payload: {exc!r}")
        return UpstreamError(message=message)

    def _city_params(self, city: str) -> Dict[str, Any]:
        return {"q": city, "units": self.units, "lang": self.lang}

    async def get_current_weather(self, city: str) -> Union[WeatherSnapshot, UpstreamError]:
        """Current weather for ``city``."""
        return await self._request(
            "data/2.5/weather", self._city_params(city), normalize_current_weather
        )

    async def get_forecast(self, city: str) -> Union[ForecastBundle, UpstreamError]:
        """Hourly (next 24h) and daily (up to 5 days) forecast for ``city``."""
        return await self._request(
            "data/2.5/forecast", self._city_params(city), normalize_forecast
        )

    async def get_air_quality(self, lat: float, lon: float) -> Union[AirQualitySample, UpstreamError]:
        """Current air quality at the given coordinates."""
        return await self._request(
            "data/2.5/air_pollution", {"lat": lat, "lon": lon}, normalize_air_quality
        )
