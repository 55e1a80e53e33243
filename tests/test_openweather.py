"""
Tests for the OpenWeatherMap client and normalization.
"""

from datetime import datetime, timezone

import httpx
import pytest

from weather_api.schemas.weather import (
    AirQualitySample,
    ForecastBundle,
    UpstreamError,
    WeatherSnapshot,
)
from weather_api.services.openweather import (
    normalize_forecast,
    round_half_away,
    wind_direction,
)


def ts(value: str) -> int:
    """UNIX timestamp for an ISO datetime in UTC."""
    return int(datetime.fromisoformat(value).replace(tzinfo=timezone.utc).timestamp())


CURRENT_PAYLOAD = {
    "name": "São Paulo",
    "sys": {"country": "BR", "sunrise": 1700000000, "sunset": 1700040000},
    "coord": {"lat": -23.55, "lon": -46.63},
    "main": {
        "temp": 25.5,
        "feels_like": 26.2,
        "temp_min": 22.4,
        "temp_max": 28.5,
        "humidity": 65,
        "pressure": 1015,
    },
    "visibility": 10000,
    "wind": {"speed": 3.5, "deg": 90},
    "clouds": {"all": 50},
    "weather": [{"main": "Clouds", "description": "nublado", "icon": "04d"}],
    "timezone": -10800,
    "dt": 1700020000,
}


def forecast_sample(when: str, temp: float = 20.0, pop=None, rain=None):
    sample = {
        "dt": ts(when),
        "main": {
            "temp": temp,
            "feels_like": temp + 1,
            "temp_min": temp - 2,
            "temp_max": temp + 2,
            "humidity": 70,
        },
        "weather": [{"main": "Clear", "description": "céu limpo", "icon": "01d"}],
        "wind": {"speed": 5, "deg": 180},
        "clouds": {"all": 10},
    }
    if pop is not None:
        sample["pop"] = pop
    if rain is not None:
        sample["rain"] = {"3h": rain}
    return sample


def forecast_payload(samples):
    return {
        "city": {
            "name": "Rio de Janeiro",
            "country": "BR",
            "coord": {"lat": -22.91, "lon": -43.17},
            "timezone": -10800,
        },
        "list": samples,
    }


# 10 samples: 2025-02-01 06:00 .. 21:00 (6), 2025-02-02 00:00 .. 09:00 (4)
TEN_SAMPLES = [
    forecast_sample(f"2025-02-01T{hour:02d}:00:00", temp=20 + i)
    for i, hour in enumerate(range(6, 24, 3))
] + [
    forecast_sample(f"2025-02-02T{hour:02d}:00:00", temp=10 + i)
    for i, hour in enumerate(range(0, 12, 3))
]


AIR_PAYLOAD = {
    "coord": {"lon": -46.63, "lat": -23.55},
    "list": [
        {
            "main": {"aqi": 1},
            "components": {
                "co": 201.94, "no": 0.02, "no2": 0.77, "o3": 68.66,
                "so2": 0.64, "pm2_5": 0.5, "pm10": 0.54, "nh3": 0.12,
            },
            "dt": 1700020000,
        }
    ],
}


@pytest.mark.parametrize(
    "degrees, expected",
    [
        (0, "N"),
        (11, "N"),
        (22, "NNE"),
        (22.5, "NNE"),
        (45, "NE"),
        (90, "E"),
        (180, "S"),
        (270, "W"),
        (315, "NW"),
        (350, "N"),
        (360, "N"),
    ],
)
def test_wind_direction(degrees, expected):
    """Bearing maps to the nearest of 16 compass points, wrapping at north."""
    assert wind_direction(degrees) == expected


@pytest.mark.parametrize(
    "value, ndigits, expected",
    [(2.5, 0, 3), (3.5, 0, 4), (-2.5, 0, -3), (2.4, 0, 2), (0.25, 1, 0.3), (201.94, 1, 201.9)],
)
def test_round_half_away(value, ndigits, expected):
    """Halves round away from zero."""
    assert round_half_away(value, ndigits) == expected


async def test_current_weather_is_normalized(upstream, weather_service):
    """Units are converted and values rounded."""
    upstream.set("weather", httpx.Response(200, json=CURRENT_PAYLOAD))

    result = await weather_service.get_current_weather("São Paulo")

    assert isinstance(result, WeatherSnapshot)
    assert result.city == "São Paulo"
    assert result.country == "BR"
    assert result.temperature == 26
    assert result.feels_like == 26
    assert result.temp_min == 22
    assert result.temp_max == 29
    assert result.humidity == 65
    assert result.visibility == 10.0
    assert result.wind.speed == 13
    assert result.wind.deg == 90
    assert result.wind.direction == "E"
    assert result.weather.description == "nublado"
    assert result.timezone == -10800


async def test_current_weather_request_parameters(upstream, weather_service):
    """Metric units, Portuguese descriptions and the API key are sent."""
    upstream.set("weather", httpx.Response(200, json=CURRENT_PAYLOAD))

    await weather_service.get_current_weather("Belo Horizonte")

    request = upstream.requests[0]
    assert request.url.path == "/data/2.5/weather"
    assert request.url.params["q"] == "Belo Horizonte"
    assert request.url.params["units"] == "metric"
    assert request.url.params["lang"] == "pt_br"
    assert request.url.params["appid"] == "test-openweather-key"


async def test_current_weather_without_visibility_or_bearing(upstream, weather_service):
    """Missing visibility stays None; missing bearing counts as north."""
    payload = {**CURRENT_PAYLOAD, "wind": {"speed": 1}}
    payload.pop("visibility")
    upstream.set("weather", httpx.Response(200, json=payload))

    result = await weather_service.get_current_weather("São Paulo")

    assert result.visibility is None
    assert result.wind.deg == 0
    assert result.wind.direction == "N"


async def test_current_weather_upstream_error_message(upstream, weather_service):
    """The provider's own message is surfaced."""
    upstream.set("weather", httpx.Response(404, json={"cod": "404", "message": "city not found"}))

    result = await weather_service.get_current_weather("Atlantis")

    assert isinstance(result, UpstreamError)
    assert result.error is True
    assert result.message == "city not found"


async def test_upstream_error_without_json_body(upstream, weather_service):
    """Unreadable error bodies fall back to a generic message."""
    upstream.set("weather", httpx.Response(500, text="<html>oops</html>"))

    result = await weather_service.get_current_weather("São Paulo")

    assert isinstance(result, UpstreamError)
    assert result.message == "Erro ao consultar API"


async def test_malformed_payload_is_upstream_error(upstream, weather_service):
    """A success response missing required fields does not crash."""
    upstream.set("weather", httpx.Response(200, json={"name": "X"}))

    result = await weather_service.get_current_weather("X")

    assert isinstance(result, UpstreamError)
    assert result.message


@pytest.mark.parametrize("temp", [None, 1e30])
async def test_unroundable_temperature_is_upstream_error(upstream, weather_service, temp):
    """Null or out-of-range numbers are reported as an invalid payload."""
    payload = {**CURRENT_PAYLOAD, "main": {**CURRENT_PAYLOAD["main"], "temp": temp}}
    upstream.set("weather", httpx.Response(200, json=payload))

    result = await weather_service.get_current_weather("São Paulo")

    assert isinstance(result, UpstreamError)
    assert result.message == "Resposta inválida da API de clima"


async def test_null_forecast_temperature_is_upstream_error(upstream, weather_service):
    samples = [forecast_sample("2025-02-01T00:00:00")]
    samples[0]["main"]["temp_min"] = None
    upstream.set("forecast", httpx.Response(200, json=forecast_payload(samples)))

    result = await weather_service.get_forecast("Rio de Janeiro")

    assert isinstance(result, UpstreamError)
    assert result.message == "Resposta inválida da API de clima"


async def test_null_air_component_is_upstream_error(upstream, weather_service):
    sample = AIR_PAYLOAD["list"][0]
    payload = {"list": [{**sample, "components": {**sample["components"], "nh3": None}}]}
    upstream.set("air_pollution", httpx.Response(200, json=payload))

    result = await weather_service.get_air_quality(-23.55, -46.63)

    assert isinstance(result, UpstreamError)
    assert result.message == "Resposta inválida da API de clima"


@pytest.mark.parametrize(
    "call",
    [
        lambda service: service.get_current_weather("São Paulo"),
        lambda service: service.get_forecast("São Paulo"),
        lambda service: service.get_air_quality(-23.5, -46.6),
    ],
)
async def test_transport_failure_is_upstream_error(upstream, weather_service, call):
    """Connection errors on any operation become UpstreamError values."""
    error = httpx.ConnectError("Connection refused")
    for endpoint in ("weather", "forecast", "air_pollution"):
        upstream.set(endpoint, error)

    result = await call(weather_service)

    assert isinstance(result, UpstreamError)
    assert result.message


async def test_timeout_is_upstream_error(upstream, weather_service):
    """Timeouts are reported, not raised."""
    upstream.set("forecast", httpx.ReadTimeout(""))

    result = await weather_service.get_forecast("São Paulo")

    assert isinstance(result, UpstreamError)
    assert result.message


async def test_forecast_views(upstream, weather_service):
    """Ten samples over two dates give 8 hourly and 2 daily entries."""
    upstream.set("forecast", httpx.Response(200, json=forecast_payload(TEN_SAMPLES)))

    result = await weather_service.get_forecast("Rio de Janeiro")

    assert isinstance(result, ForecastBundle)
    assert result.city == "Rio de Janeiro"
    assert result.country == "BR"
    assert result.coord.lat == -22.91
    assert result.timezone == -10800

    assert len(result.hourly) == 8
    assert [h.dt for h in result.hourly] == [s["dt"] for s in TEN_SAMPLES[:8]]
    assert result.hourly[0].time == "06:00"
    assert result.hourly[0].wind.speed == 18
    assert result.hourly[0].wind.direction == "S"

    assert len(result.daily) == 2
    first_day, second_day = result.daily
    assert first_day.date == "2025-02-01"
    assert first_day.dt == TEN_SAMPLES[0]["dt"]
    assert first_day.temp_min == 18
    assert first_day.temp_max == 22
    assert first_day.day_name == "Sábado"
    assert second_day.date == "2025-02-02"
    assert second_day.dt == TEN_SAMPLES[6]["dt"]
    assert second_day.temp_min == 8
    assert second_day.day_name == "Domingo"


def test_forecast_pop_and_rain_defaults():
    """pop is a percentage; missing pop and rain become 0."""
    samples = [
        forecast_sample("2025-02-01T00:00:00", pop=0.5, rain=1.25),
        forecast_sample("2025-02-01T03:00:00"),
    ]

    result = normalize_forecast(forecast_payload(samples))

    assert result.hourly[0].pop == 50
    assert result.hourly[0].rain == 1.25
    assert result.hourly[1].pop == 0
    assert result.hourly[1].rain == 0
    assert result.daily[0].pop == 50


def test_forecast_daily_capped_at_five_days():
    """Only the first five dates are kept."""
    samples = [forecast_sample(f"2025-02-{day:02d}T12:00:00") for day in range(1, 8)]

    result = normalize_forecast(forecast_payload(samples))

    assert [d.date for d in result.daily] == [f"2025-02-0{day}" for day in range(1, 6)]
    assert len(result.hourly) == 7


async def test_air_quality_good(upstream, weather_service):
    """AQI 1 maps to 'Bom' and components are rounded to one decimal."""
    upstream.set("air_pollution", httpx.Response(200, json=AIR_PAYLOAD))

    result = await weather_service.get_air_quality(-23.55, -46.63)

    assert isinstance(result, AirQualitySample)
    assert result.aqi == 1
    assert result.label == "Bom"
    assert result.color == "good"
    assert result.components["co"] == 201.9
    assert result.components["pm2_5"] == 0.5
    assert result.components["nh3"] == 0.1
    assert set(result.components) == {"co", "no", "no2", "o3", "so2", "pm2_5", "pm10", "nh3"}

    request = upstream.requests[0]
    assert request.url.path == "/data/2.5/air_pollution"
    assert float(request.url.params["lat"]) == -23.55


@pytest.mark.parametrize(
    "aqi, label, color",
    [
        (2, "Razoável", "fair"),
        (3, "Moderado", "moderate"),
        (4, "Ruim", "poor"),
        (5, "Muito Ruim", "very_poor"),
    ],
)
async def test_air_quality_labels(upstream, weather_service, aqi, label, color):
    """Each AQI bucket has a fixed label and color tag."""
    payload = {"list": [{**AIR_PAYLOAD["list"][0], "main": {"aqi": aqi}}]}
    upstream.set("air_pollution", httpx.Response(200, json=payload))

    result = await weather_service.get_air_quality(0, 0)

    assert (result.label, result.color) == (label, color)


@pytest.mark.parametrize("aqi", [0, 6])
async def test_air_quality_out_of_range(upstream, weather_service, aqi):
    """An AQI with no label is an upstream error, not a crash."""
    payload = {"list": [{**AIR_PAYLOAD["list"][0], "main": {"aqi": aqi}}]}
    upstream.set("air_pollution", httpx.Response(200, json=payload))

    result = await weather_service.get_air_quality(0, 0)

    assert isinstance(result, UpstreamError)
    assert result.message


async def test_air_quality_empty_list(upstream, weather_service):
    """No samples is an upstream error."""
    upstream.set("air_pollution", httpx.Response(200, json={"list": []}))

    result = await weather_service.get_air_quality(0, 0)

    assert isinstance(result, UpstreamError)
