"""
Weather service dependencies.
"""

from typing import AsyncIterator

from weather_api.services.openweather import OpenWeatherService


async def get_weather_service() -> AsyncIterator[OpenWeatherService]:
    """
    Provide an OpenWeatherMap client for the duration of one request.

    Tests override this dependency with a service built on a mock transport.
    """
    async with OpenWeatherService() as service:
        yield service
