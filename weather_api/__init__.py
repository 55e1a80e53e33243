"""InEvent Weather API: OpenWeatherMap proxy with user accounts."""

__version__ = "1.0.0"
