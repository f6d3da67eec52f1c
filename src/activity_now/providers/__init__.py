"""Weather data providers."""

from activity_now.providers.base import (
    AuthenticationError,
    ProviderError,
    RateLimitError,
    WeatherProvider,
)
from activity_now.providers.weatherapi import WeatherApiProvider

__all__ = [
    "AuthenticationError",
    "ProviderError",
    "RateLimitError",
    "WeatherProvider",
    "WeatherApiProvider",
]
