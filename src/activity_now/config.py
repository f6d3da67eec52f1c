"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings,
with an optional ``.env`` file. Every variable is prefixed ``ACTIVITY_NOW_``.

## Optional Environment Variables

- ACTIVITY_NOW_WEATHER_API_KEY: weatherapi.com key (no key -> no fetch, normal strategy)
- ACTIVITY_NOW_HOME_LATITUDE / ACTIVITY_NOW_HOME_LONGITUDE: default home location
- ACTIVITY_NOW_TIMEZONE: IANA timezone used for "now" (default America/New_York)
- ACTIVITY_NOW_MAX_DISTANCE_MILES: distance cutoff for feeds (default 15)

## Example .env file

```
ACTIVITY_NOW_WEATHER_API_KEY=your-weatherapi-key
ACTIVITY_NOW_HOME_LATITUDE=35.7796
ACTIVITY_NOW_HOME_LONGITUDE=-78.6382
```
"""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from activity_now.models.location import Coordinates
from activity_now.models.ranking import RankingPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ACTIVITY_NOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Weather provider
    weather_api_key: str | None = None
    weather_base_url: str = "https://api.weatherapi.com/v1"
    weather_timeout_seconds: float = Field(default=10.0, gt=0, le=60)
    forecast_window_hours: int = Field(default=8, ge=1, le=24)

    # Home location (central Triangle, Durham NC)
    home_latitude: float = Field(default=36.0014, ge=-90, le=90)
    home_longitude: float = Field(default=-78.9015, ge=-180, le=180)
    timezone: str = "America/New_York"

    # Ranking overrides
    max_distance_miles: float = Field(default=15.0, ge=0)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject unknown IANA timezone names early."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def weather_configured(self) -> bool:
        return bool(self.weather_api_key)

    @property
    def home(self) -> Coordinates:
        return Coordinates(latitude=self.home_latitude, longitude=self.home_longitude)

    def now(self) -> datetime:
        """Current instant in the configured timezone."""
        return datetime.now(ZoneInfo(self.timezone))

    def ranking_policy(self) -> RankingPolicy:
        """Immutable ranking policy with configured overrides applied."""
        return RankingPolicy(max_distance_miles=self.max_distance_miles)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
