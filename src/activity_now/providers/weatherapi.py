"""WeatherAPI.com forecast provider.

## Endpoint
- Base URL: https://api.weatherapi.com/v1
- Forecast: GET /forecast.json?key=...&q=lat,lon&days=1&aqi=no

## Response (relevant subset)
```json
{
  "location": {"tz_id": "America/New_York"},
  "forecast": {
    "forecastday": [
      {
        "hour": [
          {
            "time": "2024-06-15 13:00",
            "chance_of_rain": 72,
            "condition": {"text": "Patchy rain possible"}
          }
        ]
      }
    ]
  }
}
```

Hour times are local wall-clock strings for the queried location.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError

from activity_now.models.interaction import parse_timestamp
from activity_now.models.location import Coordinates
from activity_now.models.weather import ForecastHour
from activity_now.providers.base import AuthenticationError, ProviderError, WeatherProvider

logger = logging.getLogger(__name__)


class WeatherApiProvider(WeatherProvider):
    """Short-range hourly forecast from weatherapi.com."""

    name = "weatherapi"
    base_url = "https://api.weatherapi.com/v1"

    def get_forecast_hours(
        self,
        coordinates: Coordinates,
        now: datetime,
        window_hours: int = 8,
    ) -> list[ForecastHour]:
        if not self.api_key:
            raise AuthenticationError("No API key configured", provider=self.name)

        response = self._fetch(
            f"{self.base_url}/forecast.json",
            params={
                "key": self.api_key,
                "q": f"{coordinates.latitude},{coordinates.longitude}",
                "days": 1,
                "aqi": "no",
            },
        )
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                f"Invalid JSON in response: {e}", provider=self.name
            ) from e

        return self._translate_response(data, now, window_hours)

    def _translate_response(
        self,
        response_data: dict[str, Any],
        now: datetime,
        window_hours: int,
    ) -> list[ForecastHour]:
        try:
            days = response_data["forecast"]["forecastday"]
            entries = (days[0].get("hour") or []) if days else []
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ProviderError(
                f"Unexpected response shape: {e!r}", provider=self.name
            ) from e
        if not isinstance(entries, list):
            raise ProviderError(
                "Unexpected response shape: hour is not a list", provider=self.name
            )

        zone = self._location_zone(response_data)
        horizon = now + timedelta(hours=window_hours)
        hours: list[ForecastHour] = []

        for entry in entries:
            if not isinstance(entry, dict):
                logger.debug(f"Skipping forecast hour that is not an object: {entry!r}")
                continue
            hour_time = parse_timestamp(entry.get("time"))
            if hour_time is None:
                logger.debug(f"Skipping forecast hour with bad time: {entry.get('time')!r}")
                continue
            if hour_time.tzinfo is None and zone is not None:
                hour_time = hour_time.replace(tzinfo=zone)
            hour_time = parse_timestamp(hour_time, now)

            if not now < hour_time < horizon:
                continue

            try:
                hours.append(
                    ForecastHour(
                        time=hour_time,
                        precipitation_probability=entry.get("chance_of_rain") or 0,
                        condition=_condition_text(entry.get("condition")),
                    )
                )
            except ValidationError as e:
                logger.debug(f"Skipping invalid forecast hour at {hour_time}: {e}")

        return hours

    @staticmethod
    def _location_zone(response_data: dict[str, Any]) -> ZoneInfo | None:
        location = response_data.get("location")
        tz_id = location.get("tz_id") if isinstance(location, dict) else None
        if not isinstance(tz_id, str) or not tz_id:
            return None
        try:
            return ZoneInfo(tz_id)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone in forecast response: {tz_id}")
            return None


def _condition_text(condition: Any) -> str | None:
    if isinstance(condition, dict) and isinstance(condition.get("text"), str):
        return condition["text"]
    return None
