"""Classify a short-range forecast into a weather strategy.

Counting hours whose precipitation probability exceeds the rain threshold
(60% by default):

- more than 3 rainy hours -> ``hide_outdoor``
- 1 to 3 rainy hours -> ``deprioritize_outdoor``
- none, or no forecast at all -> ``normal``

A failed forecast fetch always degrades to ``normal`` so that weather never
blocks the feed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

import httpx

from activity_now.models.location import Coordinates
from activity_now.models.ranking import DEFAULT_POLICY, RankingPolicy
from activity_now.models.weather import ForecastHour, WeatherStrategy
from activity_now.providers.base import ProviderError, WeatherProvider

logger = logging.getLogger(__name__)


def count_rainy_hours(
    hours: Iterable[ForecastHour], policy: RankingPolicy = DEFAULT_POLICY
) -> int:
    """Number of hours with precipitation probability above the threshold."""
    return sum(
        1
        for hour in hours
        if hour.precipitation_probability > policy.rain_probability_threshold
    )


def select_strategy(
    hours: Sequence[ForecastHour] | None,
    policy: RankingPolicy = DEFAULT_POLICY,
) -> WeatherStrategy:
    """Map forecast hours to a weather strategy."""
    if not hours:
        return WeatherStrategy.NORMAL

    rainy = count_rainy_hours(hours, policy)
    if rainy > policy.significant_rain_hours:
        return WeatherStrategy.HIDE_OUTDOOR
    if rainy > 0:
        return WeatherStrategy.DEPRIORITIZE_OUTDOOR
    return WeatherStrategy.NORMAL


def strategy_for_location(
    provider: WeatherProvider,
    coordinates: Coordinates,
    now: datetime,
    policy: RankingPolicy = DEFAULT_POLICY,
    window_hours: int = 8,
) -> WeatherStrategy:
    """Fetch the forecast for a location and classify it.

    Any provider or transport failure is logged and resolves to ``normal``.
    """
    try:
        hours = provider.get_forecast_hours(coordinates, now, window_hours)
    except (ProviderError, httpx.HTTPError) as e:
        logger.error(f"Weather fetch failed for {coordinates}: {e}")
        return WeatherStrategy.NORMAL

    strategy = select_strategy(hours, policy)
    logger.debug(
        f"Weather strategy {strategy.value} from {len(hours)} forecast hours "
        f"({count_rainy_hours(hours, policy)} rainy)"
    )
    return strategy
