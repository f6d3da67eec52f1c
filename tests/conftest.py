"""Pytest fixtures for activity ranking tests.

This module provides test fixtures that ensure:
1. No external API calls are made (the weather API key is blank)
2. Every test works from a fixed, timezone-aware "now"
3. Isolated test environment with controlled configuration
"""

import os
from datetime import datetime, timedelta, timezone

import pytest

# Set test environment BEFORE importing application modules
os.environ["ACTIVITY_NOW_WEATHER_API_KEY"] = ""
os.environ.setdefault("ACTIVITY_NOW_TIMEZONE", "America/New_York")

from activity_now.models.activity import (
    ActivityType,
    EventActivity,
    EvergreenActivity,
)
from activity_now.models.interaction import Interaction
from activity_now.models.weather import ForecastHour

# Fixed UTC-4 offset (US Eastern daylight time) keeps tests independent of tzdata
EDT = timezone(timedelta(hours=-4))

WEEK = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def at(hour: int, minute: int = 0, day: int = 12) -> datetime:
    """An instant in June 2024 (the 12th is a Wednesday)."""
    return datetime(2024, 6, day, hour, minute, tzinfo=EDT)


def make_place(
    id: str,
    activity_type: ActivityType = ActivityType.PLAYGROUND,
    hours: str = "9:00 AM - 5:00 PM",
    indoor: bool = False,
    distance: float | None = 5.0,
    **overrides,
) -> EvergreenActivity:
    """Evergreen activity with the same hours every day of the week."""
    return EvergreenActivity(
        id=id,
        name=f"Test Activity {id}",
        activity_type=activity_type,
        hours={day: hours for day in WEEK},
        indoor=indoor,
        distance=distance,
        **overrides,
    )


def make_event(
    id: str,
    start: datetime,
    end: datetime | None = None,
    indoor: bool = False,
    distance: float | None = 5.0,
    **overrides,
) -> EventActivity:
    return EventActivity(
        id=id,
        name=f"Test Event {id}",
        activity_type=ActivityType.EVENT,
        start_date=start,
        end_date=end or start + timedelta(hours=2),
        indoor=indoor,
        distance=distance,
        **overrides,
    )


def completed(days_ago: float, now: datetime, rating=None) -> Interaction:
    stamp = (now - timedelta(days=days_ago)).isoformat()
    return Interaction(rating=rating, completions=[stamp], lastCompleted=stamp)


def forecast(probabilities: list[float], start: datetime) -> list[ForecastHour]:
    return [
        ForecastHour(time=start + timedelta(hours=i + 1), precipitation_probability=p)
        for i, p in enumerate(probabilities)
    ]


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from activity_now.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def now() -> datetime:
    """Wednesday 2024-06-12, 8:00 AM Eastern."""
    return at(8)


@pytest.fixture
def library() -> EvergreenActivity:
    return make_place(
        "lib", ActivityType.LIBRARY, hours="10:00 AM - 6:00 PM", indoor=True, distance=3.0
    )


@pytest.fixture
def park() -> EvergreenActivity:
    return make_place("park", ActivityType.PARK, hours="dawn - dusk", distance=2.0)


@pytest.fixture
def closed_place() -> EvergreenActivity:
    return make_place("closed", ActivityType.MUSEUM, hours="closed", indoor=True)
