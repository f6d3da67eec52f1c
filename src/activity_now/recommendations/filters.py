"""Filter pipeline for the "Now", weekend and distance views.

The "Now" feed runs in three stages:

1. Time: keep activities open now or opening within the opens-soon window.
2. Weather: under ``hide_outdoor`` keep indoor activities only. Outdoor
   deprioritization is a ranking concern and never removes anything here.
3. Relaxation: if nothing survives, fall back to the *unfiltered* input and
   keep whatever is closed now but opens soon, ignoring the weather filter,
   so the feed is not empty while something is about to open.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime, timedelta

from activity_now.models.activity import EventActivity, EvergreenActivity
from activity_now.models.interaction import parse_timestamp
from activity_now.models.ranking import DEFAULT_POLICY, RankingPolicy
from activity_now.models.weather import WeatherStrategy
from activity_now.schedule.status import opening_state

logger = logging.getLogger(__name__)

AnyActivity = EvergreenActivity | EventActivity

SATURDAY = 5
SUNDAY = 6


def filter_for_now(
    activities: Sequence[AnyActivity],
    strategy: WeatherStrategy,
    now: datetime,
    policy: RankingPolicy = DEFAULT_POLICY,
) -> list[AnyActivity]:
    """Activities to show in the "Now" feed, in input order."""
    time_filtered = [
        activity
        for activity in activities
        if opening_state(activity, now, policy) != "closed"
    ]
    weather_filtered = apply_weather_filter(time_filtered, strategy)

    if weather_filtered:
        return weather_filtered

    relaxed = relax_for_empty_state(activities, now, policy)
    logger.debug(
        f"Now feed empty after filters ({len(time_filtered)} passed time filter, "
        f"strategy {strategy.value}); relaxed to {len(relaxed)} opening soon"
    )
    return relaxed


def apply_weather_filter(
    activities: Sequence[AnyActivity], strategy: WeatherStrategy
) -> list[AnyActivity]:
    """Remove outdoor activities under ``hide_outdoor``; keep all otherwise."""
    if strategy == WeatherStrategy.HIDE_OUTDOOR:
        return [activity for activity in activities if activity.indoor]
    return list(activities)


def relax_for_empty_state(
    activities: Sequence[AnyActivity],
    now: datetime,
    policy: RankingPolicy = DEFAULT_POLICY,
) -> list[AnyActivity]:
    """Activities closed right now that open within the opens-soon window."""
    return [
        activity
        for activity in activities
        if opening_state(activity, now, policy) == "opens_soon"
    ]


def weekend_dates(now: datetime | date) -> tuple[date, date]:
    """The Saturday and Sunday the weekend view targets.

    On Saturday this is today and tomorrow. On Sunday the current weekend is
    treated as over and the following Saturday/Sunday are returned. Any other
    weekday yields the upcoming Saturday and Sunday.
    """
    today = now.date() if isinstance(now, datetime) else now
    days_until_saturday = (SATURDAY - today.weekday()) % 7
    saturday = today + timedelta(days=days_until_saturday)
    return saturday, saturday + timedelta(days=1)


def filter_for_weekend(
    activities: Sequence[AnyActivity], now: datetime
) -> list[EventActivity]:
    """Events whose start date falls on the target Saturday or Sunday.

    Start dates are compared in ``now``'s timezone when both are aware.
    """
    targets = set(weekend_dates(now))
    selected: list[EventActivity] = []
    for activity in activities:
        if not isinstance(activity, EventActivity):
            continue
        start = parse_timestamp(activity.start_date, now)
        if now.tzinfo is not None:
            start = start.astimezone(now.tzinfo)
        if start.date() in targets:
            selected.append(activity)
    return selected


def filter_by_distance(
    activities: Sequence[AnyActivity],
    policy: RankingPolicy = DEFAULT_POLICY,
) -> list[AnyActivity]:
    """Drop activities beyond the distance cutoff.

    Exempt types (museums) and activities with unknown distance are kept.
    """
    return [
        activity
        for activity in activities
        if activity.distance is None
        or activity.activity_type in policy.distance_exempt_types
        or activity.distance <= policy.max_distance_miles
    ]
