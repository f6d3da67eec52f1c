"""Feed assembly for the "Now", weekend and "All" views.

Each builder is a pure function of its inputs: it copies activities to attach
display distances and never mutates the caller's data.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from activity_now.models.activity import Activity, EventActivity, EvergreenActivity
from activity_now.models.interaction import Interaction, parse_interactions
from activity_now.models.location import Coordinates
from activity_now.models.ranking import DEFAULT_POLICY, RankingPolicy
from activity_now.models.status import ActivityStatus
from activity_now.models.weather import WeatherStrategy
from activity_now.recommendations.filters import (
    filter_by_distance,
    filter_for_now,
    filter_for_weekend,
)
from activity_now.recommendations.scorer import sort_by_distance, sort_with_scores
from activity_now.schedule.status import calculate_status

logger = logging.getLogger(__name__)

AnyActivity = EvergreenActivity | EventActivity
RawInteractions = Mapping[str, Interaction | Mapping[str, Any]]


class FeedEntry(BaseModel):
    """One row of a feed: the activity and its display status."""

    activity: Activity
    status: ActivityStatus = Field(default=ActivityStatus.NONE)
    status_time: str | None = Field(default=None, description="Label for the badge")


def attach_distances(
    activities: Sequence[AnyActivity], home: Coordinates | None
) -> list[AnyActivity]:
    """Copies with the great-circle distance from ``home`` attached.

    Activities without coordinates (or with no home) keep the distance they
    were given, which may be unknown.
    """
    if home is None:
        return list(activities)
    return [
        activity.with_distance(home.distance_miles(activity.coordinates))
        if activity.coordinates is not None
        else activity
        for activity in activities
    ]


def drop_thumbs_down(
    activities: Sequence[AnyActivity], interactions: Mapping[str, Interaction]
) -> list[AnyActivity]:
    """Remove activities the user rated thumbs down."""
    return [
        activity
        for activity in activities
        if interactions.get(activity.id) is None
        or interactions[activity.id].rating_sign >= 0
    ]


def _entries(
    activities: Sequence[AnyActivity], now: datetime, policy: RankingPolicy
) -> list[FeedEntry]:
    entries = []
    for activity in activities:
        result = calculate_status(activity, now, policy)
        entries.append(
            FeedEntry(activity=activity, status=result.status, status_time=result.label)
        )
    return entries


def build_now_feed(
    activities: Sequence[AnyActivity],
    strategy: WeatherStrategy,
    now: datetime,
    home: Coordinates | None = None,
    interactions: RawInteractions | None = None,
    policy: RankingPolicy = DEFAULT_POLICY,
    hide_thumbs_down: bool = True,
) -> list[FeedEntry]:
    """Activities to do right now, best first.

    Steps: drop thumbs-down activities, filter for now (with empty-state
    relaxation), attach distances, apply the distance cutoff, then rank
    personally when interaction data exists or by distance otherwise.
    """
    history = parse_interactions(interactions)
    candidates = drop_thumbs_down(activities, history) if hide_thumbs_down else list(activities)

    current = filter_for_now(candidates, strategy, now, policy)
    nearby = filter_by_distance(attach_distances(current, home), policy)

    if history:
        ordered = sort_with_scores(nearby, history, strategy, now, policy)
    else:
        ordered = sort_by_distance(nearby, strategy)

    logger.debug(
        f"Now feed: {len(activities)} activities -> {len(current)} current -> "
        f"{len(ordered)} within distance"
    )
    return _entries(ordered, now, policy)


def build_weekend_feed(
    activities: Sequence[AnyActivity],
    now: datetime,
    home: Coordinates | None = None,
    policy: RankingPolicy = DEFAULT_POLICY,
) -> list[FeedEntry]:
    """Events on the target weekend, Saturday first, then nearest first."""
    events = filter_for_weekend(activities, now)
    nearby = filter_by_distance(attach_distances(events, home), policy)

    def sort_key(event: EventActivity) -> tuple[Any, int, float]:
        return (
            event.start_date.date(),
            1 if event.distance is None else 0,
            event.distance if event.distance is not None else math.inf,
        )

    return _entries(sorted(nearby, key=sort_key), now, policy)


def build_all_feed(
    activities: Sequence[AnyActivity],
    now: datetime,
    home: Coordinates | None = None,
    policy: RankingPolicy = DEFAULT_POLICY,
) -> list[FeedEntry]:
    """Every activity within the distance cutoff, nearest first."""
    nearby = filter_by_distance(attach_distances(activities, home), policy)
    return _entries(sort_by_distance(nearby, WeatherStrategy.NORMAL), now, policy)
