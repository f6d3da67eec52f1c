"""Filtering, scoring and feed assembly."""

from activity_now.recommendations.filters import (
    apply_weather_filter,
    filter_by_distance,
    filter_for_now,
    filter_for_weekend,
    relax_for_empty_state,
    weekend_dates,
)
from activity_now.recommendations.scorer import (
    days_since_completion,
    score,
    sort_by_distance,
    sort_with_scores,
)
from activity_now.recommendations.feed import (
    FeedEntry,
    build_all_feed,
    build_now_feed,
    build_weekend_feed,
)

__all__ = [
    # Filters
    "apply_weather_filter",
    "filter_by_distance",
    "filter_for_now",
    "filter_for_weekend",
    "relax_for_empty_state",
    "weekend_dates",
    # Scoring
    "days_since_completion",
    "score",
    "sort_by_distance",
    "sort_with_scores",
    # Feeds
    "FeedEntry",
    "build_all_feed",
    "build_now_feed",
    "build_weekend_feed",
]
