"""Domain models for activity discovery and ranking."""

from activity_now.models.location import Coordinates
from activity_now.models.activity import (
    Activity,
    ActivityBase,
    ActivityType,
    EventActivity,
    EvergreenActivity,
    parse_activity,
)
from activity_now.models.interaction import (
    Interaction,
    parse_interactions,
    parse_timestamp,
)
from activity_now.models.weather import ForecastHour, WeatherStrategy
from activity_now.models.status import ActivityStatus, StatusResult
from activity_now.models.ranking import DEFAULT_POLICY, RankingPolicy, ScoredCandidate

__all__ = [
    # Location
    "Coordinates",
    # Activity
    "Activity",
    "ActivityBase",
    "ActivityType",
    "EventActivity",
    "EvergreenActivity",
    "parse_activity",
    # Interaction
    "Interaction",
    "parse_interactions",
    "parse_timestamp",
    # Weather
    "ForecastHour",
    "WeatherStrategy",
    # Status
    "ActivityStatus",
    "StatusResult",
    # Ranking
    "DEFAULT_POLICY",
    "RankingPolicy",
    "ScoredCandidate",
]
