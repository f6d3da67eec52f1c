"""Ranking policy and transient scoring values."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field

from activity_now.models.activity import Activity, ActivityType


class RankingPolicy(BaseModel):
    """Immutable thresholds and weights for filtering and ranking.

    A single policy value is passed into the weather selector, the filter
    pipeline, the status engine and the scorer. The defaults reproduce the
    production policy; tests build alternates with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)

    # Scoring weights
    distance_weight: float = Field(default=1.0, description="Points lost per mile")
    rating_weight: float = Field(default=5.0, description="Thumbs up/down swing")
    recency_penalty: float = Field(
        default=-3.0, description="Penalty inside the recency penalty window"
    )
    variety_penalty: float = Field(
        default=-2.0, description="Penalty for a type already seen in the look-back"
    )
    weather_penalty: float = Field(
        default=-4.0, description="Penalty for outdoor activities when rain is likely"
    )
    unknown_distance_miles: float = Field(
        default=20.0, ge=0, description="Distance assumed for scoring when unknown"
    )

    # Recency windows
    recency_hide_days: float = Field(default=7, ge=0)
    recency_penalty_days: float = Field(default=21, ge=0)

    # Diversity
    variety_window_size: int = Field(default=3, ge=0)
    type_dominance_threshold: float = Field(default=0.7, ge=0, le=1)

    # Distance cutoff
    max_distance_miles: float = Field(default=15.0, ge=0)
    distance_exempt_types: frozenset[ActivityType] = Field(
        default=frozenset({ActivityType.MUSEUM})
    )

    # Status / time windows (hours)
    opens_soon_hours: float = Field(default=2, gt=0)
    closing_soon_hours: float = Field(default=1, gt=0)
    event_opens_soon_hours: float = Field(default=2, gt=0)

    # Weather classification
    rain_probability_threshold: float = Field(default=60, ge=0, le=100)
    significant_rain_hours: int = Field(default=3, ge=0)

    @property
    def variety_walk_length(self) -> int:
        """Number of leading candidates revisited by the diversity pass."""
        return self.variety_window_size * 2

    @property
    def opens_soon_window(self) -> timedelta:
        return timedelta(hours=self.opens_soon_hours)

    @property
    def closing_soon_window(self) -> timedelta:
        return timedelta(hours=self.closing_soon_hours)

    @property
    def event_opens_soon_window(self) -> timedelta:
        return timedelta(hours=self.event_opens_soon_hours)


DEFAULT_POLICY = RankingPolicy()


@dataclass(frozen=True)
class ScoredCandidate:
    """An activity paired with its score for the duration of one ranking call."""

    activity: Activity
    score: float

    def rescored(self, score: float) -> ScoredCandidate:
        return ScoredCandidate(activity=self.activity, score=score)
