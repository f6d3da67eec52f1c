"""Personalized scoring and ranking.

Composite score (higher is better)::

    score = -distance_weight * effective_distance
          + rating_weight * sign(rating)
          + recency_term
          + variety_term
          + weather_term

Activities completed inside the recency hide window are removed before
scoring by ``exclude_recently_completed``; the additive formula only carries
soft penalties, so a hidden activity that is let back in (because hiding would
empty the results) is not penalized a second time.

Ranking is deterministic: every sort is stable and equal scores keep their
input order.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from activity_now.models.activity import ActivityType, EventActivity, EvergreenActivity
from activity_now.models.interaction import Interaction, parse_interactions
from activity_now.models.ranking import DEFAULT_POLICY, RankingPolicy, ScoredCandidate
from activity_now.models.weather import WeatherStrategy

logger = logging.getLogger(__name__)

AnyActivity = EvergreenActivity | EventActivity


def days_since_completion(
    interaction: Interaction | None, now: datetime
) -> float:
    """Days between the last completion and ``now``; infinity if unknown."""
    if interaction is None:
        return math.inf
    last = interaction.last_completed_at(reference=now)
    if last is None:
        return math.inf
    try:
        return (now - last).total_seconds() / 86400
    except TypeError:
        return math.inf


def is_recently_completed(
    interaction: Interaction | None,
    now: datetime,
    policy: RankingPolicy = DEFAULT_POLICY,
) -> bool:
    """True inside the recency hide window."""
    return days_since_completion(interaction, now) < policy.recency_hide_days


def exclude_recently_completed(
    activities: Sequence[AnyActivity],
    interactions: Mapping[str, Interaction],
    now: datetime,
    policy: RankingPolicy = DEFAULT_POLICY,
) -> list[AnyActivity]:
    """Drop recently completed activities unless that would drop all of them."""
    kept = [
        activity
        for activity in activities
        if not is_recently_completed(interactions.get(activity.id), now, policy)
    ]
    if not kept and activities:
        logger.debug(
            f"All {len(activities)} candidates completed recently; keeping them all"
        )
        return list(activities)
    return kept


def recency_term(
    interaction: Interaction | None,
    now: datetime,
    policy: RankingPolicy = DEFAULT_POLICY,
) -> float:
    days = days_since_completion(interaction, now)
    # The hide window is handled by exclusion, not by the score
    if policy.recency_hide_days <= days < policy.recency_penalty_days:
        return policy.recency_penalty
    return 0.0


def score(
    activity: AnyActivity,
    interaction: Interaction | None,
    strategy: WeatherStrategy,
    now: datetime,
    policy: RankingPolicy = DEFAULT_POLICY,
    seen_types: Sequence[ActivityType] = (),
) -> float:
    """Composite score for one activity.

    Args:
        activity: Candidate with its display distance attached
        interaction: The user's interaction with this activity, if any
        strategy: Current weather strategy
        now: Reference instant for recency
        policy: Weights and thresholds
        seen_types: Types at earlier positions of the diversity walk

    Returns:
        Score, higher is better
    """
    distance = (
        activity.distance
        if activity.distance is not None
        else policy.unknown_distance_miles
    )
    total = -policy.distance_weight * distance

    if interaction is not None:
        total += policy.rating_weight * interaction.rating_sign
    total += recency_term(interaction, now, policy)

    if activity.activity_type in seen_types:
        total += policy.variety_penalty

    if strategy == WeatherStrategy.DEPRIORITIZE_OUTDOOR and not activity.indoor:
        total += policy.weather_penalty

    return total


def rank(candidates: Sequence[ScoredCandidate]) -> list[ScoredCandidate]:
    """Stable sort by descending score."""
    return sorted(candidates, key=lambda candidate: candidate.score, reverse=True)


def should_apply_variety(
    candidates: Sequence[ScoredCandidate],
    policy: RankingPolicy = DEFAULT_POLICY,
) -> bool:
    """False when one type makes up at least the dominance share of the list."""
    if not candidates:
        return False
    counts = Counter(candidate.activity.activity_type for candidate in candidates)
    share = max(counts.values()) / len(candidates)
    return share < policy.type_dominance_threshold


def variety_penalties(
    types: Sequence[ActivityType],
    policy: RankingPolicy = DEFAULT_POLICY,
) -> list[float]:
    """Penalty at each position of the diversity walk.

    A position is penalized when its type already appeared at an earlier
    position of the walk. Only the first ``variety_walk_length`` positions are
    considered.
    """
    penalties: list[float] = []
    seen: tuple[ActivityType, ...] = ()
    for activity_type in types[: policy.variety_walk_length]:
        penalties.append(policy.variety_penalty if activity_type in seen else 0.0)
        seen = (*seen, activity_type)
    return penalties


def apply_variety(
    candidates: Sequence[ScoredCandidate],
    policy: RankingPolicy = DEFAULT_POLICY,
) -> list[ScoredCandidate]:
    """Re-score the leading candidates with the variety penalty and re-rank.

    Returns a new list; the input is left untouched.
    """
    penalties = variety_penalties(
        [candidate.activity.activity_type for candidate in candidates], policy
    )
    rescored = [
        candidate.rescored(candidate.score + penalty)
        for candidate, penalty in zip(candidates, penalties)
    ]
    return rank([*rescored, *candidates[len(rescored):]])


def score_candidates(
    activities: Sequence[AnyActivity],
    interactions: Mapping[str, Interaction],
    strategy: WeatherStrategy,
    now: datetime,
    policy: RankingPolicy = DEFAULT_POLICY,
) -> list[ScoredCandidate]:
    """Recency exclusion, scoring, ranking and the diversity pass."""
    candidates = exclude_recently_completed(activities, interactions, now, policy)
    scored = rank(
        [
            ScoredCandidate(
                activity=activity,
                score=score(activity, interactions.get(activity.id), strategy, now, policy),
            )
            for activity in candidates
        ]
    )

    if should_apply_variety(scored, policy):
        return apply_variety(scored, policy)

    logger.debug("Single activity type dominates; skipping variety re-ranking")
    return scored


def sort_with_scores(
    activities: Sequence[AnyActivity],
    interactions: Mapping[str, Interaction | Mapping[str, Any]] | None,
    strategy: WeatherStrategy,
    now: datetime,
    policy: RankingPolicy = DEFAULT_POLICY,
) -> list[AnyActivity]:
    """Personalized ordering of ``activities``; scores are not returned."""
    normalized = parse_interactions(interactions)
    return [
        candidate.activity
        for candidate in score_candidates(activities, normalized, strategy, now, policy)
    ]


def sort_by_distance(
    activities: Sequence[AnyActivity], strategy: WeatherStrategy
) -> list[AnyActivity]:
    """Non-personalized order: nearest first, unknown distance last.

    Under ``deprioritize_outdoor`` indoor activities come first.
    """
    indoor_first = strategy == WeatherStrategy.DEPRIORITIZE_OUTDOOR

    def sort_key(activity: AnyActivity) -> tuple[int, int, float]:
        return (
            0 if activity.indoor or not indoor_first else 1,
            1 if activity.distance is None else 0,
            activity.distance if activity.distance is not None else math.inf,
        )

    return sorted(activities, key=sort_key)
