"""Tests for recommendation scoring and ranking."""

import math
from itertools import groupby
from datetime import timedelta

import pytest

from activity_now.models.activity import ActivityType
from activity_now.models.interaction import Interaction
from activity_now.models.ranking import RankingPolicy, ScoredCandidate
from activity_now.models.weather import WeatherStrategy
from activity_now.recommendations.scorer import (
    apply_variety,
    days_since_completion,
    exclude_recently_completed,
    score,
    should_apply_variety,
    sort_by_distance,
    sort_with_scores,
    variety_penalties,
)

from conftest import completed, make_place

NORMAL = WeatherStrategy.NORMAL
DEPRIORITIZE = WeatherStrategy.DEPRIORITIZE_OUTDOOR

PLAYGROUND = ActivityType.PLAYGROUND
LIBRARY = ActivityType.LIBRARY
MUSEUM = ActivityType.MUSEUM


def place(id, distance, activity_type=PLAYGROUND, indoor=False):
    return make_place(str(id), activity_type, indoor=indoor, distance=distance)


class TestScore:
    """Tests for the composite score."""

    def test_closer_scores_higher_by_distance_difference(self, now):
        close = place(1, 2.0)
        far = place(2, 10.0)
        assert score(close, None, NORMAL, now) - score(far, None, NORMAL, now) == pytest.approx(8.0)

    def test_unknown_distance_defaults_to_twenty(self, now):
        assert score(place(1, None), None, NORMAL, now) == pytest.approx(-20.0)

    def test_thumbs_up(self, now):
        activity = place(1, 5.0, LIBRARY, indoor=True)
        delta = score(activity, Interaction(rating=1), NORMAL, now) - score(activity, None, NORMAL, now)
        assert delta == pytest.approx(5.0)

    def test_thumbs_down(self, now):
        activity = place(1, 5.0, LIBRARY, indoor=True)
        delta = score(activity, Interaction(rating=-1), NORMAL, now) - score(activity, None, NORMAL, now)
        assert delta == pytest.approx(-5.0)

    def test_neutral_rating(self, now):
        activity = place(1, 5.0)
        assert score(activity, Interaction(rating=0), NORMAL, now) == score(activity, None, NORMAL, now)

    def test_recency_penalty_window(self, now):
        activity = place(1, 3.0, MUSEUM, indoor=True)
        delta = score(activity, completed(10, now), NORMAL, now) - score(activity, None, NORMAL, now)
        assert delta == pytest.approx(-3.0)

    def test_old_completion_no_penalty(self, now):
        activity = place(1, 3.0, MUSEUM, indoor=True)
        assert score(activity, completed(30, now), NORMAL, now) == score(activity, None, NORMAL, now)

    def test_hide_window_not_double_penalized(self, now):
        # Exclusion handles the hide window; the score carries no extra penalty
        activity = place(1, 3.0)
        assert score(activity, completed(3, now), NORMAL, now) == score(activity, None, NORMAL, now)

    def test_weather_penalty_outdoor_only(self, now):
        outdoor = place(1, 5.0)
        indoor = place(2, 5.0, LIBRARY, indoor=True)
        assert score(outdoor, None, DEPRIORITIZE, now) - score(outdoor, None, NORMAL, now) == pytest.approx(-4.0)
        assert score(indoor, None, DEPRIORITIZE, now) == score(indoor, None, NORMAL, now)

    def test_variety_penalty(self, now):
        activity = place(1, 5.0)
        assert score(activity, None, NORMAL, now, seen_types=[PLAYGROUND]) - score(
            activity, None, NORMAL, now
        ) == pytest.approx(-2.0)
        assert score(activity, None, NORMAL, now, seen_types=[LIBRARY]) == score(activity, None, NORMAL, now)

    def test_rating_overcomes_distance(self, now):
        rated = place(1, 5.0, LIBRARY, indoor=True)
        close = place(2, 1.0, LIBRARY, indoor=True)
        assert score(rated, Interaction(rating=1), NORMAL, now) > score(close, None, NORMAL, now)

    def test_alternate_weights(self, now):
        policy = RankingPolicy(distance_weight=2.0, rating_weight=1.0)
        activity = place(1, 3.0)
        assert score(activity, Interaction(rating=1), NORMAL, now, policy) == pytest.approx(-5.0)


class TestDaysSinceCompletion:
    def test_three_days(self, now):
        assert days_since_completion(completed(3, now), now) == pytest.approx(3.0)

    def test_none(self, now):
        assert days_since_completion(None, now) == math.inf
        assert days_since_completion(Interaction(), now) == math.inf

    def test_invalid_timestamp(self, now):
        interaction = Interaction(lastCompleted="invalid timestamp")
        assert days_since_completion(interaction, now) == math.inf

    def test_falls_back_to_latest_completion(self, now):
        interaction = Interaction(
            completions=[
                (now - timedelta(days=40)).isoformat(),
                (now - timedelta(days=2)).isoformat(),
                "garbage",
                (now - timedelta(days=12)).isoformat(),
            ]
        )
        assert days_since_completion(interaction, now) == pytest.approx(2.0)

    def test_naive_timestamp_uses_now_timezone(self, now):
        stamp = (now - timedelta(days=1)).replace(tzinfo=None).isoformat()
        assert days_since_completion(Interaction(lastCompleted=stamp), now) == pytest.approx(1.0)


class TestRecencyExclusion:
    def test_recent_completion_excluded(self, now):
        recent = place(1, 3.0, MUSEUM, indoor=True)
        other = place(2, 4.0, LIBRARY, indoor=True)
        interactions = {"1": completed(3, now)}
        assert sort_with_scores([recent, other], interactions, NORMAL, now) == [other]

    def test_sole_candidate_retained(self, now):
        recent = place(1, 3.0)
        assert sort_with_scores([recent], {"1": completed(3, now)}, NORMAL, now) == [recent]

    def test_all_recent_relaxed(self, now):
        first = place(1, 2.0)
        second = place(2, 3.0, LIBRARY, indoor=True)
        interactions = {"1": completed(3, now), "2": completed(5, now)}
        assert sort_with_scores([first, second], interactions, NORMAL, now) == [first, second]

    def test_exclusion_helper(self, now):
        a, b = place(1, 1.0), place(2, 2.0)
        assert exclude_recently_completed([a, b], {"2": completed(6.9, now)}, now) == [a]
        assert exclude_recently_completed([a, b], {"2": completed(7, now)}, now) == [a, b]
        assert exclude_recently_completed([], {}, now) == []


class TestVariety:
    """Tests for the diversity pass."""

    def test_dominant_type_keeps_distance_order(self, now):
        activities = [place(i + 1, 2.0 + i * 0.1) for i in range(8)]
        activities += [place(9 + i, 2.5 + i * 0.1, LIBRARY, indoor=True) for i in range(2)]

        result = sort_with_scores(activities, {}, NORMAL, now)
        assert result == sorted(activities, key=lambda a: a.distance)

    def test_variety_promotes_other_type(self, now):
        playground1 = place(1, 2.0)
        playground2 = place(2, 2.1)
        library = place(3, 2.2, LIBRARY, indoor=True)
        playground3 = place(4, 2.3)
        library2 = place(5, 2.4, LIBRARY, indoor=True)

        result = sort_with_scores(
            [playground1, playground2, library, playground3, library2], {}, NORMAL, now
        )
        types = [a.activity_type for a in result]
        assert types[0] == PLAYGROUND
        assert types[:3] != [PLAYGROUND, PLAYGROUND, PLAYGROUND]
        assert result[1] == library

    def test_balanced_mix_limits_runs(self, now):
        activities = [place(i + 1, 2.0 + i * 0.1) for i in range(3)]
        activities += [place(4 + i, 2.3 + i * 0.1, LIBRARY, indoor=True) for i in range(3)]
        activities += [place(7 + i, 2.6 + i * 0.1, MUSEUM, indoor=True) for i in range(2)]

        result = sort_with_scores(activities, {}, NORMAL, now)
        top = [a.activity_type for a in result[:6]]
        longest = max(len(list(run)) for _, run in groupby(top))
        assert longest <= 2

    def test_only_first_six_positions_rescored(self):
        types = [PLAYGROUND] * 8
        penalties = variety_penalties(types, RankingPolicy())
        assert penalties == [0.0, -2.0, -2.0, -2.0, -2.0, -2.0]

    def test_penalty_per_position(self):
        types = [PLAYGROUND, LIBRARY, PLAYGROUND, MUSEUM, LIBRARY]
        assert variety_penalties(types) == [0.0, 0.0, -2.0, 0.0, -2.0]

    def test_apply_variety_is_pure(self):
        candidates = [
            ScoredCandidate(activity=place(1, 1.0), score=-1.0),
            ScoredCandidate(activity=place(2, 1.5), score=-1.5),
            ScoredCandidate(activity=place(3, 2.0, LIBRARY), score=-2.0),
        ]
        original = list(candidates)
        result = apply_variety(candidates)
        assert candidates == original
        assert [c.activity.id for c in result] == ["1", "3", "2"]
        assert [c.score for c in result] == [-1.0, -2.0, -3.5]

    def test_positions_beyond_walk_untouched(self):
        candidates = [ScoredCandidate(activity=place(i, float(i)), score=-float(i)) for i in range(8)]
        scores = {c.activity.id: c.score for c in apply_variety(candidates)}
        assert scores["5"] == -7.0  # rescored
        assert scores["6"] == -6.0
        assert scores["7"] == -7.0

    def test_should_apply_variety(self):
        def scored(*types):
            return [ScoredCandidate(activity=place(i, 1.0, t), score=0.0) for i, t in enumerate(types)]

        assert should_apply_variety(scored()) is False
        assert should_apply_variety(scored(*[PLAYGROUND] * 7, *[LIBRARY] * 3)) is False
        assert should_apply_variety(scored(*[PLAYGROUND] * 6, *[LIBRARY] * 4)) is True

    def test_deterministic_ties(self, now):
        activities = [place(i, 5.0, [PLAYGROUND, LIBRARY][i % 2]) for i in range(6)]
        first = sort_with_scores(activities, {}, NORMAL, now)
        second = sort_with_scores(list(activities), {}, NORMAL, now)
        assert first == second


class TestSortWithScores:
    def test_sorts_by_distance_without_history(self, now):
        a1 = place(1, 5.0)
        a2 = place(2, 2.0, LIBRARY, indoor=True)
        a3 = place(3, 8.0, MUSEUM, indoor=True)
        assert sort_with_scores([a1, a2, a3], {}, NORMAL, now) == [a2, a1, a3]

    def test_accepts_raw_interaction_dicts(self, now):
        far_liked = place(1, 6.0, LIBRARY, indoor=True)
        near = place(2, 3.0)
        interactions = {"1": {"rating": 1, "completions": [], "lastCompleted": None}}
        assert sort_with_scores([near, far_liked], interactions, NORMAL, now) == [far_liked, near]

    def test_weather_penalty_reorders(self, now):
        outdoor = place(1, 2.0)
        indoor = place(2, 4.0, LIBRARY, indoor=True)
        assert sort_with_scores([outdoor, indoor], {}, DEPRIORITIZE, now) == [indoor, outdoor]


class TestSortByDistance:
    def test_unknown_last(self):
        a, b, c = place(1, None), place(2, 3.0), place(3, 1.0)
        assert sort_by_distance([a, b, c], NORMAL) == [c, b, a]

    def test_indoor_first_when_deprioritized(self):
        outdoor = place(1, 1.0)
        indoor_far = place(2, 9.0, LIBRARY, indoor=True)
        indoor_unknown = place(3, None, MUSEUM, indoor=True)
        assert sort_by_distance([outdoor, indoor_unknown, indoor_far], DEPRIORITIZE) == [
            indoor_far,
            indoor_unknown,
            outdoor,
        ]

    def test_no_grouping_otherwise(self):
        outdoor = place(1, 1.0)
        indoor = place(2, 9.0, LIBRARY, indoor=True)
        assert sort_by_distance([indoor, outdoor], WeatherStrategy.HIDE_OUTDOOR) == [outdoor, indoor]
