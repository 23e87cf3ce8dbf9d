"""Tests for watch next recommendations."""

from datetime import date

import pytest

from cinetrack.models import ContinueWatchingItem
from cinetrack.recommendations import generate_watching_recommendations, recommend_item


def make_item(**overrides) -> ContinueWatchingItem:
    data = {
        "tmdb_tv_id": 1,
        "total_episodes_watched": 5,
        "last_watched_date": date(2023, 1, 1),
        "next_season_number": 1,
        "next_episode_number": 6,
        "is_hidden": False,
        "is_completed": False,
        "watching_pattern": "regular_watching",
        "days_since_last_episode": 7,
        "watching_streak": 3,
        "final_priority_score": 100,
    }
    data.update(overrides)
    return ContinueWatchingItem(**data)


class TestRecommendationTypes:
    """Each rule produces the expected type and score."""

    def test_continue_binge(self):
        recommendations = generate_watching_recommendations(
            [make_item(watching_pattern="binge_watching")]
        )

        assert len(recommendations) == 1
        assert recommendations[0].recommendation_type == "continue_binge"
        assert recommendations[0].urgency_score == 9

    def test_catch_up(self):
        recommendations = generate_watching_recommendations(
            [make_item(days_since_last_episode=20)]
        )

        assert len(recommendations) == 1
        assert recommendations[0].recommendation_type == "catch_up"
        assert recommendations[0].urgency_score == 7
        assert "20 days" in recommendations[0].reasoning

    def test_catch_up_starts_at_two_weeks(self):
        assert recommend_item(make_item(days_since_last_episode=14)).recommendation_type == "catch_up"
        assert recommend_item(make_item(days_since_last_episode=13)).recommendation_type == "new_season"

    def test_finishing_touch(self):
        recommendations = generate_watching_recommendations(
            [make_item(total_episodes_watched=25, days_since_last_episode=5)]
        )

        assert len(recommendations) == 1
        assert recommendations[0].recommendation_type == "finishing_touch"
        assert recommendations[0].urgency_score == 8

    def test_new_season_fallback(self):
        rec = recommend_item(make_item())
        assert rec.recommendation_type == "new_season"
        assert rec.urgency_score == 6

    def test_binge_takes_precedence(self):
        """One recommendation per item, first matching rule wins."""
        rec = recommend_item(
            make_item(
                watching_pattern="binge_watching",
                days_since_last_episode=20,
                total_episodes_watched=30,
            )
        )
        assert rec.recommendation_type == "continue_binge"


def test_limit_to_top_three():
    items = [make_item(tmdb_tv_id=i + 1) for i in range(5)]

    recommendations = generate_watching_recommendations(items)

    assert len(recommendations) == 3


def test_sorted_by_urgency_with_stable_ties():
    items = [
        make_item(tmdb_tv_id=1),
        make_item(tmdb_tv_id=2, days_since_last_episode=20),
        make_item(tmdb_tv_id=3, watching_pattern="binge_watching"),
        make_item(tmdb_tv_id=4, days_since_last_episode=30),
        make_item(tmdb_tv_id=5, total_episodes_watched=25, days_since_last_episode=1),
    ]

    recommendations = generate_watching_recommendations(items)

    assert [r.tmdb_tv_id for r in recommendations] == [3, 5, 2]
    assert [r.urgency_score for r in recommendations] == [9, 8, 7]


def test_never_pads():
    recommendations = generate_watching_recommendations([make_item(), make_item(tmdb_tv_id=2)])
    assert len(recommendations) == 2


def test_skips_ineligible_items():
    items = [
        make_item(tmdb_tv_id=1, watching_pattern="binge_watching", is_hidden=True),
        make_item(tmdb_tv_id=2, is_completed=True),
        make_item(tmdb_tv_id=3, days_since_last_episode=120),
        make_item(tmdb_tv_id=4),
    ]

    recommendations = generate_watching_recommendations(items)

    assert [r.tmdb_tv_id for r in recommendations] == [4]


def test_custom_limit_and_time_commitment():
    items = [make_item(tmdb_tv_id=i + 1) for i in range(5)]

    recommendations = generate_watching_recommendations(items, limit=4, episode_length=30)

    assert len(recommendations) == 4
    assert recommendations[0].time_commitment == "30m"


def test_time_commitment_uses_episode_runtime():
    rec = recommend_item(make_item(next_episode_runtime=60))
    assert rec.time_commitment == "1h"


def test_default_time_commitment():
    assert recommend_item(make_item()).time_commitment == "45m"


def test_negative_limit():
    with pytest.raises(ValueError):
        generate_watching_recommendations([make_item()], limit=-1)


def test_does_not_mutate_input():
    items = [make_item(tmdb_tv_id=1), make_item(tmdb_tv_id=2, watching_pattern="binge_watching")]
    snapshot = [i.to_dict() for i in items]

    generate_watching_recommendations(items)

    assert [i.to_dict() for i in items] == snapshot
