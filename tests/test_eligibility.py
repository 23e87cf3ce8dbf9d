"""Tests for continue watching eligibility and filtering."""

from datetime import date

import pytest

from cinetrack.eligibility import (
    ContinueWatchingQuery,
    filter_continue_watching,
    should_show_continue_watching,
    shows_needing_attention,
)
from cinetrack.models import ContinueWatchingItem


def make_item(**overrides) -> ContinueWatchingItem:
    """Build a regular, eligible item."""
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


class TestShouldShowContinueWatching:
    """Tests for the eligibility filter."""

    def test_visible_item(self):
        """Items that are not hidden or completed are shown."""
        assert should_show_continue_watching(make_item()) is True

    def test_hidden_item(self):
        assert should_show_continue_watching(make_item(is_hidden=True)) is False

    def test_completed_item(self):
        assert should_show_continue_watching(make_item(is_completed=True)) is False

    def test_hidden_wins_over_recent_activity(self):
        """Hidden items stay hidden however fresh they are."""
        item = make_item(is_hidden=True, days_since_last_episode=0, urgency_level="fresh")
        assert should_show_continue_watching(item) is False

    def test_boundary_days(self):
        """Up to 90 days is eligible, beyond is not."""
        assert should_show_continue_watching(make_item(days_since_last_episode=89)) is True
        assert should_show_continue_watching(make_item(days_since_last_episode=90)) is True
        assert should_show_continue_watching(make_item(days_since_last_episode=91)) is False


class TestFilterContinueWatching:
    """Tests for query based filtering."""

    def test_defaults_exclude_hidden_and_completed(self):
        items = [
            make_item(tmdb_tv_id=1),
            make_item(tmdb_tv_id=2, is_hidden=True),
            make_item(tmdb_tv_id=3, is_completed=True),
        ]
        result = filter_continue_watching(items)
        assert [i.tmdb_tv_id for i in result] == [1]

    def test_include_hidden_and_completed(self):
        items = [
            make_item(tmdb_tv_id=1),
            make_item(tmdb_tv_id=2, is_hidden=True),
            make_item(tmdb_tv_id=3, is_completed=True),
        ]
        query = ContinueWatchingQuery(include_hidden=True, include_completed=True)
        assert len(filter_continue_watching(items, query)) == 3

    def test_orders_by_priority_score(self):
        items = [
            make_item(tmdb_tv_id=1, final_priority_score=10),
            make_item(tmdb_tv_id=2, final_priority_score=50),
            make_item(tmdb_tv_id=3, final_priority_score=30),
        ]
        result = filter_continue_watching(items)
        assert [i.tmdb_tv_id for i in result] == [2, 3, 1]

    def test_min_priority_uses_override(self):
        items = [
            make_item(tmdb_tv_id=1, priority_override=8),
            make_item(tmdb_tv_id=2, priority_override=3),
            make_item(tmdb_tv_id=3),
        ]
        result = filter_continue_watching(items, ContinueWatchingQuery(min_priority=5))
        assert [i.tmdb_tv_id for i in result] == [1]

    def test_max_days_and_patterns(self):
        items = [
            make_item(tmdb_tv_id=1, days_since_last_episode=2, watching_pattern="binge_watching"),
            make_item(tmdb_tv_id=2, days_since_last_episode=40, watching_pattern="binge_watching"),
            make_item(tmdb_tv_id=3, days_since_last_episode=2, watching_pattern="casual_watching"),
        ]
        query = ContinueWatchingQuery(
            max_days_since_last_episode=30,
            watching_patterns=["binge_watching"],
        )
        result = filter_continue_watching(items, query)
        assert [i.tmdb_tv_id for i in result] == [1]

    def test_limit_and_offset(self):
        items = [make_item(tmdb_tv_id=i, final_priority_score=100 - i) for i in range(1, 6)]
        query = ContinueWatchingQuery(limit=2, offset=1)
        result = filter_continue_watching(items, query)
        assert [i.tmdb_tv_id for i in result] == [2, 3]

    def test_invalid_pattern(self):
        with pytest.raises(ValueError, match="Invalid watching pattern"):
            ContinueWatchingQuery(watching_patterns=["speed_watching"])

    def test_does_not_mutate_input(self):
        items = [
            make_item(tmdb_tv_id=1, final_priority_score=1),
            make_item(tmdb_tv_id=2, final_priority_score=2),
        ]
        filter_continue_watching(items)
        assert [i.tmdb_tv_id for i in items] == [1, 2]


def test_shows_needing_attention():
    """Shows idle for two weeks or more need attention."""
    items = [
        make_item(tmdb_tv_id=1, days_since_last_episode=3),
        make_item(tmdb_tv_id=2, days_since_last_episode=14),
        make_item(tmdb_tv_id=3, days_since_last_episode=45),
        make_item(tmdb_tv_id=4, days_since_last_episode=120),
        make_item(tmdb_tv_id=5, days_since_last_episode=30, is_hidden=True),
    ]
    result = shows_needing_attention(items)
    assert [i.tmdb_tv_id for i in result] == [2, 3]


def test_shows_needing_attention_custom_days():
    items = [
        make_item(tmdb_tv_id=1, days_since_last_episode=3),
        make_item(tmdb_tv_id=2, days_since_last_episode=8),
    ]
    assert [i.tmdb_tv_id for i in shows_needing_attention(items, min_days=7)] == [2]
