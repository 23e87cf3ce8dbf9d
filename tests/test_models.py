"""Tests for data models."""

from datetime import date, datetime

import pytest

from cinetrack.models import (
    Category,
    ContinueWatchingItem,
    InvalidItemError,
    Recommendation,
    WatchedEpisode,
    days_since,
)


def make_item(**overrides) -> ContinueWatchingItem:
    data = {
        "tmdb_tv_id": 1396,
        "total_episodes_watched": 12,
        "last_watched_date": date(2025, 12, 1),
        "next_season_number": 2,
        "next_episode_number": 6,
        "is_hidden": False,
        "is_completed": False,
        "watching_pattern": "regular_watching",
        "days_since_last_episode": 4,
        "watching_streak": 2,
        "final_priority_score": 80,
    }
    data.update(overrides)
    return ContinueWatchingItem(**data)


def test_item_defaults():
    """Optional fields default to None."""
    item = make_item()
    assert item.urgency_level is None
    assert item.recommendation_strength is None
    assert item.show_name is None
    assert item.display_name == "TMDB #1396"


def test_item_display_name():
    assert make_item(show_name="Breaking Bad").display_name == "Breaking Bad"


def test_item_to_dict():
    """Items convert to a YAML friendly dictionary."""
    d = make_item(show_name="Breaking Bad").to_dict()
    assert d["tmdb_tv_id"] == 1396
    assert d["last_watched_date"] == "2025-12-01"
    assert d["show_name"] == "Breaking Bad"


def test_item_from_dict():
    """Items reconstruct from a dictionary with an ISO date."""
    data = make_item(urgency_level="fresh").to_dict()
    item = ContinueWatchingItem.from_dict(data)
    assert item.last_watched_date == date(2025, 12, 1)
    assert item.urgency_level == "fresh"


def test_item_accepts_iso_string_date():
    item = make_item(last_watched_date="2025-11-30T21:15:00")
    assert item.last_watched_date == date(2025, 11, 30)


class TestValidation:
    """Invalid items are rejected at construction."""

    def test_negative_days(self):
        with pytest.raises(InvalidItemError, match="days_since_last_episode"):
            make_item(days_since_last_episode=-1)

    def test_zero_days_allowed(self):
        assert make_item(days_since_last_episode=0).days_since_last_episode == 0

    def test_episode_zero(self):
        with pytest.raises(InvalidItemError, match="S1E1"):
            make_item(next_episode_number=0)

    def test_negative_episode_count(self):
        with pytest.raises(InvalidItemError):
            make_item(total_episodes_watched=-2)

    def test_unknown_pattern(self):
        with pytest.raises(InvalidItemError, match="watching pattern"):
            make_item(watching_pattern="speed_watching")

    def test_unknown_urgency(self):
        with pytest.raises(InvalidItemError, match="urgency level"):
            make_item(urgency_level="ancient")

    def test_unknown_strength(self):
        with pytest.raises(InvalidItemError, match="recommendation strength"):
            make_item(recommendation_strength="max")

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            make_item(watching_streak=-1)


def test_days_since():
    assert days_since(date(2025, 12, 1), date(2025, 12, 11)) == 10.0
    assert days_since(date(2025, 12, 1), date(2025, 12, 1)) == 0.0


def test_days_since_future_date_clamped():
    assert days_since(date(2025, 12, 20), date(2025, 12, 11)) == 0.0


def test_category_count():
    items = [make_item(), make_item(tmdb_tv_id=2)]
    category = Category(category="up_next", items=items)
    assert category.count == 2


def test_recommendation_tmdb_id():
    rec = Recommendation(
        item=make_item(),
        recommendation_type="catch_up",
        reasoning="Time to catch up!",
        urgency_score=7,
        time_commitment="45m",
    )
    assert rec.tmdb_tv_id == 1396


class TestWatchedEpisode:
    """Tests for episode watch records."""

    def test_round_trip_keeps_time(self):
        watched = WatchedEpisode(1396, 2, 6, datetime(2025, 12, 2, 21, 30))

        data = watched.to_dict()

        assert data["watched_at"] == "2025-12-02T21:30:00"
        assert WatchedEpisode.from_dict(data) == watched

    def test_rejects_episode_zero(self):
        with pytest.raises(InvalidItemError, match="S1E1 or later"):
            WatchedEpisode(1396, 1, 0, datetime(2025, 12, 2, 21, 30))
