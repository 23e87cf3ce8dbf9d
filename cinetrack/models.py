"""Data models for continue watching entries."""

from dataclasses import dataclass, asdict, field
from datetime import date, datetime
from typing import List, Optional

WATCHING_PATTERNS = ("binge_watching", "regular_watching", "casual_watching", "inactive")
URGENCY_LEVELS = ("fresh", "recent", "old", "stale")
RECOMMENDATION_STRENGTHS = ("high", "medium", "low")
RECOMMENDATION_TYPES = ("continue_binge", "catch_up", "finishing_touch", "new_season")


class InvalidItemError(ValueError):
    """Continue watching entry violates a data contract."""

    pass


def days_since(last_watched_date: date, today: Optional[date] = None) -> float:
    """Days elapsed between the last watched date and today (never negative)."""
    if today is None:
        today = date.today()
    return float(max(0, (today - last_watched_date).days))


def _parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass
class ContinueWatchingItem:
    """A TV show the user is part way through."""

    tmdb_tv_id: int
    total_episodes_watched: int
    last_watched_date: date
    next_season_number: int
    next_episode_number: int
    is_hidden: bool
    is_completed: bool
    watching_pattern: str
    days_since_last_episode: float
    watching_streak: int
    final_priority_score: float

    urgency_level: Optional[str] = None
    recommendation_strength: Optional[str] = None

    # User overrides
    priority_override: Optional[int] = None
    notes: Optional[str] = None

    # TMDB metadata
    show_name: Optional[str] = None
    show_poster_path: Optional[str] = None
    show_overview: Optional[str] = None
    show_status: Optional[str] = None
    next_episode_name: Optional[str] = None
    next_episode_air_date: Optional[str] = None
    next_episode_runtime: Optional[int] = None

    def __post_init__(self):
        self.last_watched_date = _parse_date(self.last_watched_date)

        if self.days_since_last_episode < 0:
            raise InvalidItemError(
                f"days_since_last_episode must be >= 0, got {self.days_since_last_episode} "
                f"(show {self.tmdb_tv_id})"
            )
        if self.total_episodes_watched < 0:
            raise InvalidItemError(
                f"total_episodes_watched must be >= 0 (show {self.tmdb_tv_id})"
            )
        if self.watching_streak < 0:
            raise InvalidItemError(f"watching_streak must be >= 0 (show {self.tmdb_tv_id})")
        if self.next_season_number < 1 or self.next_episode_number < 1:
            raise InvalidItemError(
                f"Next episode must be S1E1 or later, got "
                f"S{self.next_season_number}E{self.next_episode_number} (show {self.tmdb_tv_id})"
            )
        if self.watching_pattern not in WATCHING_PATTERNS:
            raise InvalidItemError(f"Invalid watching pattern: {self.watching_pattern}")
        if self.urgency_level is not None and self.urgency_level not in URGENCY_LEVELS:
            raise InvalidItemError(f"Invalid urgency level: {self.urgency_level}")
        if (
            self.recommendation_strength is not None
            and self.recommendation_strength not in RECOMMENDATION_STRENGTHS
        ):
            raise InvalidItemError(
                f"Invalid recommendation strength: {self.recommendation_strength}"
            )

    @property
    def display_name(self) -> str:
        """Show name, or the TMDB id when metadata hasn't been fetched."""
        return self.show_name or f"TMDB #{self.tmdb_tv_id}"

    def to_dict(self) -> dict:
        """Convert to dictionary for YAML serialization."""
        data = asdict(self)
        data["last_watched_date"] = self.last_watched_date.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ContinueWatchingItem":
        """Reconstruct from dictionary."""
        data = dict(data)
        data["last_watched_date"] = _parse_date(data["last_watched_date"])
        return cls(**data)


@dataclass
class Category:
    """A named group of continue watching items."""

    category: str
    items: List[ContinueWatchingItem] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)


@dataclass
class Recommendation:
    """A "watch this next" suggestion for a single show."""

    item: ContinueWatchingItem
    recommendation_type: str
    reasoning: str
    urgency_score: int
    time_commitment: str

    @property
    def tmdb_tv_id(self) -> int:
        return self.item.tmdb_tv_id


@dataclass
class WatchingStats:
    """Aggregate statistics over a user's continue watching list."""

    active_shows: int = 0
    completed_shows: int = 0
    total_episodes_watched: int = 0
    longest_streak: int = 0
    average_episodes_per_show: float = 0.0
    binge_shows: int = 0
    regular_shows: int = 0
    casual_shows: int = 0


@dataclass
class WatchedEpisode:
    """A single episode the user watched."""

    tmdb_tv_id: int
    season_number: int
    episode_number: int
    watched_at: datetime

    def __post_init__(self):
        if isinstance(self.watched_at, str):
            self.watched_at = datetime.fromisoformat(self.watched_at)
        if self.season_number < 1 or self.episode_number < 1:
            raise InvalidItemError(
                f"Episode must be S1E1 or later, got "
                f"S{self.season_number}E{self.episode_number} (show {self.tmdb_tv_id})"
            )

    def to_dict(self) -> dict:
        """Convert to dictionary for YAML serialization."""
        data = asdict(self)
        data["watched_at"] = self.watched_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "WatchedEpisode":
        """Reconstruct from dictionary."""
        return cls(**data)


@dataclass
class BingeWatchingSession:
    """Three or more episodes of one show watched within a day."""

    tmdb_tv_id: int
    session_start: datetime
    episodes_in_session: int
    total_runtime_minutes: int
    season_numbers: List[int]
    is_active: bool
    show_name: Optional[str] = None
