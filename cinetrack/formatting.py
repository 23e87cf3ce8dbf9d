"""Human readable labels for watch progress."""

import math

DEFAULT_EPISODE_LENGTH = 45


def _require_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


def format_days_since_last_episode(days: float) -> str:
    """Format a day count as "Today", "Yesterday", "3 days ago", ...

    Week/month/year counts always use the plural form ("1 weeks ago").
    """
    _require_non_negative("days", days)

    if days < 1:
        return "Today"
    if days < 2:
        return "Yesterday"
    if days < 7:
        return f"{math.floor(days)} days ago"
    if days < 30:
        return f"{math.floor(days / 7)} weeks ago"
    if days < 365:
        return f"{math.floor(days / 30)} months ago"
    return f"{math.floor(days / 365)} years ago"


def format_watching_streak(days: int) -> str:
    """Format a watching streak as "No streak", "3 day streak", "2 week streak", ..."""
    _require_non_negative("days", days)

    if days == 0:
        return "No streak"
    if days < 7:
        return f"{days} day streak"
    if days < 30:
        return f"{math.floor(days / 7)} week streak"
    return f"{math.floor(days / 30)} month streak"


def calculate_time_to_finish_season(
    episode_count: int,
    episode_length_minutes: int = DEFAULT_EPISODE_LENGTH,
) -> str:
    """Estimate watch time for the remaining episodes, e.g. "1h 30m"."""
    _require_non_negative("episode_count", episode_count)
    _require_non_negative("episode_length_minutes", episode_length_minutes)

    total_minutes = episode_count * episode_length_minutes
    hours, minutes = divmod(total_minutes, 60)

    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"


def get_next_episode_label(season: int, episode: int) -> str:
    """Format an episode as S01E01."""
    if season < 1 or episode < 1:
        raise ValueError(f"Episode must be S1E1 or later, got S{season}E{episode}")
    return f"S{season:02d}E{episode:02d}"
