"""Watching statistics across a user's shows."""

from typing import Sequence

from cinetrack.models import ContinueWatchingItem, WatchingStats


def compute_watching_stats(items: Sequence[ContinueWatchingItem]) -> WatchingStats:
    """Summarize a continue watching list.

    Pattern counts only consider active shows (not hidden, not completed).
    """
    if not items:
        return WatchingStats()

    active = [i for i in items if not i.is_hidden and not i.is_completed]
    total_episodes = sum(i.total_episodes_watched for i in items)

    return WatchingStats(
        active_shows=len(active),
        completed_shows=sum(1 for i in items if i.is_completed),
        total_episodes_watched=total_episodes,
        longest_streak=max(i.watching_streak for i in items),
        average_episodes_per_show=round(total_episodes / len(items), 1),
        binge_shows=sum(1 for i in active if i.watching_pattern == "binge_watching"),
        regular_shows=sum(1 for i in active if i.watching_pattern == "regular_watching"),
        casual_shows=sum(1 for i in active if i.watching_pattern == "casual_watching"),
    )
