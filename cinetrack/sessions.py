"""Detect binge watching sessions from the episode watch log."""

import logging
from datetime import datetime, timedelta
from itertools import groupby
from typing import List, Optional, Sequence

from cinetrack.formatting import DEFAULT_EPISODE_LENGTH
from cinetrack.models import BingeWatchingSession, WatchedEpisode

logger = logging.getLogger(__name__)

ACTIVE_DAYS = 7
SESSION_WINDOW = timedelta(hours=24)
MIN_SESSION_EPISODES = 3


def _build_session(
    episodes: List[WatchedEpisode],
    now: datetime,
    active_days: float,
    episode_length: int,
) -> BingeWatchingSession:
    season_numbers = []
    for episode in episodes:
        if episode.season_number not in season_numbers:
            season_numbers.append(episode.season_number)

    return BingeWatchingSession(
        tmdb_tv_id=episodes[0].tmdb_tv_id,
        session_start=episodes[0].watched_at,
        episodes_in_session=len(episodes),
        total_runtime_minutes=len(episodes) * episode_length,
        season_numbers=season_numbers,
        is_active=now - episodes[-1].watched_at <= timedelta(days=active_days),
    )


def detect_binge_sessions(
    watches: Sequence[WatchedEpisode],
    active_days: float = ACTIVE_DAYS,
    now: Optional[datetime] = None,
    episode_length: int = DEFAULT_EPISODE_LENGTH,
) -> List[BingeWatchingSession]:
    """Find runs of 3+ episodes of one show watched within 24 hours.

    Only watches from the last ``active_days`` are considered. A session
    opens at its first episode and takes every later episode watched no more
    than 24 hours after that first one. Sessions come back oldest first.
    """
    if active_days < 0:
        raise ValueError(f"active_days must be >= 0, got {active_days}")
    if now is None:
        now = datetime.now()

    threshold = now - timedelta(days=active_days)
    recent = sorted(
        (w for w in watches if w.watched_at >= threshold),
        key=lambda w: (w.tmdb_tv_id, w.watched_at),
    )

    sessions = []
    for _, show_watches in groupby(recent, key=lambda w: w.tmdb_tv_id):
        current: List[WatchedEpisode] = []
        for watch in show_watches:
            if current and watch.watched_at - current[0].watched_at > SESSION_WINDOW:
                if len(current) >= MIN_SESSION_EPISODES:
                    sessions.append(_build_session(current, now, active_days, episode_length))
                current = []
            current.append(watch)
        if len(current) >= MIN_SESSION_EPISODES:
            sessions.append(_build_session(current, now, active_days, episode_length))

    sessions.sort(key=lambda s: s.session_start)
    logger.debug(f"Found {len(sessions)} binge sessions in {len(recent)} recent watches")
    return sessions
