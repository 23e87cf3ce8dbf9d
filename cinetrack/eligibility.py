"""Decide which shows belong on the continue watching surface."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from cinetrack.models import ContinueWatchingItem, WATCHING_PATTERNS

logger = logging.getLogger(__name__)

# Shows untouched for longer than this are considered abandoned
MAX_DAYS_SINCE_LAST_EPISODE = 90
ATTENTION_DAYS = 14


def should_show_continue_watching(item: ContinueWatchingItem) -> bool:
    """Return True if the item may be shown to the user."""
    if item.is_hidden:
        return False
    if item.is_completed:
        return False
    return item.days_since_last_episode <= MAX_DAYS_SINCE_LAST_EPISODE


def eligible_items(items: Sequence[ContinueWatchingItem]) -> List[ContinueWatchingItem]:
    """Drop hidden, completed and abandoned items, keeping input order."""
    eligible = [item for item in items if should_show_continue_watching(item)]
    dropped = len(items) - len(eligible)
    if dropped:
        logger.debug(f"Dropped {dropped} of {len(items)} items from continue watching")
    return eligible


@dataclass
class ContinueWatchingQuery:
    """Filtering options for a continue watching listing."""

    include_hidden: bool = False
    include_completed: bool = False
    min_priority: Optional[int] = None
    max_days_since_last_episode: Optional[float] = None
    watching_patterns: Optional[Sequence[str]] = None
    limit: Optional[int] = None
    offset: int = 0

    def __post_init__(self):
        if self.watching_patterns:
            for pattern in self.watching_patterns:
                if pattern not in WATCHING_PATTERNS:
                    raise ValueError(f"Invalid watching pattern: {pattern}")
        if self.limit is not None and self.limit < 0:
            raise ValueError(f"limit must be >= 0, got {self.limit}")
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")


def filter_continue_watching(
    items: Sequence[ContinueWatchingItem],
    query: Optional[ContinueWatchingQuery] = None,
) -> List[ContinueWatchingItem]:
    """Apply query options and order by priority score, highest first."""
    if query is None:
        query = ContinueWatchingQuery()

    filtered = list(items)

    if not query.include_hidden:
        filtered = [i for i in filtered if not i.is_hidden]
    if not query.include_completed:
        filtered = [i for i in filtered if not i.is_completed]
    if query.min_priority:
        filtered = [i for i in filtered if (i.priority_override or 0) >= query.min_priority]
    if query.max_days_since_last_episode is not None:
        filtered = [
            i for i in filtered
            if i.days_since_last_episode <= query.max_days_since_last_episode
        ]
    if query.watching_patterns:
        filtered = [i for i in filtered if i.watching_pattern in query.watching_patterns]

    filtered.sort(key=lambda i: i.final_priority_score, reverse=True)

    end = None if query.limit is None else query.offset + query.limit
    return filtered[query.offset:end]


def shows_needing_attention(
    items: Sequence[ContinueWatchingItem],
    min_days: float = ATTENTION_DAYS,
) -> List[ContinueWatchingItem]:
    """Eligible shows that haven't been watched for at least ``min_days``."""
    return [
        item for item in eligible_items(items)
        if item.days_since_last_episode >= min_days
    ]
