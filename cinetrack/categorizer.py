"""Group continue watching items into display categories."""

import logging
from typing import Callable, List, Sequence, Tuple

from cinetrack.eligibility import eligible_items
from cinetrack.models import Category, ContinueWatchingItem

logger = logging.getLogger(__name__)

# Output order of the categorized listing
CATEGORIES = (
    "up_next",
    "binge_worthy",
    "almost_done",
    "recently_started",
    "taking_break",
    "seasonal_returns",
)

DEFAULT_CATEGORY = "up_next"

RECENT_DAYS = 7
RECENTLY_STARTED_MAX_EPISODES = 5
ALMOST_DONE_MIN_EPISODES = 20


def _is_up_next(item: ContinueWatchingItem) -> bool:
    return item.urgency_level == "fresh" and item.recommendation_strength == "high"


def _is_binge_worthy(item: ContinueWatchingItem) -> bool:
    return item.watching_pattern == "binge_watching"


def _is_almost_done(item: ContinueWatchingItem) -> bool:
    return (
        item.total_episodes_watched >= ALMOST_DONE_MIN_EPISODES
        and item.days_since_last_episode <= RECENT_DAYS
    )


def _is_recently_started(item: ContinueWatchingItem) -> bool:
    return (
        item.total_episodes_watched <= RECENTLY_STARTED_MAX_EPISODES
        and item.days_since_last_episode <= RECENT_DAYS
    )


def _is_taking_break(item: ContinueWatchingItem) -> bool:
    return item.urgency_level == "old"


def _is_seasonal_return(item: ContinueWatchingItem) -> bool:
    return item.urgency_level == "stale"


# Checked in order; an item lands in the first category it matches
CATEGORY_RULES: Tuple[Tuple[str, Callable[[ContinueWatchingItem], bool]], ...] = (
    ("up_next", _is_up_next),
    ("binge_worthy", _is_binge_worthy),
    ("almost_done", _is_almost_done),
    ("recently_started", _is_recently_started),
    ("taking_break", _is_taking_break),
    ("seasonal_returns", _is_seasonal_return),
)


def categorize_item(item: ContinueWatchingItem) -> str:
    """Return the category name for a single item."""
    for name, matches in CATEGORY_RULES:
        if matches(item):
            return name
    return DEFAULT_CATEGORY


def categorize_continue_watching_items(
    items: Sequence[ContinueWatchingItem],
) -> List[Category]:
    """Split items into categories, dropping empty ones.

    Hidden, completed and abandoned items are left out entirely. Items keep
    their input order within a category.
    """
    buckets = {name: [] for name in CATEGORIES}
    for item in eligible_items(items):
        buckets[categorize_item(item)].append(item)

    categorized = [
        Category(category=name, items=matching)
        for name, matching in buckets.items()
        if matching
    ]
    logger.debug(
        "Categorized items: "
        + ", ".join(f"{c.category}={c.count}" for c in categorized)
    )
    return categorized
