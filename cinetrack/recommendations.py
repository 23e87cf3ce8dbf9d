"""Pick the shows most worth watching next."""

import logging
import math
from typing import List, Sequence

from cinetrack.eligibility import MAX_DAYS_SINCE_LAST_EPISODE, eligible_items
from cinetrack.formatting import DEFAULT_EPISODE_LENGTH, calculate_time_to_finish_season
from cinetrack.models import ContinueWatchingItem, Recommendation

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 3

CATCH_UP_MIN_DAYS = 14
FINISHING_TOUCH_MIN_EPISODES = 20
FINISHING_TOUCH_MAX_DAYS = 7

URGENCY_SCORES = {
    "continue_binge": 9,
    "finishing_touch": 8,
    "catch_up": 7,
    "new_season": 6,
}


def recommend_item(
    item: ContinueWatchingItem,
    episode_length: int = DEFAULT_EPISODE_LENGTH,
) -> Recommendation:
    """Build the recommendation for a single item.

    Rules are checked in order and the first match wins:
    binge watching, then catch up, then finishing touch. Anything else is a
    plain "keep going" suggestion.
    """
    days = item.days_since_last_episode

    if item.watching_pattern == "binge_watching":
        recommendation_type = "continue_binge"
        reasoning = "You've been binge watching this show! Keep the momentum going."
    elif CATCH_UP_MIN_DAYS <= days <= MAX_DAYS_SINCE_LAST_EPISODE:
        recommendation_type = "catch_up"
        reasoning = (
            f"It's been {math.floor(days)} days since your last episode. "
            "Time to catch up!"
        )
    elif (
        item.total_episodes_watched >= FINISHING_TOUCH_MIN_EPISODES
        and days <= FINISHING_TOUCH_MAX_DAYS
    ):
        recommendation_type = "finishing_touch"
        reasoning = "You've invested a lot of time in this show. See how it ends!"
    else:
        recommendation_type = "new_season"
        reasoning = "Perfect time to continue your journey with this show."

    return Recommendation(
        item=item,
        recommendation_type=recommendation_type,
        reasoning=reasoning,
        urgency_score=URGENCY_SCORES[recommendation_type],
        time_commitment=calculate_time_to_finish_season(
            1, item.next_episode_runtime or episode_length
        ),
    )


def generate_watching_recommendations(
    items: Sequence[ContinueWatchingItem],
    limit: int = MAX_RECOMMENDATIONS,
    episode_length: int = DEFAULT_EPISODE_LENGTH,
) -> List[Recommendation]:
    """Return up to ``limit`` recommendations, most urgent first.

    Ties keep input order. Fewer eligible items means fewer recommendations.
    """
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")

    recommendations = [
        recommend_item(item, episode_length=episode_length)
        for item in eligible_items(items)
    ]
    # sorted() is stable, so equal scores stay in input order
    recommendations = sorted(recommendations, key=lambda r: r.urgency_score, reverse=True)

    logger.debug(f"Generated {len(recommendations)} recommendations, keeping {limit}")
    return recommendations[:limit]
