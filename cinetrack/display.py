"""Display metadata for watching patterns, urgency levels and recommendation strengths."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class DisplayConfig:
    """Label, icon, description and rich style for an enum value."""

    label: str
    icon: str
    description: str
    color: str


WATCHING_PATTERN_CONFIG: Mapping[str, DisplayConfig] = MappingProxyType({
    "binge_watching": DisplayConfig(
        label="Binge Watching",
        icon="🍿",
        description="Watching multiple episodes regularly",
        color="bold red",
    ),
    "regular_watching": DisplayConfig(
        label="Regular Viewing",
        icon="📺",
        description="Consistent weekly viewing",
        color="blue",
    ),
    "casual_watching": DisplayConfig(
        label="Casual Viewing",
        icon="🎭",
        description="Occasional episode watching",
        color="green",
    ),
    "inactive": DisplayConfig(
        label="Inactive",
        icon="⏸️",
        description="Not currently watching",
        color="dim",
    ),
})

URGENCY_LEVEL_CONFIG: Mapping[str, DisplayConfig] = MappingProxyType({
    "fresh": DisplayConfig(
        label="Fresh",
        icon="🔥",
        description="Recently watched, momentum is high",
        color="green",
    ),
    "recent": DisplayConfig(
        label="Recent",
        icon="🕒",
        description="Good time to continue",
        color="yellow",
    ),
    "old": DisplayConfig(
        label="Getting Old",
        icon="⏰",
        description="Been a while since last episode",
        color="dark_orange",
    ),
    "stale": DisplayConfig(
        label="Stale",
        icon="❄️",
        description="Might need a recap before continuing",
        color="dim",
    ),
})

RECOMMENDATION_STRENGTH_CONFIG: Mapping[str, DisplayConfig] = MappingProxyType({
    "high": DisplayConfig(
        label="Highly Recommended",
        icon="⭐",
        description="Perfect time to continue this show",
        color="magenta",
    ),
    "medium": DisplayConfig(
        label="Good Choice",
        icon="👍",
        description="Good option for your next watch",
        color="blue",
    ),
    "low": DisplayConfig(
        label="Consider Later",
        icon="💭",
        description="Might want to catch up on other shows first",
        color="dim",
    ),
})

# Section headings for the categorized listing
CATEGORY_CONFIG: Mapping[str, DisplayConfig] = MappingProxyType({
    "up_next": DisplayConfig(
        label="Up Next",
        icon="▶️",
        description="Pick up where you left off",
        color="bold green",
    ),
    "binge_worthy": DisplayConfig(
        label="Binge Worthy",
        icon="🍿",
        description="Shows you can't stop watching",
        color="bold red",
    ),
    "almost_done": DisplayConfig(
        label="Almost Done",
        icon="🏁",
        description="Well into the series, see how it ends",
        color="bold magenta",
    ),
    "recently_started": DisplayConfig(
        label="Recently Started",
        icon="🌱",
        description="New shows you just began",
        color="bold cyan",
    ),
    "taking_break": DisplayConfig(
        label="Taking a Break",
        icon="☕",
        description="Been a while, but not forgotten",
        color="bold yellow",
    ),
    "seasonal_returns": DisplayConfig(
        label="Seasonal Returns",
        icon="❄️",
        description="Worth revisiting when you have time",
        color="dim",
    ),
})


def _lookup(table: Mapping[str, DisplayConfig], key: str, kind: str) -> DisplayConfig:
    try:
        return table[key]
    except KeyError:
        raise ValueError(
            f"Unknown {kind}: {key!r} (expected one of {', '.join(table)})"
        ) from None


def get_watching_pattern_config(pattern: str) -> DisplayConfig:
    return _lookup(WATCHING_PATTERN_CONFIG, pattern, "watching pattern")


def get_urgency_level_config(level: str) -> DisplayConfig:
    return _lookup(URGENCY_LEVEL_CONFIG, level, "urgency level")


def get_recommendation_strength_config(strength: str) -> DisplayConfig:
    return _lookup(RECOMMENDATION_STRENGTH_CONFIG, strength, "recommendation strength")


def get_category_config(category: str) -> DisplayConfig:
    return _lookup(CATEGORY_CONFIG, category, "category")
