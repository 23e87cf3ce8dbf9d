"""YAML storage for continue watching entries."""

import logging
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

import yaml

from cinetrack.models import ContinueWatchingItem, WatchedEpisode, days_since

logger = logging.getLogger(__name__)

# Fields a user may change on an existing entry
UPDATABLE_FIELDS = (
    "next_season_number",
    "next_episode_number",
    "is_hidden",
    "is_completed",
    "priority_override",
    "notes",
)

# Fields that may be reset to None
CLEARABLE_FIELDS = ("priority_override", "notes")


class StorageError(Exception):
    """Storage error."""

    pass


class DataStore:
    """Manages continue watching entries in YAML format."""

    def __init__(self, data_dir: Optional[Path] = None):
        """Initialize data store."""
        if data_dir is None:
            data_dir = Path.cwd() / "data"
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.items_path = self.data_dir / "continue_watching.yaml"
        self.watches_path = self.data_dir / "episode_watches.yaml"

    def _read(self, path: Path, key: str) -> list:
        if not path.exists():
            return []

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise StorageError(f"Invalid YAML in {path}: {e}") from e

        if not data:
            return []
        if not isinstance(data, dict):
            raise StorageError(f"Invalid data in {path}: expected a mapping")
        if key not in data:
            return []
        if not isinstance(data[key], list):
            raise StorageError(f"Invalid data in {path}: '{key}' must be a list")
        return data[key]

    def _write(self, path: Path, data: dict) -> None:
        with open(path, "w") as f:
            yaml.dump(
                data,
                f,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
                indent=2,
            )

    def save_items(self, items: List[ContinueWatchingItem]) -> None:
        """Save entries to YAML file."""
        data = {
            "sync_metadata": {
                "last_updated": datetime.now().isoformat(),
                "total_items": len(items),
            },
            "items": [item.to_dict() for item in items],
        }
        self._write(self.items_path, data)
        logger.debug(f"Saved {len(items)} items to {self.items_path}")

    def load_items(self, as_of: Optional[date] = None) -> List[ContinueWatchingItem]:
        """Load entries from YAML file.

        When ``as_of`` is given, ``days_since_last_episode`` is recomputed from
        each entry's last watched date. A malformed file raises ``StorageError``.
        """
        records = self._read(self.items_path, "items")

        try:
            items = [ContinueWatchingItem.from_dict(item_data) for item_data in records]
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Invalid entry in {self.items_path}: {e}") from e

        if as_of is not None:
            items = [
                replace(item, days_since_last_episode=days_since(item.last_watched_date, as_of))
                for item in items
            ]
        return items

    def get_item(self, tmdb_tv_id: int) -> ContinueWatchingItem:
        """Get a single entry by TMDB id."""
        for item in self.load_items():
            if item.tmdb_tv_id == tmdb_tv_id:
                return item
        raise StorageError(f"Show {tmdb_tv_id} is not in your continue watching list")

    def upsert_item(self, item: ContinueWatchingItem) -> None:
        """Insert an entry, or replace the one with the same TMDB id."""
        items = self.load_items()
        for index, existing in enumerate(items):
            if existing.tmdb_tv_id == item.tmdb_tv_id:
                items[index] = item
                logger.info(f"Updated show {item.tmdb_tv_id}")
                break
        else:
            items.append(item)
            logger.info(f"Added show {item.tmdb_tv_id}")
        self.save_items(items)

    def update_item(self, tmdb_tv_id: int, **changes) -> ContinueWatchingItem:
        """Apply user overrides to an entry and return the updated entry.

        Passing None for a field in ``CLEARABLE_FIELDS`` resets it.
        """
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise StorageError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        not_clearable = sorted(
            k for k, v in changes.items() if v is None and k not in CLEARABLE_FIELDS
        )
        if not_clearable:
            raise StorageError(f"Cannot clear fields: {', '.join(not_clearable)}")

        items = self.load_items()
        for index, existing in enumerate(items):
            if existing.tmdb_tv_id == tmdb_tv_id:
                updated = replace(existing, **changes)
                items[index] = updated
                self.save_items(items)
                logger.info(f"Updated show {tmdb_tv_id}: {', '.join(sorted(changes))}")
                return updated

        raise StorageError(f"Show {tmdb_tv_id} is not in your continue watching list")

    def hide_item(self, tmdb_tv_id: int) -> ContinueWatchingItem:
        """Hide a show from continue watching."""
        return self.update_item(tmdb_tv_id, is_hidden=True)

    def mark_completed(self, tmdb_tv_id: int) -> ContinueWatchingItem:
        """Mark a show as completed."""
        return self.update_item(tmdb_tv_id, is_completed=True)

    def set_next_episode(
        self,
        tmdb_tv_id: int,
        season: int,
        episode: int,
        notes: Optional[str] = None,
    ) -> ContinueWatchingItem:
        """Override the next episode to watch, keeping existing notes unless given."""
        changes = {"next_season_number": season, "next_episode_number": episode}
        if notes is not None:
            changes["notes"] = notes
        return self.update_item(tmdb_tv_id, **changes)

    def set_priority(self, tmdb_tv_id: int, priority: int) -> ContinueWatchingItem:
        """Set a manual priority between 1 and 10."""
        if priority < 1 or priority > 10:
            raise StorageError("Priority must be between 1 and 10")
        return self.update_item(tmdb_tv_id, priority_override=priority)

    def remove_item(self, tmdb_tv_id: int) -> None:
        """Remove a show from continue watching."""
        items = self.load_items()
        remaining = [item for item in items if item.tmdb_tv_id != tmdb_tv_id]
        if len(remaining) == len(items):
            raise StorageError(f"Show {tmdb_tv_id} is not in your continue watching list")
        self.save_items(remaining)
        logger.info(f"Removed show {tmdb_tv_id}")

    def clear_overrides(self, tmdb_tv_id: int) -> ContinueWatchingItem:
        """Drop the manual priority and notes from an entry."""
        return self.update_item(tmdb_tv_id, priority_override=None, notes=None)

    def load_watches(self) -> List[WatchedEpisode]:
        """Load the episode watch log."""
        records = self._read(self.watches_path, "watches")
        try:
            return [WatchedEpisode.from_dict(record) for record in records]
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Invalid entry in {self.watches_path}: {e}") from e

    def record_watch(self, watch: WatchedEpisode) -> Optional[ContinueWatchingItem]:
        """Append an episode to the watch log.

        If the show is tracked, its episode count and last watched date are
        bumped, and the next episode moves past the one watched. Returns the
        updated entry, or None for an untracked show.
        """
        watches = self.load_watches()
        watches.append(watch)
        self._write(self.watches_path, {"watches": [w.to_dict() for w in watches]})
        logger.info(
            f"Logged S{watch.season_number}E{watch.episode_number} of show {watch.tmdb_tv_id}"
        )

        items = self.load_items()
        for index, existing in enumerate(items):
            if existing.tmdb_tv_id != watch.tmdb_tv_id:
                continue

            changes = {
                "total_episodes_watched": existing.total_episodes_watched + 1,
                "last_watched_date": max(existing.last_watched_date, watch.watched_at.date()),
            }
            watched = (watch.season_number, watch.episode_number)
            if watched >= (existing.next_season_number, existing.next_episode_number):
                changes["next_season_number"] = watch.season_number
                changes["next_episode_number"] = watch.episode_number + 1
            changes["days_since_last_episode"] = days_since(changes["last_watched_date"])

            updated = replace(existing, **changes)
            items[index] = updated
            self.save_items(items)
            return updated

        return None
