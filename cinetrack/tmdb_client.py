"""TMDB API client for show and episode metadata."""

import logging
from dataclasses import replace
from typing import Optional

import requests

from cinetrack.models import ContinueWatchingItem

logger = logging.getLogger(__name__)


class TmdbError(Exception):
    """TMDB API error."""

    pass


class TmdbAuthError(TmdbError):
    """Invalid or missing TMDB API key."""

    pass


class TmdbClient:
    """Client for the TMDB v3 REST API."""

    API_URL = "https://api.themoviedb.org/3"

    def __init__(
        self,
        api_key: str,
        language: str = "en-US",
        base_url: Optional[str] = None,
    ):
        """Initialize TMDB client."""
        if not api_key:
            raise ValueError("api_key cannot be empty")
        self.api_key = api_key
        self.language = language
        self.base_url = (base_url or self.API_URL).rstrip("/")

    def _get(self, endpoint: str, timeout: int = 30) -> Optional[dict]:
        """GET an endpoint, returning None for 404."""
        url = f"{self.base_url}{endpoint}"
        params = {"api_key": self.api_key, "language": self.language}

        logger.debug(f"TMDB GET {endpoint}")
        try:
            response = requests.get(url, params=params, timeout=timeout)
        except requests.RequestException as e:
            logger.warning(f"TMDB request failed for {endpoint}: {e}")
            raise TmdbError(f"Cannot connect to TMDB: {e}")

        if response.status_code == 401:
            raise TmdbAuthError("Invalid TMDB API key")
        if response.status_code == 404:
            logger.info(f"TMDB has no data for {endpoint}")
            return None
        if response.status_code != 200:
            logger.warning(f"TMDB returned {response.status_code} for {endpoint}")
            raise TmdbError(f"TMDB error: {response.status_code}")

        return response.json()

    def test_connection(self) -> bool:
        """Test the API key against TMDB.

        Returns True if the key is accepted, False otherwise.
        """
        try:
            response = requests.get(
                f"{self.base_url}/configuration",
                params={"api_key": self.api_key},
                timeout=10,
            )
            return response.status_code == 200
        except requests.RequestException:
            return False

    def get_tv_details(self, tmdb_tv_id: int) -> Optional[dict]:
        """Fetch show details, or None if TMDB doesn't know the show."""
        return self._get(f"/tv/{tmdb_tv_id}")

    def get_episode_details(
        self,
        tmdb_tv_id: int,
        season_number: int,
        episode_number: int,
    ) -> Optional[dict]:
        """Fetch a single episode, or None if it doesn't exist (yet)."""
        return self._get(
            f"/tv/{tmdb_tv_id}/season/{season_number}/episode/{episode_number}"
        )

    def enrich_item(self, item: ContinueWatchingItem) -> ContinueWatchingItem:
        """Return a copy of the item with show and next episode metadata filled in."""
        show = self.get_tv_details(item.tmdb_tv_id)
        if show is None:
            logger.warning(f"Show {item.tmdb_tv_id} not found on TMDB")
            return item

        episode = self.get_episode_details(
            item.tmdb_tv_id,
            item.next_season_number,
            item.next_episode_number,
        ) or {}

        return replace(
            item,
            show_name=show.get("name") or item.show_name,
            show_poster_path=show.get("poster_path"),
            show_overview=show.get("overview"),
            show_status=show.get("status"),
            next_episode_name=episode.get("name"),
            next_episode_air_date=episode.get("air_date"),
            next_episode_runtime=episode.get("runtime"),
        )
