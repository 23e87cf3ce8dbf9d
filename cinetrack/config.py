"""Configuration management for cinetrack."""

import logging
import os
import stat
from pathlib import Path
from typing import Optional

import yaml

from cinetrack.formatting import DEFAULT_EPISODE_LENGTH
from cinetrack.recommendations import MAX_RECOMMENDATIONS

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Configuration error."""

    pass


class Config:
    """Manages cinetrack configuration."""

    def __init__(self, data_dir: Optional[Path] = None):
        """Initialize config with data directory."""
        if data_dir is None:
            data_dir = Path.cwd() / "data"
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self.config_path = self.data_dir / "config.yaml"
        self.items_path = self.data_dir / "continue_watching.yaml"
        self.log_path = self.data_dir / "cinetrack.log"

        # TMDB credentials
        self.tmdb_api_key: Optional[str] = None
        self.tmdb_language: str = "en-US"

        # Display settings
        self.episode_length: int = DEFAULT_EPISODE_LENGTH
        self.recommendation_limit: int = MAX_RECOMMENDATIONS

        self.log_level: str = "WARNING"

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    @property
    def tmdb_configured(self) -> bool:
        return bool(self.tmdb_api_key)

    def set_tmdb_credentials(self, api_key: str, language: str = "en-US") -> None:
        """Set TMDB API key and preferred language."""
        if not api_key:
            raise ConfigError("TMDB API key must not be empty")
        self.tmdb_api_key = api_key
        self.tmdb_language = language

    def set_episode_length(self, minutes: int) -> None:
        """Set the assumed episode length used for time estimates."""
        if minutes <= 0:
            raise ConfigError(f"Invalid episode length: {minutes}")
        self.episode_length = minutes

    def set_recommendation_limit(self, limit: int) -> None:
        """Set how many recommendations to show."""
        if limit < 1:
            raise ConfigError(f"Invalid recommendation limit: {limit}")
        self.recommendation_limit = limit

    def set_log_level(self, level: str) -> None:
        """Set log level for the log file."""
        level = level.upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"Invalid log level: {level}")
        self.log_level = level

    def save(self) -> None:
        """Save configuration to YAML file."""
        data = {
            "tmdb": {
                "api_key": self.tmdb_api_key,
                "language": self.tmdb_language,
            },
            "display": {
                "episode_length": self.episode_length,
                "recommendation_limit": self.recommendation_limit,
            },
            "logging": {
                "level": self.log_level,
            },
        }

        with open(self.config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)

        # API key lives here, keep it owner read/write only
        if os.name != "nt":
            os.chmod(self.config_path, stat.S_IRUSR | stat.S_IWUSR)

        logger.info(f"Saved configuration to {self.config_path}")

    def load(self) -> None:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise ConfigError(
                f"Config file not found: {self.config_path}\n"
                "Run 'cinetrack setup' to configure."
            )

        try:
            with open(self.config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        tmdb = data.get("tmdb") or {}
        self.tmdb_api_key = tmdb.get("api_key")
        self.tmdb_language = tmdb.get("language", "en-US")

        display = data.get("display") or {}
        self.set_episode_length(display.get("episode_length", DEFAULT_EPISODE_LENGTH))
        self.set_recommendation_limit(
            display.get("recommendation_limit", MAX_RECOMMENDATIONS)
        )

        log_settings = data.get("logging") or {}
        self.set_log_level(log_settings.get("level", "WARNING"))
