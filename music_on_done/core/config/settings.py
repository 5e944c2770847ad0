"""
Settings - Application configuration using dataclasses.

Environment variables:
- YOUTUBE_PLAYLIST_URL: playlist to pick clips from
- MUSIC_ON_DONE_MIN_DURATION / MUSIC_ON_DONE_MAX_DURATION: clip length bounds (seconds)
- MUSIC_ON_DONE_CACHE_TTL: playlist cache TTL (minutes)
- MUSIC_ON_DONE_VOLUME: playback volume, capped at 100
- MUSIC_ON_DONE_DELAY: seconds to wait before playing (0 = play now)
- MUSIC_ON_DONE_CACHE_DIR: cache directory
- MUSIC_ON_DONE_PID_FILE: pending-invocation marker file
- MUSIC_ON_DONE_PROJECTS_FILE: per-project override table
- CLAUDE_PROJECT_DIR: current project, used to look up overrides
- LOG_LEVEL, LOG_JSON_FORMAT, LOG_FILE: logging
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from music_on_done.core.errors import ConfigError

DEFAULT_MIN_DURATION = 5
DEFAULT_MAX_DURATION = 10
DEFAULT_CACHE_TTL_MINUTES = 60
DEFAULT_VOLUME = 75
DEFAULT_DELAY = 0

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "music-on-done"
DEFAULT_PROJECTS_FILE = Path.home() / ".config" / "music-on-done" / "projects.json"


@dataclass(frozen=True)
class Config:
    """Effective per-invocation configuration. Immutable once validated."""
    playlist_url: str
    min_duration: int = DEFAULT_MIN_DURATION
    max_duration: int = DEFAULT_MAX_DURATION
    cache_ttl_minutes: int = DEFAULT_CACHE_TTL_MINUTES
    volume: int = DEFAULT_VOLUME
    delay: float = DEFAULT_DELAY  # seconds


@dataclass
class Settings:
    """Process-level settings from environment: locations and logging."""

    cache_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("MUSIC_ON_DONE_CACHE_DIR", str(DEFAULT_CACHE_DIR))
        ).expanduser()
    )
    pid_file: Optional[Path] = field(
        default_factory=lambda: (
            Path(os.environ["MUSIC_ON_DONE_PID_FILE"]).expanduser()
            if os.getenv("MUSIC_ON_DONE_PID_FILE") else None
        )
    )
    projects_file: Path = field(
        default_factory=lambda: Path(
            os.getenv("MUSIC_ON_DONE_PROJECTS_FILE", str(DEFAULT_PROJECTS_FILE))
        ).expanduser()
    )
    project_dir: Optional[str] = field(
        default_factory=lambda: os.getenv("CLAUDE_PROJECT_DIR") or None
    )

    # Logging
    log_level: Optional[str] = field(
        default_factory=lambda: os.getenv("LOG_LEVEL")
    )
    log_file: Optional[str] = field(
        default_factory=lambda: os.getenv("LOG_FILE")
    )

    @property
    def pid_file_path(self) -> Path:
        return self.pid_file or self.cache_dir / "pending.pid"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def parse_positive_int(value: Optional[str], default: int) -> int:
    """Parse an env var as a positive integer, falling back to default if unset or invalid."""
    if value is None or value.strip() == "":
        return default
    try:
        parsed = int(value.strip(), 10)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def parse_non_negative_int(value: Optional[str], default: int) -> int:
    """Like parse_positive_int, but 0 is accepted."""
    if value is None or value.strip() == "":
        return default
    try:
        parsed = int(value.strip(), 10)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """
    Build the base configuration from environment variables.

    The playlist URL may be empty here: a per-project override can still
    supply it. Call validate_config() once all merging is done.

    Raises:
        ConfigError: min duration is greater than max duration
    """
    env = os.environ if environ is None else environ

    min_duration = parse_positive_int(env.get("MUSIC_ON_DONE_MIN_DURATION"), DEFAULT_MIN_DURATION)
    max_duration = parse_positive_int(env.get("MUSIC_ON_DONE_MAX_DURATION"), DEFAULT_MAX_DURATION)

    if min_duration > max_duration:
        raise ConfigError(
            f"MUSIC_ON_DONE_MIN_DURATION ({min_duration}) must be <= "
            f"MUSIC_ON_DONE_MAX_DURATION ({max_duration})",
            data={"min_duration": min_duration, "max_duration": max_duration},
        )

    return Config(
        playlist_url=env.get("YOUTUBE_PLAYLIST_URL", "").strip(),
        min_duration=min_duration,
        max_duration=max_duration,
        cache_ttl_minutes=parse_positive_int(env.get("MUSIC_ON_DONE_CACHE_TTL"), DEFAULT_CACHE_TTL_MINUTES),
        volume=min(parse_positive_int(env.get("MUSIC_ON_DONE_VOLUME"), DEFAULT_VOLUME), 100),
        delay=parse_non_negative_int(env.get("MUSIC_ON_DONE_DELAY"), DEFAULT_DELAY),
    )


def validate_config(config: Config) -> None:
    """
    Check the final (merged) config is usable.

    Raises:
        ConfigError: no playlist URL configured
    """
    if not config.playlist_url:
        raise ConfigError(
            "No playlist URL configured. Set YOUTUBE_PLAYLIST_URL in your environment "
            f"or add an entry in {DEFAULT_PROJECTS_FILE}"
        )
