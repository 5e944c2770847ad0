"""
Per-project configuration overrides.

projects.json maps a project directory to a partial config:

    {
        "/home/me/work/api": {"playlistUrl": "https://...", "volume": 40},
        "/home/me/play/": {"delay": 3}
    }
"""

import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from music_on_done.common.logging import get_logger
from music_on_done.core.errors import ConfigError
from .settings import Config, DEFAULT_PROJECTS_FILE

logger = get_logger(__name__)

# JSON key -> Config field
OVERRIDE_FIELDS = {
    "playlistUrl": "playlist_url",
    "minDuration": "min_duration",
    "maxDuration": "max_duration",
    "cacheTtlMinutes": "cache_ttl_minutes",
    "volume": "volume",
    "delay": "delay",
}


def read_projects_config(
    config_path: Union[str, Path] = DEFAULT_PROJECTS_FILE,
) -> Optional[Dict[str, Dict[str, Any]]]:
    """Read the override table. Returns None if missing, unreadable or not a JSON object."""
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.debug("Ignoring unreadable projects config", data={
            "path": str(config_path), "error": str(e),
        })
        return None

    if not isinstance(data, dict):
        return None
    return data


def normalize_project_path(path: str) -> str:
    """Strip a single trailing slash, except for the root '/'."""
    if len(path) > 1 and path.endswith("/"):
        return path[:-1]
    return path


def get_project_overrides(
    projects_config: Dict[str, Any],
    project_dir: str,
) -> Optional[Dict[str, Any]]:
    """
    Find the overrides for project_dir.

    Keys and project_dir are compared after normalize_project_path(), so
    "/a/b" matches "/a/b/" but never "/a/bc".
    """
    wanted = normalize_project_path(project_dir)

    for key, overrides in projects_config.items():
        if normalize_project_path(key) == wanted:
            return overrides if isinstance(overrides, dict) else None

    return None


def _coerce_override(key: str, value: Any) -> Any:
    if key == "playlistUrl":
        if not isinstance(value, str):
            raise ConfigError(f"Per-project {key} must be a string", data={"value": value})
        return value.strip()
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"Per-project {key} must be a number", data={"value": value})
    if key == "delay":
        return float(value)
    return int(value)


def merge_project_config(base: Config, overrides: Dict[str, Any]) -> Config:
    """
    Merge overrides into base, field by field.

    Only keys present (and not null) in overrides replace base values. Volume
    is clamped to 0-100 afterwards.

    Raises:
        ConfigError: merged min duration is greater than max duration, or an
            override has the wrong type
    """
    changes = {}
    for key, field_name in OVERRIDE_FIELDS.items():
        if overrides.get(key) is not None:
            changes[field_name] = _coerce_override(key, overrides[key])

    merged = replace(base, **changes)
    merged = replace(merged, volume=max(0, min(merged.volume, 100)), delay=max(0, merged.delay))

    if merged.min_duration > merged.max_duration:
        raise ConfigError(
            f"Per-project minDuration ({merged.min_duration}) must be <= "
            f"maxDuration ({merged.max_duration})",
            data={"min_duration": merged.min_duration, "max_duration": merged.max_duration},
        )

    return merged


def resolve_effective_config(
    base: Config,
    project_dir: Optional[str],
    config_path: Union[str, Path] = DEFAULT_PROJECTS_FILE,
) -> Config:
    """
    Apply the override entry for project_dir, if any.

    Returns base unchanged when there is no project dir, no readable
    override table, or no matching entry.
    """
    if not project_dir:
        return base

    projects_config = read_projects_config(config_path)
    if not projects_config:
        return base

    overrides = get_project_overrides(projects_config, project_dir)
    if overrides is None:
        return base

    logger.debug("Applying project overrides", data={
        "project_dir": project_dir, "keys": sorted(overrides),
    })
    return merge_project_config(base, overrides)
