"""
Config - Application configuration.

- settings.py: environment settings and the per-invocation Config
- projects.py: per-project overrides from projects.json
"""

from .settings import (
    Config,
    Settings,
    get_settings,
    load_config,
    validate_config,
    parse_positive_int,
    parse_non_negative_int,
)
from .projects import (
    read_projects_config,
    normalize_project_path,
    get_project_overrides,
    merge_project_config,
    resolve_effective_config,
)

__all__ = [
    # Settings
    "Config",
    "Settings",
    "get_settings",
    "load_config",
    "validate_config",
    "parse_positive_int",
    "parse_non_negative_int",
    # Projects
    "read_projects_config",
    "normalize_project_path",
    "get_project_overrides",
    "merge_project_config",
    "resolve_effective_config",
]
