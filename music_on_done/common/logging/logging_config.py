"""Centralized logging configuration management."""

import os
import yaml
from pathlib import Path
from typing import Dict, Optional


DEFAULT_CONFIG_PATH = Path.home() / ".config" / "music-on-done" / "logging-config.yaml"


class LoggingConfig:
    """Logging levels and format per component."""

    _instance: Optional['LoggingConfig'] = None

    def __init__(self, config_path: Optional[str] = None):
        """Initialize logging configuration.

        Args:
            config_path: Path to logging-config.yaml
                (default: LOG_CONFIG_FILE or ~/.config/music-on-done/logging-config.yaml)
        """
        if config_path is None:
            config_path = os.getenv("LOG_CONFIG_FILE") or str(DEFAULT_CONFIG_PATH)

        self._config: Dict = {}
        if Path(config_path).exists():
            try:
                with open(config_path) as f:
                    self._config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError):
                # A broken logging file must not stop the notification
                self._config = {}

        self._config.setdefault('default_level', 'WARNING')
        self._config.setdefault('components', {})
        self._config.setdefault('modules', {})

    @classmethod
    def get_instance(cls) -> 'LoggingConfig':
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def get_level(self, component: str = 'default') -> str:
        """Get log level for a component.

        Args:
            component: Component name (cli, cancel, ...)

        Returns:
            Log level string (DEBUG, INFO, WARNING, ERROR)
        """
        env_var = f"LOG_LEVEL_{component.upper().replace('-', '_')}"
        if env_level := os.getenv(env_var):
            return env_level.upper()

        if env_level := os.getenv('LOG_LEVEL'):
            return env_level.upper()

        comp_cfg = self._config['components'].get(component)
        if isinstance(comp_cfg, dict) and 'level' in comp_cfg:
            return comp_cfg['level'].upper()
        elif isinstance(comp_cfg, str):
            return comp_cfg.upper()

        return str(self._config['default_level']).upper()

    def get_json_format(self, component: str = 'default') -> bool:
        """Get JSON format flag for a component."""
        env_var = f"LOG_JSON_FORMAT_{component.upper().replace('-', '_')}"
        if env_json := os.getenv(env_var):
            return env_json.lower() in ('true', '1', 'yes')

        if env_json := os.getenv('LOG_JSON_FORMAT'):
            return env_json.lower() in ('true', '1', 'yes')

        comp_cfg = self._config['components'].get(component)
        if isinstance(comp_cfg, dict):
            return bool(comp_cfg.get('json_format', False))

        return False

    def get_module_level(self, module_name: str) -> Optional[str]:
        """Get log level for a specific Python module, or None if not configured."""
        modules_cfg = self._config['modules']
        if module_name in modules_cfg:
            return str(modules_cfg[module_name]).upper()
        return None

    @property
    def module_levels(self) -> Dict[str, str]:
        return {name: str(level).upper() for name, level in self._config['modules'].items()}


def get_logging_config() -> LoggingConfig:
    """Get singleton logging configuration instance."""
    return LoggingConfig.get_instance()
