"""
Configuration Loader - Load and merge configuration from multiple sources.

Configuration precedence (low → high):
1. ~/.permflow/config.json (global defaults)
2. .permflow/config.json (project config)
3. Environment variables (PERMFLOW_*)

Supports:
- JSON configuration files
- Deep merging of nested configs
- Relative paths resolved against the project root
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ..logger import get_logger
from ..permission.errors import ConfigError

DEFAULT_RETRY_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY_MS = 1000
DEFAULT_OBSERVE_INTERVAL_S = 1.0


@dataclass
class PermflowConfig:
    """Parsed permflow configuration.

    Attributes:
        history_path: JSON file for request history (in-memory if None)
        retry_max_attempts: Extra attempts after a plain denial
        retry_delay_ms: Pause between retry attempts
        observe_interval_s: Polling interval when observing a permission
        capability_profile: YAML capability profile to load
        log_level: Logging level
        log_directory: Directory for log files
    """
    history_path: Optional[str] = None
    retry_max_attempts: int = DEFAULT_RETRY_MAX_ATTEMPTS
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS
    observe_interval_s: float = DEFAULT_OBSERVE_INTERVAL_S
    capability_profile: Optional[str] = None
    log_level: str = "INFO"
    log_directory: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "history_path": self.history_path,
            "retry_max_attempts": self.retry_max_attempts,
            "retry_delay_ms": self.retry_delay_ms,
            "observe_interval_s": self.observe_interval_s,
            "capability_profile": self.capability_profile,
            "log_level": self.log_level,
            "log_directory": self.log_directory,
        }


class ConfigLoader:
    """Load configuration from multiple sources with precedence.

    Example:
        loader = ConfigLoader(project_root="/path/to/app")
        config = loader.load()
        print(config.retry_max_attempts)  # 3
    """

    COMPONENT = "ConfigLoader"

    ENV_MAPPINGS = {
        "PERMFLOW_HISTORY_PATH": "history_path",
        "PERMFLOW_RETRY_MAX_ATTEMPTS": "retry_max_attempts",
        "PERMFLOW_RETRY_DELAY_MS": "retry_delay_ms",
        "PERMFLOW_OBSERVE_INTERVAL_S": "observe_interval_s",
        "PERMFLOW_CAPABILITY_PROFILE": "capability_profile",
        "PERMFLOW_LOG_LEVEL": "log_level",
        "PERMFLOW_LOG_DIRECTORY": "log_directory",
    }

    PATH_KEYS = ("history_path", "capability_profile", "log_directory")

    def __init__(
        self,
        project_root: Optional[str] = None,
        home_dir: Optional[str] = None,
    ):
        """Initialize the config loader.

        Args:
            project_root: Project root directory (default: current working dir)
            home_dir: Home directory (default: user's home)
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.home_dir = Path(home_dir) if home_dir else Path.home()

        self.global_config_path = self.home_dir / ".permflow" / "config.json"
        self.project_config_path = self.project_root / ".permflow" / "config.json"

        self._logger = get_logger()

    def load(self) -> PermflowConfig:
        """Load and merge configuration from all sources.

        Returns:
            Merged PermflowConfig object

        Raises:
            ConfigError: If a numeric setting is not a valid number
        """
        config_dict: Dict[str, Any] = {}

        # 1. Global config (lowest priority)
        if self.global_config_path.exists():
            config_dict = self._deep_merge(config_dict, self._load_json(self.global_config_path))

        # 2. Project config
        if self.project_config_path.exists():
            config_dict = self._deep_merge(config_dict, self._load_json(self.project_config_path))

        # 3. Environment variables
        config_dict = self._apply_env_vars(config_dict)

        return PermflowConfig(
            history_path=self._resolve_path(config_dict.get("history_path")),
            retry_max_attempts=self._coerce(
                config_dict, "retry_max_attempts", int, DEFAULT_RETRY_MAX_ATTEMPTS
            ),
            retry_delay_ms=self._coerce(config_dict, "retry_delay_ms", int, DEFAULT_RETRY_DELAY_MS),
            observe_interval_s=self._coerce(
                config_dict, "observe_interval_s", float, DEFAULT_OBSERVE_INTERVAL_S
            ),
            capability_profile=self._resolve_path(config_dict.get("capability_profile")),
            log_level=str(config_dict.get("log_level", "INFO")).upper(),
            log_directory=self._resolve_path(config_dict.get("log_directory")),
        )

    def _load_json(self, path: Path) -> Dict[str, Any]:
        """Load a JSON configuration file.

        Args:
            path: Path to JSON file

        Returns:
            Parsed JSON as dict, or empty dict on error
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (ValueError, OSError) as e:
            self._logger.warn(self.COMPONENT, "config_unreadable", {"path": str(path), "error": e})
            return {}

        if not isinstance(data, dict):
            self._logger.warn(self.COMPONENT, "config_not_an_object", {"path": str(path)})
            return {}
        return data

    def _deep_merge(
        self,
        base: Dict[str, Any],
        override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Deep merge two dictionaries.

        Values from override take precedence. Nested dicts are merged recursively.
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides.

        Examples:
            PERMFLOW_HISTORY_PATH -> config["history_path"]
            PERMFLOW_RETRY_DELAY_MS -> config["retry_delay_ms"]
        """
        for env_var, config_key in self.ENV_MAPPINGS.items():
            value = os.environ.get(env_var)
            if value is not None:
                config[config_key] = value
        return config

    def _coerce(self, config: Dict[str, Any], key: str, kind: Callable[[Any], Any], default: Any) -> Any:
        value = config.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            raise ConfigError(f"'{key}' must be a number, got {value!r}")
        try:
            result = kind(value)
        except (TypeError, ValueError):
            raise ConfigError(f"'{key}' must be a number, got {value!r}") from None
        if result < 0:
            raise ConfigError(f"'{key}' must not be negative, got {value!r}")
        return result

    def _resolve_path(self, value: Optional[str]) -> Optional[str]:
        """Resolve a relative path from the project root."""
        if not value:
            return None
        path = Path(os.path.expanduser(str(value)))
        if not path.is_absolute():
            path = self.project_root / path
        return str(path)


def load_config(project_root: Optional[str] = None) -> PermflowConfig:
    """Convenience function to load configuration.

    Args:
        project_root: Optional project root directory

    Returns:
        Loaded PermflowConfig
    """
    loader = ConfigLoader(project_root=project_root)
    return loader.load()
