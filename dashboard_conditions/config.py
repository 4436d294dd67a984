"""Configuration loading and management for dashboard_conditions."""

import copy
import os
import yaml
from pathlib import Path
from typing import Any

from .conditions import ConditionContext

# Default configuration location
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"

# Default configuration values
DEFAULT_CONFIG = {
    "state": {
        "dir": "~/.dashboard_conditions",
    },
    "daemon": {
        "refresh_interval": 60,
        "log_dir": "~/.dashboard_conditions/logs",
    },
    "server": {
        "host": "127.0.0.1",
        "port": 8080,
        "auth_token": "",
    },
    # Snapshot of the system settings the catalog conditions inspect
    "system": {
        "airplane_mode": False,
        "hotspot_enabled": False,
        "zen_mode": "off",
        "power_save_mode": False,
        "has_cellular": True,
        "mobile_data_enabled": True,
        "restrict_background_data": False,
        "has_work_profile": False,
        "work_profile_paused": False,
    },
}


class Config:
    """Configuration manager for dashboard_conditions."""

    def __init__(self, config_path: Path | str | None = None):
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config: dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Load configuration from file, merging with defaults."""
        self._config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_path.exists():
            with open(self.config_path, "r") as f:
                user_config = yaml.safe_load(f) or {}
            self._deep_merge(self._config, user_config)

        # Expand paths
        for key in ("state.dir", "daemon.log_dir"):
            self.set(key, os.path.expanduser(self.get(key, "")))

    def _deep_merge(self, base: dict, override: dict) -> None:
        """Deep merge override into base dict."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def save(self) -> None:
        """Save current configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w") as f:
            yaml.dump(self._config, f, default_flow_style=False, sort_keys=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-separated key path."""
        keys = key.split(".")
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key path."""
        keys = key.split(".")
        config = self._config
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value

    @property
    def state_dir(self) -> Path:
        """Get the directory holding the condition state file."""
        return Path(self.get("state.dir", ""))

    @property
    def log_dir(self) -> Path:
        return Path(self.get("daemon.log_dir", ""))

    @property
    def refresh_interval(self) -> int:
        return int(self.get("daemon.refresh_interval", 60))

    @property
    def server_settings(self) -> dict[str, Any]:
        return self.get("server", {})

    @property
    def system_settings(self) -> dict[str, Any]:
        """Get the current system settings snapshot."""
        return self.get("system", {})

    def condition_context(self) -> ConditionContext:
        """Build the ConditionContext for a ConditionManager."""
        return ConditionContext(
            state_dir=self.state_dir,
            settings=dict(self.system_settings),
            full_config=self._config,
        )


def get_config(config_path: Path | str | None = None) -> Config:
    """Get a Config instance."""
    return Config(config_path)
