"""Context object shared by the condition manager and its conditions."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Default directory for the condition state file
DEFAULT_STATE_DIR = Path("~/.dashboard_conditions").expanduser()


@dataclass
class ConditionContext:
    """Host-provided context for the condition manager.

    This provides conditions with access to:
    - The directory holding the persisted condition state
    - The live system settings snapshot the conditions inspect
    - Full config for advanced use cases
    """

    # Directory holding condition_state.json
    state_dir: Path = DEFAULT_STATE_DIR

    # Current system settings (e.g. {"airplane_mode": True})
    settings: dict[str, Any] = field(default_factory=dict)

    # Full config for advanced conditions
    full_config: dict[str, Any] = field(default_factory=dict)

    def get_setting(self, path: str, default: Any = None) -> Any:
        """Look up a setting such as "zen_mode" or "radio.cellular"; default if absent."""
        value = self.settings
        for key in path.split("."):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value
