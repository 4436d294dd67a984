"""Shared test fixtures for dashboard_conditions tests."""

import json
import sys
from pathlib import Path
from typing import Any

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from dashboard_conditions.conditions import ConditionContext
from dashboard_conditions.manager import ConditionManager


@pytest.fixture(autouse=True)
def reset_manager_instance():
    """Make sure no test leaks the process-wide manager."""
    ConditionManager.reset_instance()
    yield
    ConditionManager.reset_instance()


@pytest.fixture
def state_dir(tmp_path):
    """Create a temporary state directory."""
    path = tmp_path / "state"
    path.mkdir()
    return path


@pytest.fixture
def state_file(state_dir):
    """Path of the condition state file (not created)."""
    return state_dir / "condition_state.json"


@pytest.fixture
def context(state_dir):
    """Context with every setting off."""
    return ConditionContext(state_dir=state_dir, settings={})


@pytest.fixture
def manager(context):
    """A freshly constructed manager on an empty state directory."""
    return ConditionManager(context)


@pytest.fixture
def temp_config_file(tmp_path):
    """Create an empty config file."""
    path = tmp_path / "config.yaml"
    path.write_text("")
    return path


class RecordingListener:
    """Listener that records each callback, optionally running a hook."""

    def __init__(self, name: str = "", log: list | None = None, hook=None):
        self.name = name
        self.calls = 0
        self.log = log if log is not None else []
        self.hook = hook

    def on_conditions_changed(self) -> None:
        self.calls += 1
        self.log.append(self.name)
        if self.hook:
            self.hook()


@pytest.fixture
def listener():
    return RecordingListener("listener")


def write_state_file(path: Path, entries: list[dict[str, Any]], version: Any = 1) -> None:
    """Helper to write a condition state file for tests."""
    data: dict[str, Any] = {"conditions": entries}
    if version is not None:
        data["version"] = version
    path.write_text(json.dumps(data))


def read_state_file(path: Path) -> dict[str, Any]:
    return json.loads(path.read_text())
