"""Persistence of condition state to a single JSON file."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable

from .conditions.base import Condition

# File name inside the context's state directory
STATE_FILE_NAME = "condition_state.json"

# Schema version written to the root of the state file
STATE_VERSION = 1

KEY_VERSION = "version"
KEY_CONDITIONS = "conditions"
KEY_TYPE = "type"
KEY_STATE = "state"

PRIMITIVE_TYPES = (str, int, float, bool)

logger = logging.getLogger(__name__)


class ConditionStore:
    """Reads and writes the persisted (type_id, payload) entries.

    File layout:
        {"version": 1,
         "conditions": [{"type": "DndCondition", "state": {...}}, ...]}

    Every failure is logged and swallowed; callers always get a usable
    (possibly empty) result and in-memory state stays authoritative.
    """

    def __init__(self, state_path: Path | str):
        self.state_path = Path(state_path)

    def load(self) -> list[tuple[str, dict[str, Any]]]:
        """Load persisted entries.

        Returns:
            List of (type_id, payload) in file order. Empty if the file is
            missing, unreadable, or written by an unsupported version.
        """
        if not self.state_path.exists():
            return []

        logger.debug(f"Reading conditions from {self.state_path}")
        try:
            with open(self.state_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError, RecursionError) as e:
            logger.warning(f"Problem reading {self.state_path}: {e}")
            return []

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {self.state_path}: root is not an object")
            return []

        version = data.get(KEY_VERSION, STATE_VERSION)
        if version != STATE_VERSION:
            logger.warning(
                f"Ignoring {self.state_path}: unsupported version {version!r} "
                f"(expected {STATE_VERSION})"
            )
            return []

        raw_entries = data.get(KEY_CONDITIONS, [])
        if not isinstance(raw_entries, list):
            logger.warning(f"Ignoring {self.state_path}: '{KEY_CONDITIONS}' is not a list")
            return []

        entries = []
        for index, raw in enumerate(raw_entries):
            entry = self._parse_entry(raw)
            if entry is None:
                logger.warning(f"Skipping malformed condition entry #{index}: {raw!r}")
                continue
            entries.append(entry)
        return entries

    @staticmethod
    def _parse_entry(raw: Any) -> tuple[str, dict[str, Any]] | None:
        """Validate one entry, returning None if it cannot be used."""
        if not isinstance(raw, dict):
            return None
        type_id = raw.get(KEY_TYPE)
        if not isinstance(type_id, str) or not type_id:
            return None
        payload = raw.get(KEY_STATE, {})
        if not isinstance(payload, dict):
            return None
        if not all(isinstance(value, PRIMITIVE_TYPES) for value in payload.values()):
            return None
        return type_id, dict(payload)

    def save(self, conditions: Iterable[Condition]) -> bool:
        """Rewrite the state file from the given conditions.

        Only conditions whose save_state() returns True are written.

        Returns:
            True if the file was written, False if the write failed
        """
        entries = []
        for condition in conditions:
            payload: dict[str, Any] = {}
            if condition.save_state(payload):
                entries.append({KEY_TYPE: condition.type_id, KEY_STATE: payload})

        data = {KEY_VERSION: STATE_VERSION, KEY_CONDITIONS: entries}
        logger.debug(f"Writing {len(entries)} condition(s) to {self.state_path}")

        temp_path = None
        try:
            self.state_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.state_path.parent,
                prefix=f".{self.state_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                temp_path = Path(f.name)
                json.dump(data, f, indent=2, allow_nan=False)
            os.replace(temp_path, self.state_path)
            temp_path = None
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Problem writing {self.state_path}: {e}")
            return False
        finally:
            if temp_path:
                temp_path.unlink(missing_ok=True)


def get_store(state_dir: Path | str) -> ConditionStore:
    """Get a ConditionStore for the state file inside state_dir."""
    return ConditionStore(Path(state_dir) / STATE_FILE_NAME)
