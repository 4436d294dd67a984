"""Base protocol and shared behaviour for dashboard conditions."""

import logging
import math
import time
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..manager import ConditionManager

logger = logging.getLogger(__name__)

KEY_SILENCED = "silenced"
KEY_ACTIVE = "active"
KEY_LAST_CHANGE = "last_change"


def _read_flag(payload: dict[str, Any], key: str) -> bool:
    # Anything but a real bool (e.g. the string "false") reads as unset
    value = payload.get(key, False)
    return value if isinstance(value, bool) else False


class Condition(Protocol):
    """Protocol for all conditions held by the ConditionManager.

    Any class implementing this protocol can live in the manager.
    The payload passed to save_state/restore_state is a flat dict of
    str, int, float or bool values.
    """

    type_id: str

    def refresh_state(self) -> None:
        """Re-evaluate the system state this condition watches."""
        ...

    def restore_state(self, payload: dict[str, Any]) -> None:
        """Populate fields from a saved payload (keys may be missing)."""
        ...

    def save_state(self, payload: dict[str, Any]) -> bool:
        """Export fields into payload.

        Returns:
            True if this condition wants to be persisted at all
        """
        ...

    def should_show(self) -> bool:
        """Whether the dashboard should display this condition now."""
        ...

    def get_last_change(self) -> float:
        """Timestamp of the most recent state transition."""
        ...


class BaseCondition:
    """Shared active/silenced/last_change handling for catalog conditions.

    Subclasses set type_id, title and summary, and implement
    refresh_state() by calling set_active() with the detected value.
    """

    type_id = ""
    title = ""
    summary = ""

    def __init__(self, manager: "ConditionManager"):
        self.manager = manager
        self.is_active = False
        self.is_silenced = False
        self.last_change: float = 0

    def refresh_state(self) -> None:
        raise NotImplementedError

    def set_active(self, active: bool) -> None:
        """Record a state transition and notify the manager."""
        if self.is_active == active:
            return
        self.is_active = active
        self.last_change = time.time()
        if not active:
            self.is_silenced = False
        logger.debug(f"{self.type_id} is now {'active' if active else 'inactive'}")
        self.manager.notify_changed(self)

    def silence(self) -> None:
        """Hide this condition until it goes inactive again."""
        if self.is_silenced:
            return
        self.is_silenced = True
        self.manager.notify_changed(self)

    def should_show(self) -> bool:
        return self.is_active and not self.is_silenced

    def get_last_change(self) -> float:
        return self.last_change

    def save_state(self, payload: dict[str, Any]) -> bool:
        if self.is_silenced:
            payload[KEY_SILENCED] = True
        if self.is_active:
            payload[KEY_ACTIVE] = True
            payload[KEY_LAST_CHANGE] = self.last_change
        return self.is_active or self.is_silenced

    def restore_state(self, payload: dict[str, Any]) -> None:
        self.is_silenced = _read_flag(payload, KEY_SILENCED)
        self.is_active = _read_flag(payload, KEY_ACTIVE)
        last_change = float(payload.get(KEY_LAST_CHANGE, 0))
        if not math.isfinite(last_change):
            raise ValueError(f"last_change must be finite, got {last_change}")
        self.last_change = last_change

    def to_dict(self) -> dict[str, Any]:
        """Get a JSON-ready summary of this condition."""
        return {
            "type": self.type_id,
            "title": self.title,
            "summary": self.summary,
            "active": self.is_active,
            "silenced": self.is_silenced,
            "last_change": self.last_change,
            "visible": self.should_show(),
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(active={self.is_active}, "
            f"silenced={self.is_silenced}, last_change={self.last_change})"
        )
