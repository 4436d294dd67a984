"""System-setting conditions that make up the dashboard catalog."""

from typing import Any

from .base import BaseCondition
from .registry import ConditionRegistry


class SystemCondition(BaseCondition):
    """Base class for conditions driven by a boolean system setting.

    Subclasses either name a single setting key or override is_detected().
    """

    setting_key = ""

    def _setting(self, key: str, default: Any = False) -> Any:
        return self.manager.context.get_setting(key, default)

    def is_detected(self) -> bool:
        return bool(self._setting(self.setting_key))

    def refresh_state(self) -> None:
        """Re-read the setting and flip the active flag if it changed."""
        self.set_active(self.is_detected())


class AirplaneModeCondition(SystemCondition):
    type_id = "AirplaneModeCondition"
    title = "Airplane mode is on"
    summary = "Wi-Fi, Bluetooth and mobile network are turned off."
    setting_key = "airplane_mode"


class HotspotCondition(SystemCondition):
    type_id = "HotspotCondition"
    title = "Hotspot is on"
    summary = "This device is sharing its connection."
    setting_key = "hotspot_enabled"


class DndCondition(SystemCondition):
    """Do Not Disturb; also persists which zen mode was active.

    Settings:
        zen_mode: one of "off", "priority", "alarms", "none"
    """

    type_id = "DndCondition"
    title = "Do Not Disturb is on"
    summary = "Notifications are silenced."

    KEY_STATE = "state"
    ZEN_OFF = "off"

    def __init__(self, manager):
        super().__init__(manager)
        self.zen_mode = self.ZEN_OFF

    def is_detected(self) -> bool:
        self.zen_mode = str(self._setting("zen_mode", self.ZEN_OFF))
        return self.zen_mode != self.ZEN_OFF

    def save_state(self, payload: dict[str, Any]) -> bool:
        payload[self.KEY_STATE] = self.zen_mode
        return super().save_state(payload)

    def restore_state(self, payload: dict[str, Any]) -> None:
        super().restore_state(payload)
        self.zen_mode = str(payload.get(self.KEY_STATE, self.ZEN_OFF))


class BatterySaverCondition(SystemCondition):
    type_id = "BatterySaverCondition"
    title = "Battery saver is on"
    summary = "Background activity and some visual effects are reduced."
    setting_key = "power_save_mode"


class CellularDataCondition(SystemCondition):
    type_id = "CellularDataCondition"
    title = "Mobile data is off"
    summary = "Data is only available via Wi-Fi."

    def is_detected(self) -> bool:
        # Devices without a cellular radio never show this
        return bool(self._setting("has_cellular")) and not self._setting(
            "mobile_data_enabled", True
        )


class BackgroundDataCondition(SystemCondition):
    type_id = "BackgroundDataCondition"
    title = "Background data is off"
    summary = "Apps can only use data while in the foreground."
    setting_key = "restrict_background_data"


class WorkModeCondition(SystemCondition):
    type_id = "WorkModeCondition"
    title = "Work profile is off"
    summary = "Work apps, notifications and sync are paused."

    def is_detected(self) -> bool:
        return bool(self._setting("has_work_profile")) and bool(
            self._setting("work_profile_paused")
        )


# Register all system conditions
def _make_factory(cls: type) -> callable:
    """Create a factory function for a condition class."""

    def factory(manager):
        return cls(manager)

    return factory


for _cls in (
    AirplaneModeCondition,
    HotspotCondition,
    DndCondition,
    BatterySaverCondition,
    CellularDataCondition,
    BackgroundDataCondition,
    WorkModeCondition,
):
    ConditionRegistry.register(_cls.type_id)(_make_factory(_cls))
