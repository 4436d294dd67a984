"""Tests for dashboard_conditions/conditions/ - Condition types and registry."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

sys.path.insert(0, str(Path(__file__).parent.parent))

from dashboard_conditions.conditions import ConditionContext, ConditionRegistry
from dashboard_conditions.conditions.base import BaseCondition
from dashboard_conditions.manager import CATALOG
from dashboard_conditions.conditions.system import (
    AirplaneModeCondition,
    BackgroundDataCondition,
    BatterySaverCondition,
    CellularDataCondition,
    DndCondition,
    HotspotCondition,
    WorkModeCondition,
)


def make_manager(**settings):
    """Create a mock manager whose context holds the given settings."""
    manager = MagicMock()
    manager.context = ConditionContext(settings=settings)
    return manager


class TestConditionRegistry:
    """Tests for the ConditionRegistry class."""

    def test_catalog_conditions_registered(self):
        """Every catalog type id can be built."""
        for type_id in CATALOG:
            assert ConditionRegistry.is_registered(type_id), type_id

    def test_create_unknown_type_raises(self):
        """Creating unknown condition type should raise ValueError."""
        with pytest.raises(ValueError, match="Unknown condition type"):
            ConditionRegistry.create("NoSuchCondition", make_manager())

    def test_create_returns_matching_class(self):
        condition = ConditionRegistry.create("DndCondition", make_manager())

        assert isinstance(condition, DndCondition)
        assert condition.type_id == "DndCondition"

    def test_is_registered(self):
        assert ConditionRegistry.is_registered("HotspotCondition") is True
        assert ConditionRegistry.is_registered("nonexistent") is False

    def test_custom_registration(self):
        """Custom conditions can be registered and created."""

        class CustomCondition(BaseCondition):
            type_id = "TestCustomCondition"

            def refresh_state(self):
                self.set_active(True)

        @ConditionRegistry.register("TestCustomCondition")
        def create_custom(manager):
            return CustomCondition(manager)

        try:
            assert ConditionRegistry.is_registered("TestCustomCondition")
            condition = ConditionRegistry.create("TestCustomCondition", make_manager())
            condition.refresh_state()
            assert condition.is_active is True
        finally:
            del ConditionRegistry._factories["TestCustomCondition"]


class TestConditionContext:
    """Tests for the ConditionContext dataclass."""

    def test_default_values(self):
        context = ConditionContext()

        assert context.state_dir.name == ".dashboard_conditions"
        assert context.settings == {}
        assert context.full_config == {}

    def test_get_setting_nested_path(self):
        """get_setting should support dot-separated paths."""
        context = ConditionContext(settings={"wifi": {"enabled": True}, "zen_mode": "alarms"})

        assert context.get_setting("wifi.enabled") is True
        assert context.get_setting("zen_mode") == "alarms"
        assert context.get_setting("wifi.missing", default="x") == "x"
        assert context.get_setting("missing.path") is None


class TestBaseCondition:
    """Tests for the shared active/silenced/last_change behaviour."""

    def test_defaults(self):
        condition = AirplaneModeCondition(make_manager())

        assert condition.is_active is False
        assert condition.is_silenced is False
        assert condition.get_last_change() == 0
        assert condition.should_show() is False

    @freeze_time("2026-01-06 10:00:00")
    def test_set_active_stamps_and_notifies(self):
        manager = make_manager()
        condition = AirplaneModeCondition(manager)

        condition.set_active(True)

        assert condition.is_active is True
        assert condition.get_last_change() == pytest.approx(1767693600.0)
        manager.notify_changed.assert_called_once_with(condition)

    def test_set_active_unchanged_is_noop(self):
        manager = make_manager()
        condition = AirplaneModeCondition(manager)

        condition.set_active(False)

        assert condition.get_last_change() == 0
        manager.notify_changed.assert_not_called()

    def test_silence_hides_active_condition(self):
        manager = make_manager()
        condition = AirplaneModeCondition(manager)
        condition.set_active(True)
        assert condition.should_show() is True

        condition.silence()

        assert condition.is_silenced is True
        assert condition.should_show() is False
        assert manager.notify_changed.call_count == 2

    def test_silence_twice_notifies_once(self):
        manager = make_manager()
        condition = AirplaneModeCondition(manager)

        condition.silence()
        condition.silence()

        manager.notify_changed.assert_called_once()

    def test_deactivating_clears_silence(self):
        condition = AirplaneModeCondition(make_manager())
        condition.set_active(True)
        condition.silence()

        condition.set_active(False)

        assert condition.is_silenced is False

    def test_inactive_condition_not_persisted(self):
        condition = AirplaneModeCondition(make_manager())
        payload = {}

        assert condition.save_state(payload) is False
        assert payload == {}

    def test_active_condition_persisted(self):
        condition = AirplaneModeCondition(make_manager())
        condition.is_active = True
        condition.last_change = 1000
        payload = {}

        assert condition.save_state(payload) is True
        assert payload == {"active": True, "last_change": 1000}

    def test_silenced_inactive_condition_persisted(self):
        condition = AirplaneModeCondition(make_manager())
        condition.is_silenced = True
        payload = {}

        assert condition.save_state(payload) is True
        assert payload == {"silenced": True}

    def test_restore_round_trip(self):
        original = BatterySaverCondition(make_manager())
        original.is_active = True
        original.is_silenced = True
        original.last_change = 1234.5
        payload = {}
        original.save_state(payload)

        restored = BatterySaverCondition(make_manager())
        restored.restore_state(payload)

        assert restored.is_active is True
        assert restored.is_silenced is True
        assert restored.get_last_change() == 1234.5

    def test_restore_tolerates_missing_keys(self):
        condition = BatterySaverCondition(make_manager())
        condition.restore_state({})

        assert condition.is_active is False
        assert condition.is_silenced is False
        assert condition.get_last_change() == 0

    def test_restore_rejects_bad_timestamp(self):
        condition = BatterySaverCondition(make_manager())

        with pytest.raises(ValueError):
            condition.restore_state({"active": True, "last_change": "yesterday"})

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "nan", "-inf"])
    def test_restore_rejects_non_finite_timestamp(self, value):
        """NaN or infinite timestamps would break the sort order."""
        condition = BatterySaverCondition(make_manager())

        with pytest.raises(ValueError, match="finite"):
            condition.restore_state({"active": True, "last_change": value})

    def test_restore_ignores_non_bool_flags(self):
        """Only real booleans count; the string "false" is not True."""
        condition = BatterySaverCondition(make_manager())
        condition.restore_state({"active": "false", "silenced": 1, "last_change": 10})

        assert condition.is_active is False
        assert condition.is_silenced is False
        assert condition.get_last_change() == 10

    def test_to_dict(self):
        condition = HotspotCondition(make_manager())
        condition.is_active = True

        data = condition.to_dict()

        assert data["type"] == "HotspotCondition"
        assert data["title"] == "Hotspot is on"
        assert data["active"] is True
        assert data["visible"] is True


class TestSystemConditions:
    """Tests for detection in each catalog condition."""

    @pytest.mark.parametrize(
        "cls, settings",
        [
            (AirplaneModeCondition, {"airplane_mode": True}),
            (HotspotCondition, {"hotspot_enabled": True}),
            (BatterySaverCondition, {"power_save_mode": True}),
            (BackgroundDataCondition, {"restrict_background_data": True}),
            (CellularDataCondition, {"has_cellular": True, "mobile_data_enabled": False}),
            (WorkModeCondition, {"has_work_profile": True, "work_profile_paused": True}),
            (DndCondition, {"zen_mode": "priority"}),
        ],
    )
    def test_refresh_activates(self, cls, settings):
        manager = make_manager(**settings)
        condition = cls(manager)

        condition.refresh_state()

        assert condition.is_active is True
        manager.notify_changed.assert_called_once_with(condition)

    @pytest.mark.parametrize(
        "cls",
        [
            AirplaneModeCondition,
            HotspotCondition,
            BatterySaverCondition,
            BackgroundDataCondition,
            CellularDataCondition,
            WorkModeCondition,
            DndCondition,
        ],
    )
    def test_refresh_with_no_settings_stays_inactive(self, cls):
        manager = make_manager()
        condition = cls(manager)

        condition.refresh_state()

        assert condition.is_active is False
        manager.notify_changed.assert_not_called()

    def test_cellular_needs_radio(self):
        """No cellular radio means mobile data being off is irrelevant."""
        condition = CellularDataCondition(
            make_manager(has_cellular=False, mobile_data_enabled=False)
        )
        condition.refresh_state()

        assert condition.is_active is False

    def test_work_mode_needs_profile(self):
        condition = WorkModeCondition(make_manager(work_profile_paused=True))
        condition.refresh_state()

        assert condition.is_active is False

    def test_refresh_deactivates(self):
        manager = make_manager(airplane_mode=True)
        condition = AirplaneModeCondition(manager)
        condition.refresh_state()

        manager.context.settings["airplane_mode"] = False
        condition.refresh_state()

        assert condition.is_active is False
        assert manager.notify_changed.call_count == 2


class TestDndCondition:
    """Tests for the zen mode payload kept by DndCondition."""

    def test_saves_zen_mode(self):
        condition = DndCondition(make_manager(zen_mode="alarms"))
        condition.refresh_state()
        payload = {}

        assert condition.save_state(payload) is True
        assert payload["state"] == "alarms"
        assert payload["active"] is True

    def test_restores_zen_mode(self):
        condition = DndCondition(make_manager())
        condition.restore_state({"active": True, "last_change": 50, "state": "none"})

        assert condition.zen_mode == "none"
        assert condition.is_active is True

    def test_restore_without_state_key(self):
        condition = DndCondition(make_manager())
        condition.restore_state({"active": True})

        assert condition.zen_mode == "off"
