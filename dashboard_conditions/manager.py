"""Condition manager: owns the catalog of conditions shown on the dashboard."""

import logging
from typing import Protocol, TypeVar

from .conditions import ConditionContext, ConditionRegistry
from .conditions.base import Condition
from .store import ConditionStore, get_store

logger = logging.getLogger(__name__)

# Every type the manager must always hold, in insertion (tie-break) order
CATALOG = (
    "AirplaneModeCondition",
    "HotspotCondition",
    "DndCondition",
    "BatterySaverCondition",
    "CellularDataCondition",
    "BackgroundDataCondition",
    "WorkModeCondition",
)

C = TypeVar("C")


class ConditionListener(Protocol):
    """Observer notified whenever any condition changes.

    The callback gets no arguments; listeners re-query the manager.
    """

    def on_conditions_changed(self) -> None:
        ...


def _sort_key(condition: Condition) -> float:
    return condition.get_last_change()


class ConditionManager:
    """Owns one instance of every catalog condition.

    On construction the manager loads the persisted state, adds a
    default instance for every catalog type missing from it, and sorts
    the conditions by last change (oldest first). Every change reported
    through notify_changed() is persisted, re-sorted and fanned out to
    the registered listeners.

    All methods expect to be called from a single thread.
    """

    _instance: "ConditionManager | None" = None

    def __init__(
        self,
        context: ConditionContext,
        store: ConditionStore | None = None,
        catalog: tuple[str, ...] = CATALOG,
    ):
        self.context = context
        self.store = store or get_store(context.state_dir)
        self.catalog = catalog
        self._conditions: list[Condition] = []
        self._listeners: list[ConditionListener] = []
        self._dispatching = False
        self._pending_notify = False

        self._read_conditions()
        self.add_missing_conditions()

    @classmethod
    def get(cls, context: ConditionContext) -> "ConditionManager":
        """Get the process-wide manager, creating it on first call.

        The context is only used by the call that creates the instance.
        """
        if cls._instance is None:
            cls._instance = cls(context)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the process-wide manager.

        Primarily useful for testing.
        """
        cls._instance = None

    def _read_conditions(self) -> None:
        """Build conditions from the persisted entries, skipping bad ones."""
        for type_id, payload in self.store.load():
            if not ConditionRegistry.is_registered(type_id):
                logger.warning(f"Skipping unknown condition type in state file: {type_id}")
                continue
            if self.get_condition(type_id) is not None:
                logger.warning(f"Skipping duplicate state entry for {type_id}")
                continue
            condition = ConditionRegistry.create(type_id, self)
            try:
                condition.restore_state(payload)
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping {type_id}: could not restore {payload!r}: {e}")
                continue
            logger.debug(f"Restored {type_id} -- {payload}")
            self._conditions.append(condition)

    def add_missing_conditions(self) -> None:
        """Create a default condition for every catalog type not yet held.

        Raises:
            ValueError: If a catalog entry is not a registered type
        """
        for type_id in self.catalog:
            if self.get_condition(type_id) is None:
                logger.debug(f"Adding missing {type_id}")
                self._conditions.append(ConditionRegistry.create(type_id, self))
        self._sort()

    def _sort(self) -> None:
        self._conditions.sort(key=_sort_key)

    def refresh_all(self) -> None:
        """Ask every condition, in current order, to re-check its state."""
        for condition in list(self._conditions):
            condition.refresh_state()

    def get_condition(self, key: type[C] | str) -> C | None:
        """Find the condition of the given class or type id.

        Args:
            key: A condition class (exact type match) or a type_id string

        Returns:
            The condition instance, or None if not held
        """
        for condition in self._conditions:
            if isinstance(key, str):
                if condition.type_id == key:
                    return condition
            elif type(condition) is key:
                return condition
        return None

    def get_conditions(self) -> tuple[Condition, ...]:
        """Get a snapshot of all conditions, oldest change first."""
        return tuple(self._conditions)

    def get_visible_conditions(self) -> tuple[Condition, ...]:
        """Get a snapshot of the conditions that should be shown."""
        return tuple(c for c in self._conditions if c.should_show())

    def notify_changed(self, condition: Condition) -> None:
        """Persist, re-sort and notify listeners after a condition changed.

        A call made while listeners are being notified is deferred until
        that dispatch finishes, then handled once.
        """
        logger.debug(f"{condition.type_id} changed")
        if self._dispatching:
            self._pending_notify = True
            return

        self._dispatching = True
        try:
            while True:
                self._pending_notify = False
                self.store.save(self._conditions)
                self._sort()
                for listener in list(self._listeners):
                    listener.on_conditions_changed()
                if not self._pending_notify:
                    break
        finally:
            self._dispatching = False
            self._pending_notify = False

    def add_listener(self, listener: ConditionListener) -> None:
        """Register a listener. Registering twice means two callbacks."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ConditionListener) -> None:
        """Drop one registration of listener, if present."""
        if listener in self._listeners:
            self._listeners.remove(listener)


def get_condition_manager(context: ConditionContext) -> ConditionManager:
    """Get the process-wide ConditionManager."""
    return ConditionManager.get(context)
