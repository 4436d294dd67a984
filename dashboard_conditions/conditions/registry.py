"""Closed mapping from persisted type ids to condition constructors."""

from typing import TYPE_CHECKING, Callable

from .base import Condition

if TYPE_CHECKING:
    from ..manager import ConditionManager

# Builds a condition bound to the manager that will own it
ConditionFactory = Callable[["ConditionManager"], Condition]


class ConditionRegistry:
    """Every condition type the manager knows how to build.

    Type ids double as the "type" tag in condition_state.json, so this is
    where a tag read from disk is turned back into an object. Modules
    register their classes once at import time (see system.py); nothing
    is added at runtime.

    The manager treats the two miss cases differently: an unregistered
    tag in the state file is skipped, while an unregistered id in
    manager.CATALOG reaches create() and fails.
    """

    _factories: dict[str, ConditionFactory] = {}

    @classmethod
    def register(cls, type_id: str) -> Callable[[ConditionFactory], ConditionFactory]:
        """Decorator binding type_id to a factory."""

        def decorator(factory: ConditionFactory) -> ConditionFactory:
            cls._factories[type_id] = factory
            return factory

        return decorator

    @classmethod
    def is_registered(cls, type_id: str) -> bool:
        return type_id in cls._factories

    @classmethod
    def create(cls, type_id: str, manager: "ConditionManager") -> Condition:
        """Build a new, default-state condition owned by manager.

        Raises:
            ValueError: If type_id was never registered
        """
        factory = cls._factories.get(type_id)
        if factory is None:
            raise ValueError(f"Unknown condition type: {type_id}")
        return factory(manager)
