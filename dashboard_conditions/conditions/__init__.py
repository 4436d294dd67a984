"""Condition types for the dashboard condition manager.

Each condition watches one system aspect (airplane mode, battery
saver, ...) and reports whether the dashboard should show it.

Usage:
    from dashboard_conditions.conditions import ConditionContext, ConditionRegistry

    context = ConditionContext(
        state_dir=Path("/var/lib/dashboard"),
        settings={"airplane_mode": True},
    )

    # Conditions are owned by a ConditionManager
    condition = ConditionRegistry.create("AirplaneModeCondition", manager)
    condition.refresh_state()

Adding new condition types:
    1. Create a new module (e.g., dashboard_conditions/conditions/vpn.py)
    2. Subclass BaseCondition and implement refresh_state()
    3. Register it:
       @ConditionRegistry.register("VpnCondition")
       def create_vpn(manager):
           return VpnCondition(manager)
    4. Import the module here to trigger registration
    5. Add the type id to manager.CATALOG
"""

from .base import BaseCondition, Condition
from .context import ConditionContext
from .registry import ConditionRegistry

# Import condition modules to trigger registration
from . import system  # the seven catalog conditions

__all__ = [
    "BaseCondition",
    "Condition",
    "ConditionContext",
    "ConditionRegistry",
]
