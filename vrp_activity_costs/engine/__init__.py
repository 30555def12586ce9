"""Activity cost policies and the helpers that evaluate them."""

from .activity_costs import (
    POLICIES,
    ActivityCostParameters,
    CostBreakdown,
    FirstVisitSetupCosts,
    SoftTimeWindowCosts,
    Time,
    VehicleRoutingActivityCosts,
    is_clock_time,
)
from .tour import schedule_tour

__all__ = [
    "POLICIES",
    "ActivityCostParameters",
    "CostBreakdown",
    "FirstVisitSetupCosts",
    "SoftTimeWindowCosts",
    "Time",
    "VehicleRoutingActivityCosts",
    "is_clock_time",
    "schedule_tour",
]
