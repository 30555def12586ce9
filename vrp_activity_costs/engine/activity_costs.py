"""Activity cost and duration policies queried by the route search.

A policy is asked, for every activity the search evaluates, what performing
the activity costs and how long it occupies the vehicle. Waiting before the
window opens, soft lateness past the window and first-visit setup overhead are
all folded into these two numbers here.

Policies are stateless: every result depends only on the call arguments and
the frozen :class:`ActivityCostParameters`, so one instance can be shared by
any number of worker threads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Optional

from ..config.config import DEFAULTS
from ..config.enums import (
    INFEASIBLE_COST,
    TERMINAL_KINDS,
    TIME_TOUR_END,
    TIME_TOUR_START,
    TIME_UNDEFINED,
)
from ..model.activity import check_rate


class Time(float, Enum):
    """Arrival-time sentinels. They mark a context, not a clock value."""

    TOUR_START = TIME_TOUR_START
    TOUR_END = TIME_TOUR_END
    UNDEFINED = TIME_UNDEFINED


def is_clock_time(arrival_time: float) -> bool:
    """``True`` for arrival times usable in waiting/lateness arithmetic.

    Sentinels, any other negative value and NaN are all non-physical.
    """

    return arrival_time >= 0.0


@dataclass(frozen=True)
class ActivityCostParameters:
    """Immutable rates shared by every evaluation call."""

    penalty_for_missed_time_window: float = DEFAULTS["penalty_for_missed_time_window"]
    service_cost: float = DEFAULTS["service_cost"]
    waiting_cost_rate: float = DEFAULTS["waiting_cost_rate"]
    service_cost_rate: float = DEFAULTS["service_cost_rate"]

    def __post_init__(self) -> None:
        for name in ("service_cost", "waiting_cost_rate", "service_cost_rate"):
            check_rate(name, getattr(self, name))
        # lateness penalty must grow strictly with lateness
        check_rate("penalty_for_missed_time_window", self.penalty_for_missed_time_window, positive=True)


class CostBreakdown(NamedTuple):
    waiting: float
    lateness: float
    base: float
    waiting_cost: float
    penalty: float
    total: float


def _require_activity(activity: Any) -> None:
    if activity is None:
        raise ValueError("activity must not be None")


class VehicleRoutingActivityCosts(ABC):
    """Interface for activity costs and durations.

    ``arrival_time`` is the arrival at the activity, which is not necessarily
    the start of service: arriving before the window opens means waiting. It
    may also be one of the :class:`Time` sentinels.
    """

    @abstractmethod
    def activity_cost(self, activity, arrival_time: float, driver, vehicle) -> float:
        """Cost of performing ``activity`` when arriving at ``arrival_time``.

        If the activity's earliest start is later than its latest start it can
        never be conducted within its window and ``INFEASIBLE_COST`` is returned.
        """

    @abstractmethod
    def activity_duration(self, activity, arrival_time: float, driver, vehicle) -> float:
        """Time the activity occupies the vehicle, waiting excluded."""

    def activity_duration_after(self, prev_activity, activity, arrival_time: float, driver, vehicle) -> float:
        """Duration of ``activity`` knowing the activity visited before it.

        ``prev_activity`` is ``None`` for the first stop after the route start.
        The default ignores the context and returns :meth:`activity_duration`.
        """

        return self.activity_duration(activity, arrival_time, driver, vehicle)


class SoftTimeWindowCosts(VehicleRoutingActivityCosts):
    """Waiting, service and soft time-window penalty costs.

    cost = base + waiting * waiting_rate + lateness * penalty_rate, where
    base = service_cost + service_rate * duration for non-terminal activities
    and 0 for the synthetic start/end activities. Vehicle rates override the
    parameter rates when set.
    """

    def __init__(self, params: Optional[ActivityCostParameters] = None):
        self.params = params if params is not None else ActivityCostParameters()

    def _rates(self, vehicle):
        p = self.params
        if vehicle is None:
            return p.waiting_cost_rate, p.service_cost_rate, p.penalty_for_missed_time_window
        waiting_rate = getattr(vehicle, "per_waiting_time_unit", None)
        service_rate = getattr(vehicle, "per_service_time_unit", None)
        penalty_rate = getattr(vehicle, "penalty_for_missed_time_window", None)
        return (
            p.waiting_cost_rate if waiting_rate is None else waiting_rate,
            p.service_cost_rate if service_rate is None else service_rate,
            p.penalty_for_missed_time_window if penalty_rate is None else penalty_rate,
        )

    def _components(self, activity, arrival_time, driver, vehicle):
        waiting_rate, service_rate, penalty_rate = self._rates(vehicle)
        tw_open = activity.tw_open
        tw_close = activity.tw_close

        if is_clock_time(arrival_time):
            waiting = tw_open - arrival_time if arrival_time < tw_open else 0.0
            lateness = arrival_time - tw_close if arrival_time > tw_close else 0.0
        else:
            waiting = 0.0
            lateness = 0.0

        if getattr(activity, "kind", None) in TERMINAL_KINDS:
            base = 0.0
        else:
            duration = self.activity_duration(activity, arrival_time, driver, vehicle)
            base = self.params.service_cost
            if duration > 0.0 and service_rate > 0.0:
                base += service_rate * duration

        # a zero component adds nothing, even against an unbounded rate
        waiting_cost = waiting * waiting_rate if waiting > 0.0 and waiting_rate > 0.0 else 0.0
        penalty = lateness * penalty_rate if lateness > 0.0 and penalty_rate > 0.0 else 0.0
        if tw_open > tw_close:
            total = INFEASIBLE_COST
        else:
            total = base + waiting_cost + penalty
        return waiting, lateness, base, waiting_cost, penalty, total

    def activity_cost(self, activity, arrival_time: float, driver, vehicle) -> float:
        _require_activity(activity)
        return self._components(activity, arrival_time, driver, vehicle)[5]

    def cost_breakdown(self, activity, arrival_time: float, driver, vehicle) -> CostBreakdown:
        """Same evaluation as :meth:`activity_cost`, split into its parts."""

        _require_activity(activity)
        return CostBreakdown(*self._components(activity, arrival_time, driver, vehicle))

    def activity_duration(self, activity, arrival_time: float, driver, vehicle) -> float:
        _require_activity(activity)
        if not is_clock_time(arrival_time):
            return 0.0
        return activity.service_time


class FirstVisitSetupCosts(SoftTimeWindowCosts):
    """Soft time-window costs with a setup overhead on the first visit to a location.

    Consecutive activities at one location share the setup: the second and
    later ones only take their service time. Without context every visit is
    treated as a first visit.
    """

    def activity_duration(self, activity, arrival_time: float, driver, vehicle) -> float:
        _require_activity(activity)
        if not is_clock_time(arrival_time):
            return 0.0
        return activity.service_time + getattr(activity, "setup_time", 0.0)

    def activity_duration_after(self, prev_activity, activity, arrival_time: float, driver, vehicle) -> float:
        _require_activity(activity)
        if prev_activity is not None and prev_activity.location == activity.location and is_clock_time(arrival_time):
            return activity.service_time
        return self.activity_duration(activity, arrival_time, driver, vehicle)


POLICIES = {
    "soft_time_window": SoftTimeWindowCosts,
    "first_visit_setup": FirstVisitSetupCosts,
}
