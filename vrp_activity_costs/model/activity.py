"""Reference value types for activities, drivers and vehicles.

The cost policies only read attributes from these objects, so any object with
the same attribute names can be passed instead (e.g. the route engine's own
activity type).
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Hashable, Optional

from ..config.enums import ACTIVITY_KINDS, KIND_END, KIND_SERVICE, KIND_START, TERMINAL_KINDS


def check_rate(name: str, value, positive: bool = False) -> None:
    """Raise ``ValueError`` unless ``value`` is a finite real >= 0 (> 0 when ``positive``)."""

    if not isinstance(value, numbers.Real) or isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value < 0.0:
        raise ValueError(f"{name} must be finite and >= 0, got {value!r}")
    if positive and value <= 0.0:
        raise ValueError(f"{name} must be > 0, got {value!r}")


@dataclass(frozen=True)
class TourActivity:
    """A stop on a tour with a location, a service duration and a time window."""

    name: str
    location: Hashable
    service_time: float = 0.0
    tw_open: float = 0.0
    tw_close: float = math.inf
    setup_time: float = 0.0
    kind: str = KIND_SERVICE

    def __post_init__(self) -> None:
        if self.kind not in ACTIVITY_KINDS:
            raise ValueError(f"unknown activity kind: {self.kind!r}")
        if not self.service_time >= 0.0:
            raise ValueError("service_time must be >= 0")
        if not self.setup_time >= 0.0:
            raise ValueError("setup_time must be >= 0")
        # tw_open > tw_close is allowed: the cost policy reports it as infeasible.

    @property
    def is_terminal(self) -> bool:
        return self.kind in TERMINAL_KINDS

    @property
    def has_feasible_window(self) -> bool:
        return self.tw_open <= self.tw_close


@dataclass(frozen=True)
class Vehicle:
    """Vehicle with optional rates overriding the policy parameters.

    ``None`` means the rate configured in the policy parameters applies.
    """

    name: str
    per_waiting_time_unit: Optional[float] = None
    per_service_time_unit: Optional[float] = None
    penalty_for_missed_time_window: Optional[float] = None

    def __post_init__(self) -> None:
        for name in ("per_waiting_time_unit", "per_service_time_unit"):
            value = getattr(self, name)
            if value is not None:
                check_rate(name, value)
        if self.penalty_for_missed_time_window is not None:
            # lateness penalty must grow strictly with lateness
            check_rate("penalty_for_missed_time_window", self.penalty_for_missed_time_window, positive=True)


@dataclass(frozen=True)
class Driver:
    name: str


def start_activity(location: Hashable, earliest_departure: float = 0.0, latest_departure: float = math.inf) -> TourActivity:
    """Synthetic activity marking the vehicle's route start."""

    return TourActivity(
        name="start",
        location=location,
        tw_open=earliest_departure,
        tw_close=latest_departure,
        kind=KIND_START,
    )


def end_activity(location: Hashable, earliest_arrival: float = 0.0, latest_arrival: float = math.inf) -> TourActivity:
    """Synthetic activity marking the vehicle's route end."""

    return TourActivity(
        name="end",
        location=location,
        tw_open=earliest_arrival,
        tw_close=latest_arrival,
        kind=KIND_END,
    )
