import math

import numpy as np

from .activity_costs import CostBreakdown, Time


def _breakdown(policy, activity, arrival, driver, vehicle):
    if hasattr(policy, "cost_breakdown"):
        return policy.cost_breakdown(activity, arrival, driver, vehicle)
    cost = policy.activity_cost(activity, arrival, driver, vehicle)
    return CostBreakdown(0.0, 0.0, 0.0, 0.0, 0.0, cost)


def schedule_tour(activities, ttime, policy, driver, vehicle, departure_time=0.0, trace=None):
    """Walk a tour and evaluate every activity with ``policy``.

    ``activities`` runs from the start activity to the end activity and each
    activity's ``location`` indexes ``ttime``. The start activity is evaluated
    with the ``Time.TOUR_START`` sentinel; every later activity gets the real
    arrival time. Service starts at ``max(arrival, tw_open)`` and lasts
    ``policy.activity_duration_after(prev, ...)``, with ``prev=None`` for the
    first stop.

    Inputs are not modified. Lateness never blocks the walk, it only shows up
    as penalty cost.
    """

    n = len(activities)
    arrival = np.zeros(n, dtype=np.float64)
    start = np.zeros(n, dtype=np.float64)
    end = np.zeros(n, dtype=np.float64)
    wait = np.zeros(n, dtype=np.float64)
    late = np.zeros(n, dtype=np.float64)
    cost = np.zeros(n, dtype=np.float64)

    if n == 0:
        return {
            "arrival": arrival,
            "start": start,
            "end": end,
            "wait": wait,
            "late": late,
            "cost": cost,
            "total_cost": 0.0,
            "total_duration": 0.0,
            "feasible": True,
        }

    first = activities[0]
    depart = max(float(departure_time), float(first.tw_open))
    parts = _breakdown(policy, first, Time.TOUR_START, driver, vehicle)
    arrival[0] = Time.TOUR_START
    start[0] = depart
    end[0] = depart
    cost[0] = parts.total
    if trace is not None:
        trace.append(first.name, Time.TOUR_START, parts)

    prev = first
    leave_time = depart
    for i in range(1, n):
        act = activities[i]
        arr = leave_time + float(ttime[prev.location, act.location])
        begin = arr if arr >= act.tw_open else float(act.tw_open)
        # the first stop after the route start has no previous activity
        context = None if i == 1 else prev
        duration = policy.activity_duration_after(context, act, arr, driver, vehicle)
        parts = _breakdown(policy, act, arr, driver, vehicle)

        arrival[i] = arr
        start[i] = begin
        end[i] = begin + duration
        wait[i] = begin - arr
        late[i] = arr - act.tw_close if arr > act.tw_close else 0.0
        cost[i] = parts.total
        if trace is not None:
            trace.append(act.name, arr, parts, duration)

        leave_time = end[i]
        prev = act

    total_cost = float(cost.sum())
    return {
        "arrival": arrival,
        "start": start,
        "end": end,
        "wait": wait,
        "late": late,
        "cost": cost,
        "total_cost": total_cost,
        "total_duration": float(end[-1] - start[0]),
        "feasible": math.isfinite(total_cost),
    }
