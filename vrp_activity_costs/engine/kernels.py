"""Numba kernels mirroring the soft time-window policies on array data.

Nodes are rows of a ``node_f`` matrix indexed by the ``NODE_*`` columns from
:mod:`vrp_activity_costs.config.enums`. Every node is treated as a regular
(non-terminal) stop.
"""

from __future__ import annotations

import numpy as np
from numba import njit

from ..config.enums import INFEASIBLE_COST, NODE_SERVICE, NODE_SETUP, NODE_TW_CLOSE, NODE_TW_OPEN


@njit(cache=True)
def soft_tw_cost(
    arrival: float,
    tw_open: float,
    tw_close: float,
    duration: float,
    base: float,
    waiting_rate: float,
    service_rate: float,
    penalty_rate: float,
) -> float:
    """Scalar cost of one stop, same arithmetic as ``SoftTimeWindowCosts``."""

    waiting = 0.0
    lateness = 0.0
    served = 0.0
    if arrival >= 0.0:
        if arrival < tw_open:
            waiting = tw_open - arrival
        if arrival > tw_close:
            lateness = arrival - tw_close
        served = duration

    total = base
    if served > 0.0 and service_rate > 0.0:
        total += service_rate * served
    if waiting > 0.0 and waiting_rate > 0.0:
        total += waiting * waiting_rate
    if lateness > 0.0 and penalty_rate > 0.0:
        total += lateness * penalty_rate
    if tw_open > tw_close:
        return INFEASIBLE_COST
    return total


@njit(cache=True)
def batch_activity_costs(
    nodes: np.ndarray,
    arrivals: np.ndarray,
    node_f: np.ndarray,
    base: float,
    waiting_rate: float,
    service_rate: float,
    penalty_rate: float,
) -> np.ndarray:
    """Evaluate ``soft_tw_cost`` for each ``(nodes[i], arrivals[i])`` pair."""

    out = np.empty(nodes.shape[0], dtype=np.float64)
    for i in range(nodes.shape[0]):
        v = nodes[i]
        out[i] = soft_tw_cost(
            arrivals[i],
            node_f[v, NODE_TW_OPEN],
            node_f[v, NODE_TW_CLOSE],
            node_f[v, NODE_SERVICE],
            base,
            waiting_rate,
            service_rate,
            penalty_rate,
        )
    return out


@njit(cache=True)
def batch_activity_durations(
    prev_nodes: np.ndarray,
    nodes: np.ndarray,
    arrivals: np.ndarray,
    node_f: np.ndarray,
    locations: np.ndarray,
) -> np.ndarray:
    """Service durations with the setup waived after a same-location predecessor.

    ``prev_nodes[i] < 0`` means there is no previous activity, which counts as
    a first visit.
    """

    out = np.empty(nodes.shape[0], dtype=np.float64)
    for i in range(nodes.shape[0]):
        v = nodes[i]
        if not arrivals[i] >= 0.0:
            out[i] = 0.0
            continue
        p = prev_nodes[i]
        dur = node_f[v, NODE_SERVICE]
        if p < 0 or locations[p] != locations[v]:
            dur += node_f[v, NODE_SETUP]
        out[i] = dur
    return out
