import math
from concurrent.futures import ThreadPoolExecutor

import pytest

from vrp_activity_costs.config.enums import INFEASIBLE_COST
from vrp_activity_costs.engine.activity_costs import (
    ActivityCostParameters,
    SoftTimeWindowCosts,
    Time,
    VehicleRoutingActivityCosts,
    is_clock_time,
)
from vrp_activity_costs.model.activity import Driver, TourActivity, Vehicle, end_activity, start_activity

DRIVER = Driver("d0")
VEHICLE = Vehicle("v0")


def _policy(**kwargs):
    params = {"penalty_for_missed_time_window": 2.0, "service_cost": 10.0, "waiting_cost_rate": 1.5}
    params.update(kwargs)
    return SoftTimeWindowCosts(ActivityCostParameters(**params))


def _stop(tw_open=100.0, tw_close=120.0, service=5.0):
    return TourActivity("job", location=1, service_time=service, tw_open=tw_open, tw_close=tw_close)


def test_early_arrival_pays_waiting_only():
    cost = _policy().activity_cost(_stop(), 95.0, DRIVER, VEHICLE)
    assert cost == pytest.approx(10.0 + 5.0 * 1.5)


def test_late_arrival_pays_penalty_only():
    cost = _policy().activity_cost(_stop(), 130.0, DRIVER, VEHICLE)
    assert cost == pytest.approx(10.0 + 20.0)


def test_arrival_at_window_open_has_no_penalty():
    parts = _policy().cost_breakdown(_stop(), 100.0, DRIVER, VEHICLE)
    assert parts.penalty == 0.0
    assert parts.waiting == 0.0
    assert parts.total == pytest.approx(10.0)


def test_arrival_at_window_close_is_not_late():
    parts = _policy().cost_breakdown(_stop(), 120.0, DRIVER, VEHICLE)
    assert parts.lateness == 0.0
    assert parts.penalty == 0.0


def test_penalty_is_monotonic_in_lateness():
    policy = _policy()
    act = _stop()
    costs = [policy.activity_cost(act, t, DRIVER, VEHICLE) for t in (120.5, 121.0, 150.0, 400.0)]
    assert all(b > a for a, b in zip(costs, costs[1:]))


@pytest.mark.parametrize("arrival", [0.0, 45.0, 100.0, 1e6, Time.TOUR_START, Time.TOUR_END, Time.UNDEFINED])
def test_infeasible_window_returns_sentinel_cost(arrival):
    act = _stop(tw_open=50.0, tw_close=40.0)
    cost = _policy().activity_cost(act, arrival, DRIVER, VEHICLE)
    assert cost == INFEASIBLE_COST
    assert math.isinf(cost) and cost > 0


def test_infeasible_cost_still_orders_against_finite_costs():
    policy = _policy()
    bad = policy.activity_cost(_stop(tw_open=50.0, tw_close=40.0), 45.0, DRIVER, VEHICLE)
    good = policy.activity_cost(_stop(), 1e9, DRIVER, VEHICLE)
    assert sorted([bad, good]) == [good, bad]


@pytest.mark.parametrize("sentinel", list(Time))
def test_sentinel_arrival_never_adds_waiting_or_penalty(sentinel):
    act = _stop(tw_open=500.0, tw_close=600.0)
    parts = _policy().cost_breakdown(act, sentinel, DRIVER, VEHICLE)
    assert parts.waiting == 0.0
    assert parts.waiting_cost == 0.0
    assert parts.penalty == 0.0
    assert _policy().activity_duration(act, sentinel, DRIVER, VEHICLE) == 0.0


def test_terminal_activities_carry_no_base_cost():
    policy = _policy()
    start = start_activity(0)
    assert policy.activity_cost(start, Time.TOUR_START, DRIVER, VEHICLE) == 0.0
    end = end_activity(0, latest_arrival=100.0)
    assert policy.activity_cost(end, 90.0, DRIVER, VEHICLE) == 0.0
    assert policy.activity_cost(end, 110.0, DRIVER, VEHICLE) == pytest.approx(20.0)


def test_vehicle_rates_override_parameters():
    policy = _policy(service_cost_rate=1.0)
    vehicle = Vehicle("fast", per_waiting_time_unit=3.0, per_service_time_unit=2.0, penalty_for_missed_time_window=7.0)
    act = _stop()
    assert policy.activity_cost(act, 90.0, DRIVER, vehicle) == pytest.approx(10.0 + 2.0 * 5.0 + 3.0 * 10.0)
    assert policy.activity_cost(act, 125.0, DRIVER, vehicle) == pytest.approx(10.0 + 2.0 * 5.0 + 7.0 * 5.0)
    assert policy.activity_cost(act, 125.0, DRIVER, None) == pytest.approx(10.0 + 1.0 * 5.0 + 2.0 * 5.0)


def test_duration_excludes_waiting():
    policy = _policy()
    act = _stop(service=7.0)
    assert policy.activity_duration(act, 10.0, DRIVER, VEHICLE) == 7.0
    assert policy.activity_duration(act, 110.0, DRIVER, VEHICLE) == 7.0


def test_context_free_fallback_equivalence():
    policy = _policy()
    act = _stop(service=7.0)
    for t in (0.0, 95.0, 130.0, Time.TOUR_END):
        assert policy.activity_duration_after(None, act, t, DRIVER, VEHICLE) == policy.activity_duration(
            act, t, DRIVER, VEHICLE
        )


def test_repeated_calls_are_identical():
    policy = _policy(service_cost_rate=0.3)
    act = _stop(service=3.3)
    first = policy.activity_cost(act, 123.456, DRIVER, VEHICLE)
    assert all(policy.activity_cost(act, 123.456, DRIVER, VEHICLE) == first for _ in range(100))


def test_shared_policy_across_threads():
    policy = _policy()
    act = _stop()
    arrivals = [float(t) for t in range(0, 200)] * 5
    expected = [policy.activity_cost(act, t, DRIVER, VEHICLE) for t in arrivals]
    with ThreadPoolExecutor(max_workers=8) as pool:
        got = list(pool.map(lambda t: policy.activity_cost(act, t, DRIVER, VEHICLE), arrivals))
    assert got == expected


def test_none_activity_is_a_contract_violation():
    policy = _policy()
    with pytest.raises(ValueError):
        policy.activity_cost(None, 0.0, DRIVER, VEHICLE)
    with pytest.raises(ValueError):
        policy.activity_duration(None, 0.0, DRIVER, VEHICLE)
    with pytest.raises(ValueError):
        policy.activity_duration_after(None, None, 0.0, DRIVER, VEHICLE)


def test_time_sentinels_compare_by_value():
    assert Time.TOUR_START == -1.0
    assert Time.TOUR_END == -2.0
    assert Time.UNDEFINED == -3.0
    assert -2.0 in set(Time)
    assert 0.0 not in set(Time)
    assert not is_clock_time(Time.TOUR_START)
    assert not is_clock_time(float("nan"))
    assert is_clock_time(0.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"penalty_for_missed_time_window": 0.0},
        {"penalty_for_missed_time_window": -1.0},
        {"waiting_cost_rate": float("inf")},
        {"service_cost": float("nan")},
        {"service_cost_rate": "1.0"},
    ],
)
def test_parameters_reject_invalid_rates(kwargs):
    with pytest.raises(ValueError):
        ActivityCostParameters(**kwargs)


def test_parameters_are_frozen():
    params = ActivityCostParameters()
    with pytest.raises(AttributeError):
        params.penalty_for_missed_time_window = 1.0


def test_interface_default_duration_delegates():
    class FixedDuration(VehicleRoutingActivityCosts):
        def activity_cost(self, activity, arrival_time, driver, vehicle):
            return 0.0

        def activity_duration(self, activity, arrival_time, driver, vehicle):
            return 42.0

    policy = FixedDuration()
    assert policy.activity_duration_after(_stop(), _stop(), 5.0, DRIVER, VEHICLE) == 42.0

    with pytest.raises(TypeError):
        VehicleRoutingActivityCosts()


def test_parameters_accept_numpy_numbers():
    np = pytest.importorskip("numpy")
    params = ActivityCostParameters(penalty_for_missed_time_window=np.int64(3), service_cost=np.float32(1.5))
    assert params.penalty_for_missed_time_window == 3


@pytest.mark.parametrize(
    "kwargs",
    [
        {"penalty_for_missed_time_window": 0.0},
        {"penalty_for_missed_time_window": -3.0},
        {"penalty_for_missed_time_window": math.inf},
        {"per_waiting_time_unit": -1.0},
        {"per_waiting_time_unit": math.inf},
        {"per_service_time_unit": float("nan")},
        {"per_service_time_unit": "2"},
    ],
)
def test_vehicle_rejects_invalid_rates(kwargs):
    with pytest.raises(ValueError):
        Vehicle("v", **kwargs)


def test_vehicle_penalty_grows_with_lateness():
    policy = _policy()
    vehicle = Vehicle("v", penalty_for_missed_time_window=3.0)
    act = _stop()
    late_a = policy.activity_cost(act, 125.0, DRIVER, vehicle)
    late_b = policy.activity_cost(act, 150.0, DRIVER, vehicle)
    assert 0.0 < late_a - 10.0 < late_b - 10.0


class _UnboundedRates:
    name = "unbounded"
    per_waiting_time_unit = math.inf
    per_service_time_unit = math.inf
    penalty_for_missed_time_window = math.inf


@pytest.mark.parametrize("arrival", [110.0, 95.0, 130.0, Time.UNDEFINED])
def test_unbounded_rates_never_yield_nan(arrival):
    policy = _policy()
    act = _stop(service=0.0)
    cost = policy.activity_cost(act, arrival, DRIVER, _UnboundedRates())
    assert not math.isnan(cost)
    if arrival == 110.0 or arrival == Time.UNDEFINED:
        assert cost == pytest.approx(10.0)
    else:
        assert cost == math.inf


def test_unbounded_window_open_with_zero_waiting_rate():
    policy = _policy(waiting_cost_rate=0.0)
    act = _stop(tw_open=math.inf, tw_close=math.inf)
    parts = policy.cost_breakdown(act, 10.0, DRIVER, VEHICLE)
    assert parts.waiting == math.inf
    assert parts.waiting_cost == 0.0
    assert parts.total == pytest.approx(10.0)
