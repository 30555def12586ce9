# Parameter defaults for the activity cost policies (extend freely)
DEFAULTS = {
    "policy": "soft_time_window",
    "penalty_for_missed_time_window": 10.0,  # cost per time unit of lateness
    "service_cost": 0.0,                     # flat base cost per non-terminal activity
    "waiting_cost_rate": 0.0,                # cost per time unit spent waiting
    "service_cost_rate": 0.0,                # cost per time unit of service duration
}
