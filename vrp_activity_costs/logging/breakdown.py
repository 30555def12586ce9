import csv
import json
import math


class CostTrace:
    """Collects one cost breakdown row per evaluated activity."""

    def __init__(self):
        self.rows = []

    def append(self, activity, arrival, breakdown, duration=0.0):
        self.rows.append(
            (
                str(activity),
                float(arrival),
                float(breakdown.waiting),
                float(breakdown.lateness),
                float(breakdown.base),
                float(breakdown.waiting_cost),
                float(breakdown.penalty),
                float(breakdown.total),
                float(duration),
            )
        )

    def total_cost(self):
        return float(sum(row[7] for row in self.rows))

    def total_penalty(self):
        return float(sum(row[6] for row in self.rows))

    def save_csv(self, path):
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(
                [
                    "activity",
                    "arrival",
                    "waiting",
                    "lateness",
                    "base_cost",
                    "waiting_cost",
                    "penalty",
                    "total_cost",
                    "duration",
                ]
            )
            for row in self.rows:
                w.writerow(list(row))


def save_trace_json(path, trace, params, *, extra=None):
    total = trace.total_cost()
    data = {
        "total_cost": total if math.isfinite(total) else None,
        "feasible": math.isfinite(total),
        "total_penalty": trace.total_penalty(),
        "activities_logged": len(trace.rows),
        "params": params,
    }
    if extra:
        data.update(extra)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
