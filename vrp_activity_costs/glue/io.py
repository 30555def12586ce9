"""Configuration helpers for wiring a cost policy into a solver.

A configuration is a plain mapping, usually read from YAML::

    policy: first_visit_setup
    params:
      penalty_for_missed_time_window: 2.0
      waiting_cost_rate: 1.0

Keys under ``params`` override :data:`vrp_activity_costs.config.config.DEFAULTS`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from ..config.config import DEFAULTS
from ..engine.activity_costs import POLICIES, ActivityCostParameters, VehicleRoutingActivityCosts

logger = logging.getLogger(__name__)

_PARAM_KEYS = ("penalty_for_missed_time_window", "service_cost", "waiting_cost_rate", "service_cost_rate")


def load_config(path_yaml: Path) -> Dict:
    """Load a policy configuration mapping from YAML, or JSON when the suffix is ``.json``.

    The mapping holds an optional ``policy`` name and an optional ``params``
    table of rate overrides. An empty file means "all defaults" and yields
    ``{}``; a root that is not a mapping raises ``ValueError``.
    """

    path = Path(path_yaml)
    if not path.exists():
        raise FileNotFoundError(path)

    text = path.read_text(encoding="utf-8").strip()
    if not text:
        return {}

    if path.suffix.lower() == ".json":
        cfg = json.loads(text)
    else:
        cfg = yaml.safe_load(text)
    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ValueError(f"configuration root must be a mapping: {path}")
    return cfg


def build_params(cfg: Mapping[str, Any]) -> Dict[str, Any]:
    params = DEFAULTS.copy()
    params.update(cfg.get("params") or {})
    if "policy" in cfg:
        params["policy"] = cfg["policy"]
    return params


def build_parameters(cfg: Mapping[str, Any]) -> ActivityCostParameters:
    """Merge ``cfg`` over the defaults into frozen policy parameters."""

    params = build_params(cfg)
    unknown = set(params) - set(_PARAM_KEYS) - {"policy"}
    if unknown:
        raise ValueError(f"unknown cost parameters: {sorted(unknown)}")
    try:
        values = {key: float(params[key]) for key in _PARAM_KEYS}
    except (TypeError, ValueError) as exc:
        raise ValueError(f"cost parameters must be numeric: {exc}") from exc
    return ActivityCostParameters(**values)


def build_activity_costs(cfg: Mapping[str, Any]) -> VehicleRoutingActivityCosts:
    """Construct the policy named by ``cfg['policy']`` with its parameters."""

    name = build_params(cfg)["policy"]
    policy_cls = POLICIES.get(name)
    if policy_cls is None:
        raise ValueError(f"unknown activity cost policy {name!r}; expected one of {sorted(POLICIES)}")
    parameters = build_parameters(cfg)
    logger.info("Using activity cost policy %s with %s", name, parameters)
    return policy_cls(parameters)


def load_activity_costs(config_path: Path) -> VehicleRoutingActivityCosts:
    """Convenience wrapper combining ``load_config`` and :func:`build_activity_costs`."""

    return build_activity_costs(load_config(config_path))


__all__ = [
    "build_activity_costs",
    "build_parameters",
    "build_params",
    "load_activity_costs",
    "load_config",
]
