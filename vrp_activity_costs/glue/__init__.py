"""Glue helpers for building cost policies from configuration files."""

from .io import (
    build_activity_costs,
    build_parameters,
    build_params,
    load_activity_costs,
    load_config,
)

__all__ = [
    "build_activity_costs",
    "build_parameters",
    "build_params",
    "load_activity_costs",
    "load_config",
]
