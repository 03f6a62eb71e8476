"""Elevation: annotate the current kubeconfig user and run a command against it."""
from __future__ import annotations

from .annotate import (
    REASON_KEY,
    add_elevation_reason,
    current_auth_info_name,
    current_context,
    elevation_reasons,
    render_elevation_reason,
)
from .runner import (
    DEFAULT_REASON,
    ElevationRunner,
    child_environment,
    preserved_env_var,
    run_elevate,
    spawn_process,
    transient_kubeconfig,
)

__all__ = [
    "REASON_KEY",
    "add_elevation_reason",
    "current_auth_info_name",
    "current_context",
    "elevation_reasons",
    "render_elevation_reason",
    "DEFAULT_REASON",
    "ElevationRunner",
    "child_environment",
    "preserved_env_var",
    "run_elevate",
    "spawn_process",
    "transient_kubeconfig",
]
