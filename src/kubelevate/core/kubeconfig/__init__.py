"""Kubeconfig model and loader."""
from __future__ import annotations

from .loader import (
    RECOMMENDED_CONFIG_PATH_ENV_VAR,
    kubeconfig_paths,
    load_kubeconfig_file,
    merge_kubeconfigs,
    read_kubeconfig_raw,
    resolve_local_paths,
)
from .models import AuthInfo, Cluster, Context, KubeConfig, new_config

__all__ = [
    "AuthInfo",
    "Cluster",
    "Context",
    "KubeConfig",
    "new_config",
    "RECOMMENDED_CONFIG_PATH_ENV_VAR",
    "kubeconfig_paths",
    "load_kubeconfig_file",
    "merge_kubeconfigs",
    "read_kubeconfig_raw",
    "resolve_local_paths",
]
