"""kubelevate settings: layered YAML plus KUBELEVATE_* environment overrides."""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config
from .manager import ConfigManager

__all__ = ["BaseDomainConfig", "ConfigManager", "clear_all_caches", "get_cached_config"]
