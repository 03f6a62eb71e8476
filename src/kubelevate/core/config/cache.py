"""Centralized settings cache.

Keys include the user config dir, a fingerprint of KUBELEVATE_* variables and
the mtimes of user config files, so edits are picked up without a restart.
"""
from __future__ import annotations

import copy
import hashlib
import os
from pathlib import Path
from typing import Any, Dict, Optional

_config_cache: Dict[str, Dict[str, Any]] = {}


def _cache_key(config_dir: Path) -> str:
    from kubelevate.core.utils.io import iter_yaml_files

    from .manager import ENV_PREFIX

    env_items = sorted((k, v) for k, v in os.environ.items() if k.startswith(ENV_PREFIX))
    files = []
    for p in iter_yaml_files(config_dir):
        try:
            st = p.stat()
            files.append((p.name, st.st_mtime_ns, st.st_size))
        except OSError:
            files.append((p.name, 0, 0))
    fp = hashlib.sha256(repr((env_items, files)).encode("utf-8")).hexdigest()[:16]
    return f"{config_dir}:{fp}"


def get_cached_config(config_dir: Optional[Path] = None, *, validate: bool = True) -> Dict[str, Any]:
    """Return merged settings, loading them on first use.

    Callers receive a deep copy so cached data cannot be mutated.
    """
    from .manager import ConfigManager

    mgr = ConfigManager(config_dir=config_dir)
    key = _cache_key(mgr.config_dir) + (":v" if validate else ":nv")
    if key not in _config_cache:
        _config_cache[key] = mgr.load_config(validate=validate)
    return copy.deepcopy(_config_cache[key])


def clear_all_caches() -> None:
    """Drop cached settings and bundled data reads."""
    from kubelevate.data import clear_caches

    _config_cache.clear()
    clear_caches()


__all__ = ["get_cached_config", "clear_all_caches"]
