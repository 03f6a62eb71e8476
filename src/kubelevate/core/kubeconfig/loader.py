"""Production kubeconfig loader.

Resolves the kubeconfig file list the same way kubectl does: the
``KUBECONFIG`` path list when set, otherwise ``~/.kube/config``. Multiple
files are merged; the first file to define a name (or a current-context)
wins.
"""
from __future__ import annotations

import dataclasses
import logging
import os
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

import yaml

from kubelevate.core.exceptions import ConfigLoadError

from .models import AuthInfo, Cluster, KubeConfig

logger = logging.getLogger(__name__)

RECOMMENDED_CONFIG_PATH_ENV_VAR = "KUBECONFIG"
RECOMMENDED_HOME_FILE = Path(".kube") / "config"


def kubeconfig_paths(
    environ: Optional[Mapping[str, str]] = None,
    *,
    env_var: str = RECOMMENDED_CONFIG_PATH_ENV_VAR,
) -> List[Path]:
    """Return candidate kubeconfig paths in precedence order."""
    env = os.environ if environ is None else environ
    raw = env.get(env_var, "")
    if raw:
        seen: set[str] = set()
        out: List[Path] = []
        for part in raw.split(os.pathsep):
            part = part.strip()
            if not part or part in seen:
                continue
            seen.add(part)
            out.append(Path(part).expanduser())
        return out
    home = env.get("HOME") or str(Path.home())
    return [Path(home) / RECOMMENDED_HOME_FILE]


def _resolve_path(base: str, value: str) -> str:
    if not value or os.path.isabs(value):
        return value
    return os.path.join(base, value)


def _resolve_cluster(base: str, cluster: Cluster) -> Cluster:
    return dataclasses.replace(
        cluster,
        certificate_authority=_resolve_path(base, cluster.certificate_authority),
    )


def _resolve_auth_info(base: str, auth: AuthInfo) -> AuthInfo:
    exec_config = auth.exec_config
    command = exec_config.get("command") if exec_config else None
    # Bare commands are looked up on PATH; only relative paths are anchored.
    if isinstance(command, str) and os.sep in command:
        exec_config = {**exec_config, "command": _resolve_path(base, command)}
    return dataclasses.replace(
        auth,
        client_certificate=_resolve_path(base, auth.client_certificate),
        client_key=_resolve_path(base, auth.client_key),
        token_file=_resolve_path(base, auth.token_file),
        exec_config=exec_config,
    )


def resolve_local_paths(config: KubeConfig, base: Path) -> KubeConfig:
    """Return a copy of ``config`` with relative file references anchored at ``base``.

    kubectl resolves these against the directory of the file that declared
    them, so they must be made absolute before the config is written elsewhere.
    """
    root = os.path.abspath(base)
    return dataclasses.replace(
        config,
        clusters={name: _resolve_cluster(root, c) for name, c in config.clusters.items()},
        auth_infos={name: _resolve_auth_info(root, a) for name, a in config.auth_infos.items()},
    )


def load_kubeconfig_file(path: Path) -> KubeConfig:
    """Parse a single kubeconfig file.

    Relative file references are resolved against the file's directory.

    Raises:
        ConfigLoadError: If the file cannot be read or is not a kubeconfig
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigLoadError(
            f"cannot read kubeconfig {path}: {exc}",
            context={"path": str(path)},
        ) from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(
            f"cannot parse kubeconfig {path}: {exc}",
            context={"path": str(path)},
        ) from exc

    try:
        config = KubeConfig.from_dict(data)
    except ConfigLoadError as exc:
        exc.context.setdefault("path", str(path))
        raise
    return resolve_local_paths(config, path.parent)


def merge_kubeconfigs(configs: Iterable[KubeConfig]) -> KubeConfig:
    """Merge configs in precedence order (first definition wins)."""
    merged: Optional[KubeConfig] = None
    for cfg in configs:
        if merged is None:
            merged = cfg.deep_copy()
            continue
        for name, cluster in cfg.clusters.items():
            merged.clusters.setdefault(name, cluster)
        for name, auth in cfg.auth_infos.items():
            merged.auth_infos.setdefault(name, auth)
        for name, ctx in cfg.contexts.items():
            merged.contexts.setdefault(name, ctx)
        if not merged.current_context and cfg.current_context:
            merged.current_context = cfg.current_context
    return merged if merged is not None else KubeConfig()


def read_kubeconfig_raw(
    environ: Optional[Mapping[str, str]] = None,
    *,
    env_var: str = RECOMMENDED_CONFIG_PATH_ENV_VAR,
) -> KubeConfig:
    """Load and merge the active kubeconfig files.

    Paths listed in the locator variable that do not exist are skipped; at
    least one must exist.

    Raises:
        ConfigLoadError: If no kubeconfig can be loaded
    """
    paths = kubeconfig_paths(environ, env_var=env_var)
    existing = [p for p in paths if p.is_file()]
    if not existing:
        raise ConfigLoadError(
            "no kubeconfig found (looked in: " + ", ".join(str(p) for p in paths) + ")",
            context={"paths": [str(p) for p in paths]},
        )

    logger.debug("Loading kubeconfig from %s", ", ".join(str(p) for p in existing))
    return merge_kubeconfigs(load_kubeconfig_file(p) for p in existing)


__all__ = [
    "RECOMMENDED_CONFIG_PATH_ENV_VAR",
    "kubeconfig_paths",
    "load_kubeconfig_file",
    "merge_kubeconfigs",
    "read_kubeconfig_raw",
    "resolve_local_paths",
]
