"""
kubelevate settings management (YAML layers + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from kubelevate.core.exceptions import SettingsError
from kubelevate.core.utils.io import iter_yaml_files, read_yaml
from kubelevate.core.utils.merge import deep_merge
from kubelevate.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "KUBELEVATE_"
CONFIG_DIR_ENV_VAR = "KUBELEVATE_CONFIG_DIR"


class ConfigManager:
    """Load, merge, and validate kubelevate settings.

    Sources (highest to lowest priority):
    1. Environment variables: KUBELEVATE_<section>__<key>
    2. User config: <user-config-dir>/*.yaml (alphabetical order)
    3. Bundled defaults: kubelevate.data/config/*.yaml (alphabetical order)

    The user config dir is ``$KUBELEVATE_CONFIG_DIR`` when set, otherwise
    ``$XDG_CONFIG_HOME/kubelevate`` (``~/.config/kubelevate``).
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.environ: Mapping[str, str] = os.environ if environ is None else environ
        self.config_dir = Path(config_dir) if config_dir is not None else self._default_config_dir()
        self.core_config_dir = get_data_path("config")

    def _default_config_dir(self) -> Path:
        explicit = self.environ.get(CONFIG_DIR_ENV_VAR)
        if explicit:
            return Path(explicit).expanduser()
        xdg = self.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
        return base / "kubelevate"

    # ---- env overrides --------------------------------------------------
    @staticmethod
    def _coerce_type(value: str) -> Any:
        raw = value.strip()
        lowered = raw.lower()
        if lowered in {"true", "yes", "on"}:
            return True
        if lowered in {"false", "no", "off"}:
            return False
        try:
            return int(raw)
        except ValueError:
            pass
        try:
            return float(raw)
        except ValueError:
            pass
        if raw[:1] in {"{", "["}:
            try:
                return json.loads(raw)
            except ValueError:
                pass
        return raw

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(self.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key == CONFIG_DIR_ENV_VAR:
                continue
            raw = key[len(ENV_PREFIX):]
            segs = raw.split("__")
            if not raw or any(seg == "" for seg in segs):
                raise SettingsError(
                    f"Malformed {ENV_PREFIX}* key: '{key}'",
                    context={"key": key},
                )
            yield [seg.lower() for seg in segs], self._coerce_type(self.environ[key])

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path, value in self._iter_env_overrides():
            cur = cfg
            for part in path[:-1]:
                nxt = cur.get(part)
                if not isinstance(nxt, dict):
                    nxt = {}
                    cur[part] = nxt
                cur = nxt
            cur[path[-1]] = value
        return cfg

    # ---- loading --------------------------------------------------------
    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            try:
                data = read_yaml(path, default={}, raise_on_error=True)
            except Exception as exc:
                raise SettingsError(
                    f"Cannot read settings file {path}: {exc}",
                    context={"path": str(path)},
                ) from exc
            if not isinstance(data, dict):
                raise SettingsError(
                    f"Settings file {path} must contain a mapping",
                    context={"path": str(path)},
                )
            logger.debug("Merging settings from %s", path)
            cfg = deep_merge(cfg, data)
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Return the merged settings mapping.

        Raises:
            SettingsError: If a layer is unreadable or validation fails
        """
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.config_dir, cfg)
        cfg = self.apply_env_overrides(cfg)
        if validate:
            self.validate(cfg)
        return cfg

    def validate(self, cfg: Dict[str, Any]) -> None:
        from kubelevate.core.schemas import validate_payload

        validate_payload(cfg, "config.schema.yaml")


__all__ = ["ConfigManager", "ENV_PREFIX", "CONFIG_DIR_ENV_VAR"]
