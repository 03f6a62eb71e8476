"""Settings for the elevation runner."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Optional

from ..base import BaseDomainConfig

DEFAULT_REASON = "Elevated cluster access via kubelevate (context {context})"
DEFAULT_ENV_VAR = "KUBECONFIG"
DEFAULT_TEMP_PREFIX = "kubelevate-"


class ElevateConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "elevate"

    @cached_property
    def reason_template(self) -> str:
        return str(self.section.get("reason") or DEFAULT_REASON)

    @cached_property
    def env_var(self) -> str:
        return str(self.section.get("env_var") or DEFAULT_ENV_VAR)

    @cached_property
    def temp_dir(self) -> Optional[Path]:
        raw = str(self.section.get("temp_dir") or "").strip()
        return Path(raw).expanduser() if raw else None

    @cached_property
    def temp_prefix(self) -> str:
        return str(self.section.get("temp_prefix") or DEFAULT_TEMP_PREFIX)


__all__ = ["ElevateConfig", "DEFAULT_REASON", "DEFAULT_ENV_VAR", "DEFAULT_TEMP_PREFIX"]
