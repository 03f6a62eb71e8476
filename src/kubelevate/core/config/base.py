"""Base class for domain-specific settings accessors."""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .cache import get_cached_config


class BaseDomainConfig(ABC):
    """Abstract base class for domain-specific settings accessors.

    Usage:
        class MyConfig(BaseDomainConfig):
            def _config_section(self) -> str:
                return "mySection"

            @cached_property
            def my_setting(self) -> str:
                return self.section.get("mySetting", "default")
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        *,
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Initialize domain settings.

        Args:
            config_dir: User config dir. Uses the default location if None.
            config: Pre-merged settings; skips loading when given.
        """
        self._config: Dict[str, Any] = (
            dict(config) if config is not None else get_cached_config(config_dir=config_dir)
        )

    @abstractmethod
    def _config_section(self) -> str:
        """Return the top-level settings key for this domain."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        """Get this domain's settings section (empty dict if absent)."""
        return self._config.get(self._config_section(), {}) or {}


__all__ = ["BaseDomainConfig"]
