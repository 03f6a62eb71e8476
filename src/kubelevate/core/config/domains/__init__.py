"""Domain-specific settings accessors."""
from .elevate import ElevateConfig
from .logging import LoggingConfig

__all__ = ["ElevateConfig", "LoggingConfig"]
