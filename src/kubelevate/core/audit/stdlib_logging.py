from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from kubelevate.core.utils.io import ensure_directory

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_STDERR_FORMAT = "kubelevate: %(levelname)s: %(message)s"

_CONFIGURED: Optional[tuple[str, str]] = None
_KUBELEVATE_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_stdlib_logging(*, level: str = "WARNING", log_path: Path | None = None) -> None:
    """Install kubelevate's single logging handler on the ``kubelevate`` logger.

    Logs go to ``log_path`` when given, otherwise to stderr. The wrapped
    command owns stdout, so nothing is ever logged there.

    Idempotent per-process: if already configured identically, no-op.
    """
    global _CONFIGURED, _KUBELEVATE_HANDLER

    target = str(Path(log_path).resolve()) if log_path is not None else "<stderr>"
    wanted = (target, str(level).upper())
    if _CONFIGURED == wanted and _KUBELEVATE_HANDLER is not None:
        return

    logger = logging.getLogger("kubelevate")
    logger.setLevel(_level_from_name(level))

    # Replace the handler we installed earlier when switching targets.
    if _KUBELEVATE_HANDLER is not None:
        logger.removeHandler(_KUBELEVATE_HANDLER)
        _KUBELEVATE_HANDLER.close()
        _KUBELEVATE_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        ensure_directory(Path(target).parent)
        handler = logging.FileHandler(target, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_STDERR_FORMAT))
    handler.setLevel(_level_from_name(level))
    logger.addHandler(handler)
    logger.propagate = False

    _KUBELEVATE_HANDLER = handler
    _CONFIGURED = wanted


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: clear configured handlers."""
    global _CONFIGURED, _KUBELEVATE_HANDLER
    logger = logging.getLogger("kubelevate")
    if _KUBELEVATE_HANDLER is not None:
        logger.removeHandler(_KUBELEVATE_HANDLER)
        _KUBELEVATE_HANDLER.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _CONFIGURED = None
    _KUBELEVATE_HANDLER = None


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests"]
