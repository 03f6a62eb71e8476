"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional


def get_config_dir(args: argparse.Namespace) -> Optional[Path]:
    """Get the settings directory from ``--config-dir`` (None means default)."""
    raw = getattr(args, "config_dir", None)
    return Path(raw).expanduser() if raw else None
