"""Test doubles for the elevation runner's collaborators."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml


class RecordingSpawner:
    """Spawner double that records calls and returns a fixed exit code.

    When called it also snapshots the kubeconfig the child would see, so
    tests can assert on the transient file while it still exists.
    """

    __test__ = False

    def __init__(
        self,
        returncode: int = 0,
        *,
        env_var: str = "KUBECONFIG",
        error: Optional[BaseException] = None,
    ) -> None:
        self.returncode = returncode
        self.env_var = env_var
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, argv: Sequence[str], env: Mapping[str, str]) -> int:
        path = env.get(self.env_var)
        snapshot = None
        if path and Path(path).is_file():
            snapshot = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        self.calls.append(
            {
                "argv": list(argv),
                "env": dict(env),
                "kubeconfig_path": path,
                "kubeconfig": snapshot,
                "parent_env_value": os.environ.get(self.env_var),
            }
        )
        if self.error is not None:
            raise self.error
        return self.returncode

    @property
    def last(self) -> Dict[str, Any]:
        return self.calls[-1]


class RecordingRemover:
    """Remover double that records paths and optionally deletes them."""

    __test__ = False

    def __init__(self, *, delete: bool = True, error: Optional[OSError] = None) -> None:
        self.delete = delete
        self.error = error
        self.paths: List[str] = []

    def __call__(self, path: str) -> None:
        self.paths.append(path)
        if self.error is not None:
            raise self.error
        if self.delete:
            os.remove(path)
