"""I/O utilities for kubelevate.

- Core: directory management, private temp files
- YAML: read/dump helpers over PyYAML
"""
from __future__ import annotations

from .core import (
    PathLike,
    ensure_directory,
    write_private_tempfile,
)
from .yaml import (
    dump_yaml,
    dump_yaml_string,
    iter_yaml_files,
    read_yaml,
)

__all__ = [
    "PathLike",
    "ensure_directory",
    "write_private_tempfile",
    "dump_yaml",
    "dump_yaml_string",
    "iter_yaml_files",
    "read_yaml",
]
