"""YAML I/O utilities."""
from __future__ import annotations

from pathlib import Path
from typing import Any, TextIO

import yaml


class _BlockStyleDumper(yaml.SafeDumper):
    """SafeDumper that keeps multi-line strings readable."""


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    """Represent multiline strings with literal block style."""
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_BlockStyleDumper.add_representer(str, _str_representer)


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read YAML with error handling.

    Returns default if file is missing or invalid, unless raise_on_error is True.

    Args:
        path: YAML file path to read
        default: Value to return if file missing or invalid (default: None)
        raise_on_error: If True, propagate exceptions instead of returning default.

    Examples:
        >>> settings = read_yaml(Path("config.yaml"), default={})
        >>> assert isinstance(settings, dict)
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if data is not None else default
    except Exception:
        if raise_on_error:
            raise
        return default


def dump_yaml(data: Any, stream: TextIO, *, sort_keys: bool = False) -> None:
    """Serialize ``data`` as block-style YAML into ``stream``."""
    yaml.dump(
        data,
        stream,
        Dumper=_BlockStyleDumper,
        default_flow_style=False,
        sort_keys=sort_keys,
        allow_unicode=True,
    )


def dump_yaml_string(data: Any, sort_keys: bool = False) -> str:
    """Dump data to YAML string."""
    return yaml.dump(
        data,
        Dumper=_BlockStyleDumper,
        default_flow_style=False,
        sort_keys=sort_keys,
        allow_unicode=True,
    )


def iter_yaml_files(dir_path: Path) -> list[Path]:
    """Return YAML files in ``dir_path`` in deterministic order.

    Includes both ``*.yml`` and ``*.yaml``. When both ``<name>.yaml`` and
    ``<name>.yml`` exist, only the ``.yaml`` path is returned.
    """
    d = Path(dir_path)
    if not d.is_dir():
        return []
    yml_files = {p.stem: p for p in d.glob("*.yml")}
    yaml_files = {p.stem: p for p in d.glob("*.yaml")}

    out: list[Path] = []
    for stem in sorted(set(yml_files.keys()) | set(yaml_files.keys())):
        preferred = yaml_files.get(stem) or yml_files.get(stem)
        if preferred is not None:
            out.append(preferred)
    return out


__all__ = [
    "read_yaml",
    "dump_yaml",
    "dump_yaml_string",
    "iter_yaml_files",
]
