"""Core I/O utilities for kubelevate.

- Directory management
- Private temporary files with fsync and cleanup on failure
"""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, TextIO, Union

PathLike = Union[str, Path]


def ensure_directory(path: Path, create: bool = True) -> Path:
    """Ensure directory exists.

    Args:
        path: Directory path to check/create
        create: If True, create directory if missing; if False, raise if missing

    Returns:
        Path: The directory path (guaranteed to exist if create=True)

    Raises:
        FileNotFoundError: If create=False and directory doesn't exist
        NotADirectoryError: If path exists but is not a directory
    """
    path = Path(path)

    if path.exists():
        if not path.is_dir():
            raise NotADirectoryError(f"Path exists but is not a directory: {path}")
        return path

    if create:
        path.mkdir(parents=True, exist_ok=True)
        return path
    raise FileNotFoundError(f"Directory does not exist: {path}")


def write_private_tempfile(
    write_fn: Callable[[TextIO], None],
    *,
    prefix: str = "tmp-",
    suffix: str = "",
    directory: Optional[PathLike] = None,
    encoding: str = "utf-8",
) -> Path:
    """Create a new owner-only temp file and fill it via ``write_fn``.

    The file is created with ``mkstemp`` (mode 0600), fsync'd and closed
    before returning. If writing fails the file is removed before the
    error propagates.

    Args:
        write_fn: Callable that writes content to the file object
        prefix: File name prefix
        suffix: File name suffix
        directory: Parent directory (system temp dir when None)
        encoding: Text encoding (default: utf-8)

    Returns:
        Path of the written file
    """
    if directory is not None:
        ensure_directory(Path(directory))

    fd, name = tempfile.mkstemp(
        prefix=prefix,
        suffix=suffix,
        dir=str(directory) if directory is not None else None,
    )
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())
    except BaseException:
        try:
            path.unlink()
        except OSError:
            pass
        raise
    return path


__all__ = [
    "PathLike",
    "ensure_directory",
    "write_private_tempfile",
]
