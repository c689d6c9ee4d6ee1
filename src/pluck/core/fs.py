"""Idempotent filesystem primitives used during removal."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from pluck.core.logging import get_logger

log = get_logger(__name__)


def rm_rf(path: Path) -> bool:
    """Recursively delete ``path``. A missing path is not an error.

    Returns:
        True if something was deleted.
    """
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()
    else:
        return False
    log.debug("path_removed", path=str(path))
    return True


def rm_f(path: Path) -> bool:
    """Delete a single file if present."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    log.debug("file_removed", path=str(path))
    return True


def is_writable(path: Path) -> bool:
    return os.access(path, os.W_OK)


def locate_cached(file_name: str, install_root: Path) -> Path:
    """Where a root keeps its cached package file named ``file_name``."""
    return install_root / "cache" / file_name
