"""Configuration module for the pluck environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_EXEC_FORMAT = "%s"


@dataclass
class PluckEnv:
    """Configured package roots and executable naming."""
    home: Path
    user_home: Path
    exec_format: str = DEFAULT_EXEC_FORMAT


def discover_env() -> PluckEnv:
    """Discover the pluck environment from PLUCK_* variables."""
    base = Path.home() / ".pluck"
    home = Path(os.environ.get("PLUCK_HOME") or base / "packages")
    user_home = Path(os.environ.get("PLUCK_USER_HOME") or base / "user")
    exec_format = os.environ.get("PLUCK_EXEC_FORMAT") or DEFAULT_EXEC_FORMAT

    return PluckEnv(
        home=home.expanduser().resolve(),
        user_home=user_home.expanduser().resolve(),
        exec_format=exec_format,
    )


def bindir_for(install_root: Path) -> Path:
    """Executables for a root live in its bin directory."""
    return install_root / "bin"
