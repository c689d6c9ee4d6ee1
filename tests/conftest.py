"""
Pytest configuration and shared fixtures for pluck tests.

Provides a scripted user-interaction double and helpers that lay out
package roots on disk under tmp_path.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest

# Keep log files out of the real home directory
os.environ.setdefault("PLUCK_LOG_DIR", tempfile.mkdtemp(prefix="pluck-logs-"))

from pluck.core.config import PluckEnv
from pluck.core.graph import link_dependents
from pluck.core.hooks import HookRegistry
from pluck.core.index import PackageIndex
from pluck.core.models import Dependency, PackageSpec, RemovalRequest
from pluck.core.uninstaller import Uninstaller


# =============================================================================
# User interaction double
# =============================================================================

class ScriptedUI:
    """
    Non-interactive stand-in for the console.

    Answers are consumed in order; when none are left, confirm() returns
    the prompt's default. Every prompt and message is recorded.
    """

    def __init__(self, confirms: Sequence[bool] = (), choice: Optional[int] = None):
        self.confirms = list(confirms)
        self.choice = choice
        self.confirm_prompts: List[str] = []
        self.menus: List[List[str]] = []
        self.messages: List[str] = []

    def confirm(self, prompt: str, default: bool = True) -> bool:
        self.confirm_prompts.append(prompt)
        if self.confirms:
            return self.confirms.pop(0)
        return default

    def choose_one(self, prompt: str, labels: Sequence[str]):
        self.menus.append(list(labels))
        if self.choice is None:
            raise AssertionError("menu shown but no choice scripted")
        if 0 <= self.choice < len(labels):
            return labels[self.choice], self.choice
        return None, self.choice

    def notify(self, message: str = "") -> None:
        self.messages.append(message)


# =============================================================================
# On-disk package roots
# =============================================================================

def install_package(
    root: Path,
    name: str,
    version: str,
    executables: Sequence[str] = (),
    dependencies: Sequence[Dependency] = (),
    platform: str = "any",
    legacy_files: bool = False,
) -> PackageSpec:
    """
    Lay out an installed package under ``root`` and return its spec.

    Creates the install directory, metadata file, cached package file,
    generated docs and the executables in ``root/bin``. With
    ``legacy_files`` the metadata and cache use the platform-qualified
    legacy names instead of the canonical ones.
    """
    spec = PackageSpec(
        name=name,
        version=version,
        install_root=root,
        platform=platform,
        executables=tuple(executables),
        dependencies=tuple(dependencies),
    )

    gem_dir = root / "gems" / spec.full_name
    gem_dir.mkdir(parents=True, exist_ok=True)
    (gem_dir / "lib.py").write_text("# library\n")

    stem = spec.legacy_name if legacy_files else spec.full_name
    metadata: Dict[str, Any] = {
        "name": name,
        "version": version,
        "platform": platform,
        "executables": list(executables),
        "dependencies": [
            {"name": d.name, "requirement": d.requirement, "type": d.type.value}
            for d in dependencies
        ],
    }
    spec_dir = root / "specifications"
    spec_dir.mkdir(parents=True, exist_ok=True)
    (spec_dir / f"{stem}.gemspec").write_text(json.dumps(metadata))

    cache_dir = root / "cache"
    cache_dir.mkdir(parents=True, exist_ok=True)
    (cache_dir / f"{stem}.gem").write_bytes(b"package")

    doc_dir = root / "doc" / spec.full_name
    doc_dir.mkdir(parents=True, exist_ok=True)
    (doc_dir / "index.html").write_text("<html></html>")

    bin_dir = root / "bin"
    bin_dir.mkdir(parents=True, exist_ok=True)
    for exe in executables:
        (bin_dir / exe).write_text("#!/bin/sh\n")
        (bin_dir / f"{exe}.bat").write_text("@echo off\n")

    return spec


@pytest.fixture
def home(tmp_path: Path) -> Path:
    root = tmp_path / "home"
    (root / "bin").mkdir(parents=True)
    return root


@pytest.fixture
def user_home(tmp_path: Path) -> Path:
    root = tmp_path / "user"
    (root / "bin").mkdir(parents=True)
    return root


@pytest.fixture
def env(home: Path, user_home: Path) -> PluckEnv:
    return PluckEnv(home=home, user_home=user_home)


@pytest.fixture
def hooks() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def make_uninstaller(env: PluckEnv, hooks: HookRegistry):
    """Factory building an Uninstaller over explicit spec lists."""

    def _make(
        request: RemovalRequest,
        home_specs: Sequence[PackageSpec] = (),
        user_specs: Sequence[PackageSpec] = (),
        ui: Optional[ScriptedUI] = None,
        **kwargs: Any,
    ) -> Uninstaller:
        linked = link_dependents(list(home_specs) + list(user_specs))
        home_index = PackageIndex(env.home, linked[: len(home_specs)])
        user_index = PackageIndex(env.user_home, linked[len(home_specs):])
        return Uninstaller(
            request,
            env,
            home_index,
            user_index,
            ui=ui or ScriptedUI(),
            hooks=hooks,
            **kwargs,
        )

    return _make
