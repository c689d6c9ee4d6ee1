"""Load installed package metadata from a root's specifications directory."""

from __future__ import annotations

import json
import time
from pathlib import Path

from pluck.core.config import PluckEnv
from pluck.core.errors import UserError
from pluck.core.graph import link_dependents
from pluck.core.index import PackageIndex
from pluck.core.logging import get_logger
from pluck.core.models import PLATFORM_ANY, Dependency, DependencyType, PackageSpec
from pluck.core.requirement import check_version

log = get_logger(__name__)


def parse_spec(data: dict, install_root: Path) -> PackageSpec:
    """Build a PackageSpec from one metadata document.

    Args:
        data: Decoded metadata with at least ``name`` and ``version``.
        install_root: Root the metadata was found under.

    Returns:
        The parsed spec, without dependents.

    Raises:
        UserError: If the version is not well formed. Versions that
            ``packaging`` cannot order are accepted; they only match
            exact requirements and the default any-version requirement.
    """
    version = str(data["version"])
    check_version(version)

    deps = tuple(
        Dependency(
            name=d["name"],
            requirement=d.get("requirement") or ">= 0",
            type=DependencyType(d.get("type", "runtime")),
        )
        for d in data.get("dependencies", [])
    )

    return PackageSpec(
        name=data["name"],
        version=version,
        install_root=install_root,
        platform=data.get("platform") or PLATFORM_ANY,
        original_platform=data.get("original_platform"),
        executables=tuple(data.get("executables", [])),
        dependencies=deps,
    )


def read_specs(root: Path) -> list[PackageSpec]:
    """Read every ``*.gemspec`` under ``<root>/specifications``.

    Unreadable files are logged and skipped.
    """
    spec_dir = root / "specifications"
    specs: list[PackageSpec] = []
    if not spec_dir.is_dir():
        log.debug("spec_dir_missing", path=str(spec_dir))
        return specs

    for path in sorted(spec_dir.glob("*.gemspec")):
        try:
            specs.append(parse_spec(json.loads(path.read_text()), root))
        except (OSError, json.JSONDecodeError, KeyError, ValueError, UserError) as e:
            log.warning("spec_unreadable", path=str(path), error=str(e))

    return specs


def load_index(root: Path) -> PackageIndex:
    """Load a single root, linking dependents within it."""
    return PackageIndex(root, link_dependents(read_specs(root)))


def load_indexes(
    env: PluckEnv, install_dir: Path | None = None, user_install: bool = False
) -> tuple[PackageIndex, PackageIndex | None]:
    """Load the home index and, when requested, the user index.

    Dependents are linked across both roots. An explicit ``install_dir``
    replaces the home root and disables the user root.

    Returns:
        ``(home_index, user_index_or_None)``.
    """
    start = time.perf_counter()
    home = Path(install_dir or env.home)
    use_user = user_install and install_dir is None

    home_specs = read_specs(home)
    user_specs = read_specs(env.user_home) if use_user else []

    linked = link_dependents(home_specs + user_specs)
    home_linked = linked[: len(home_specs)]
    user_linked = linked[len(home_specs):]

    duration_ms = int((time.perf_counter() - start) * 1000)
    log.info(
        "indexes_loaded",
        path=str(home),
        count=len(linked),
        user_install=use_user,
        duration_ms=duration_ms,
    )

    user_index = PackageIndex(env.user_home, user_linked) if use_user else None
    return PackageIndex(home, home_linked), user_index
