"""Snapshot of the packages installed under one root."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from pluck.core.models import PackageSpec
from pluck.core.requirement import Requirement, version_key


class PackageIndex:
    """Maps package names to the specs found under a single root.

    The index is a snapshot: it is not refreshed while a removal runs.
    """

    def __init__(self, root: Path, specs: Iterable[PackageSpec] = ()) -> None:
        self.root = root
        self._by_name: dict[str, list[PackageSpec]] = {}
        for spec in specs:
            self._by_name.setdefault(spec.name, []).append(spec)
        for versions in self._by_name.values():
            versions.sort(key=lambda s: (version_key(s.version), s.platform))

    def find_by_name(
        self, name: str, requirement: Requirement | str | None = None
    ) -> list[PackageSpec]:
        """Find specs named ``name`` whose version meets ``requirement``.

        Args:
            name: Exact package name.
            requirement: A Requirement, requirement text, or None for any version.

        Returns:
            Matching specs, oldest version first.
        """
        if not isinstance(requirement, Requirement):
            requirement = Requirement.parse(requirement)
        return [s for s in self._by_name.get(name, []) if requirement.satisfied_by(s.version)]

    def specs(self) -> list[PackageSpec]:
        return [spec for versions in self._by_name.values() for spec in versions]

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_name.values())
