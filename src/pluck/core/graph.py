"""Dependency bookkeeping used by the removal safety check."""

from __future__ import annotations

import dataclasses
from typing import Iterable

from pluck.core.models import Dependent, PackageSpec


def link_dependents(specs: Iterable[PackageSpec]) -> list[PackageSpec]:
    """Return copies of ``specs`` with their ``dependents`` filled in.

    A dependent is any other spec declaring a runtime dependency that the
    spec satisfies. ``satisfied_by`` lists every loaded version meeting it.
    """
    specs = list(specs)
    linked = []
    for spec in specs:
        dependents = []
        for other in specs:
            if other is spec:
                continue
            for dep in other.runtime_dependencies():
                if dep.matches(spec):
                    satisfied = tuple(s.version for s in specs if dep.matches(s))
                    dependents.append(Dependent(other.name, other.version, dep, satisfied))
        linked.append(dataclasses.replace(spec, dependents=tuple(dependents)))
    return linked


class DependencyGraph:
    """Answers whether a spec can go without breaking the others."""

    def __init__(self, specs: Iterable[PackageSpec]) -> None:
        self.specs = list(specs)

    @classmethod
    def from_specs(cls, *groups: Iterable[PackageSpec]) -> DependencyGraph:
        return cls(spec for group in groups for spec in group)

    def find(self, full_name: str) -> PackageSpec | None:
        for spec in self.specs:
            if spec.full_name == full_name:
                return spec
        return None

    def siblings(self, target: PackageSpec) -> list[PackageSpec]:
        """Other installed versions of the same package."""
        return [
            s for s in self.specs if s.name == target.name and s.full_name != target.full_name
        ]

    def ok_to_remove(self, full_name: str) -> bool:
        """True when every dependency the spec satisfies is also met by a sibling.

        Siblings are other installed versions of the same package. Specs
        the graph does not know about are always safe to remove.
        """
        target = self.find(full_name)
        if target is None:
            return True

        siblings = self.siblings(target)
        needed = [
            dep
            for spec in self.specs
            for dep in spec.runtime_dependencies()
            if dep.matches(target)
        ]
        return all(any(dep.matches(s) for s in siblings) for dep in needed)

    def unmet_dependents(self, spec: PackageSpec) -> list[Dependent]:
        """Dependents of ``spec`` that no sibling version would satisfy."""
        siblings = self.siblings(spec)
        return [
            d for d in spec.dependents if not any(d.dependency.matches(s) for s in siblings)
        ]
