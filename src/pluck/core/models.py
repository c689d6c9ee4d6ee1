"""Data models for installed packages and removal requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator

from pluck.core.requirement import Requirement

PLATFORM_ANY = "any"


class ExecutableChoice(Enum):
    """Whether to remove a package's executables."""

    YES = "yes"
    NO = "no"
    ASK = "ask"


class DependencyType(Enum):
    """Enumeration of dependency types."""

    RUNTIME = "runtime"
    DEVELOPMENT = "development"


@dataclass(frozen=True)
class Dependency:
    """A declared requirement on another package."""

    name: str
    requirement: str = ">= 0"
    type: DependencyType = DependencyType.RUNTIME

    def matches(self, spec: PackageSpec) -> bool:
        """Check whether ``spec`` fulfils this dependency."""
        return spec.name == self.name and Requirement.parse(self.requirement).satisfied_by(spec.version)


@dataclass(frozen=True)
class Dependent:
    """An installed package that relies on another one."""

    name: str
    version: str
    dependency: Dependency
    satisfied_by: tuple[str, ...] = ()

    def describe(self) -> str:
        return (
            f"{self.name}-{self.version} depends on "
            f"[{self.dependency.name} ({self.dependency.requirement})]"
        )


@dataclass(frozen=True)
class PackageSpec:
    """Read-only descriptor of one installed package version."""

    name: str
    version: str
    install_root: Path
    platform: str = PLATFORM_ANY
    original_platform: str | None = None
    executables: tuple[str, ...] = ()
    dependencies: tuple[Dependency, ...] = ()
    dependents: tuple[Dependent, ...] = ()

    @property
    def full_name(self) -> str:
        if self.platform == PLATFORM_ANY:
            return f"{self.name}-{self.version}"
        return f"{self.name}-{self.version}-{self.platform}"

    @property
    def declared_platform(self) -> str:
        return self.original_platform or self.platform

    @property
    def original_name(self) -> str:
        """Full name as older releases spelled it, using the declared platform."""
        if self.declared_platform == PLATFORM_ANY:
            return f"{self.name}-{self.version}"
        return f"{self.name}-{self.version}-{self.declared_platform}"

    @property
    def legacy_name(self) -> str:
        """Always platform-qualified; used as a filename fallback."""
        return f"{self.name}-{self.version}-{self.declared_platform}"

    @property
    def spec_file_name(self) -> str:
        return f"{self.full_name}.gemspec"

    @property
    def file_name(self) -> str:
        return f"{self.full_name}.gem"

    @property
    def full_path(self) -> Path:
        """Install directory, preferring the legacy directory only if it is the one on disk."""
        path = self.install_root / "gems" / self.full_name
        legacy = self.install_root / "gems" / self.original_name
        if not path.exists() and legacy.exists():
            return legacy
        return path

    def runtime_dependencies(self) -> list[Dependency]:
        return [d for d in self.dependencies if d.type is DependencyType.RUNTIME]


@dataclass
class RemovalRequest:
    """What the caller asked to remove, and how."""

    name: str
    version: str | None = None
    install_dir: Path | None = None
    executables: ExecutableChoice = ExecutableChoice.ASK
    all_versions: bool = False
    ignore_dependencies: bool = False
    bin_dir: Path | None = None
    format_executable: bool = False
    user_install: bool = False

    @property
    def requirement(self) -> Requirement:
        return Requirement.parse(self.version)


@dataclass(frozen=True)
class RemovalContext:
    """Passed to every removal hook."""

    spec: PackageSpec
    request: RemovalRequest
    bin_dir: Path


@dataclass
class PendingSet:
    """Ordered specs still awaiting removal in one invocation.

    Each completed per-spec removal discards its own entry, so the set
    only ever shrinks.
    """

    _items: list[PackageSpec] = field(default_factory=list)

    @classmethod
    def of(cls, specs: Iterable[PackageSpec]) -> PendingSet:
        items: list[PackageSpec] = []
        for spec in specs:
            if spec not in items:
                items.append(spec)
        return cls(items)

    def snapshot(self) -> list[PackageSpec]:
        return list(self._items)

    def discard(self, spec: PackageSpec) -> None:
        if spec in self._items:
            self._items.remove(spec)

    def __contains__(self, spec: object) -> bool:
        return spec in self._items

    def __iter__(self) -> Iterator[PackageSpec]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
