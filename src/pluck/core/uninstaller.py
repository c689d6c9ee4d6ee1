"""Removal orchestration for installed packages.

An Uninstaller resolves which installed versions match a request, checks
that removing them keeps the other packages' dependencies satisfied, fires
the registered removal hooks and then deletes executables and artifacts.
Deletion is irreversible: a failure part way through a cascade leaves
earlier removals in place.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Iterable

from pluck.core.config import PluckEnv, bindir_for
from pluck.core.docs import DocDirectoryRemover, DocRemover
from pluck.core.errors import (
    DependencyConflictError,
    InvalidSelectionError,
    NotInstalledError,
    OwnershipViolationError,
    PermissionDeniedError,
)
from pluck.core.fs import is_writable, locate_cached, rm_f, rm_rf
from pluck.core.graph import DependencyGraph
from pluck.core.hooks import HookRegistry
from pluck.core.index import PackageIndex
from pluck.core.interaction import UserInteraction
from pluck.core.logging import get_logger
from pluck.core.models import (
    Dependent,
    ExecutableChoice,
    PackageSpec,
    PendingSet,
    RemovalContext,
    RemovalRequest,
)

log = get_logger(__name__)

GraphFactory = Callable[..., DependencyGraph]


class Uninstaller:
    """Removes the package versions matching a RemovalRequest."""

    def __init__(
        self,
        request: RemovalRequest,
        env: PluckEnv,
        home_index: PackageIndex,
        user_index: PackageIndex | None = None,
        *,
        ui: UserInteraction,
        hooks: HookRegistry,
        docs: DocRemover | None = None,
        graph_factory: GraphFactory = DependencyGraph.from_specs,
    ) -> None:
        self.request = request
        self.env = env
        self.home = Path(request.install_dir or env.home)
        self.home_index = home_index
        # the user root only applies when no explicit install dir was given
        self.user_install = (
            request.user_install and request.install_dir is None and user_index is not None
        )
        self.user_index = user_index if self.user_install else None
        self.ui = ui
        self.hooks = hooks
        self.docs = docs or DocDirectoryRemover()
        self.graph_factory = graph_factory
        self.spec: PackageSpec | None = None
        self.removed: list[PackageSpec] = []

    def resolve(self) -> list[PackageSpec]:
        """Find installed specs matching the request across the active roots.

        Raises:
            NotInstalledError: If nothing matches.
        """
        requirement = self.request.requirement
        found = self.home_index.find_by_name(self.request.name, requirement)
        if self.user_index is not None:
            found += self.user_index.find_by_name(self.request.name, requirement)

        log.info(
            "candidates_resolved",
            package=self.request.name,
            requirement=str(requirement),
            count=len(found),
        )

        if not found:
            raise NotInstalledError(package=self.request.name, requirement=self.request.version)
        return found

    def uninstall(self) -> list[PackageSpec]:
        """Remove what the request names, asking when several versions match.

        Returns:
            The specs that were removed, in removal order.
        """
        start = time.perf_counter()
        found = self.resolve()

        if len(found) > 1 and self.request.all_versions:
            self.remove_all(PendingSet.of(found))
        elif len(found) > 1:
            labels = [spec.full_name for spec in found] + ["All versions"]
            self.ui.notify()
            _, index = self.ui.choose_one("Select package to uninstall:", labels)

            if index == len(found):
                self.remove_all(PendingSet.of(found))
            elif 0 <= index < len(found):
                self.uninstall_spec(found[index], PendingSet.of(found))
            else:
                error = InvalidSelectionError(selection=index + 1, choices=len(found) + 1)
                log.warning("invalid_selection", package=self.request.name, **error.context)
                self.ui.notify(error.message)
        else:
            self.uninstall_spec(found[0], PendingSet.of(found))

        duration_ms = int((time.perf_counter() - start) * 1000)
        log.info(
            "uninstall_complete",
            package=self.request.name,
            count=len(self.removed),
            duration_ms=duration_ms,
        )
        return list(self.removed)

    def remove_all(self, pending: PendingSet) -> None:
        """Remove every spec in ``pending``.

        Works over a snapshot; ``pending`` itself shrinks as each spec goes.
        """
        log.info("cascade_start", count=len(pending))
        for spec in pending.snapshot():
            if spec in pending:
                self.uninstall_spec(spec, pending)

    def uninstall_spec(self, spec: PackageSpec, pending: PendingSet) -> None:
        """Run the full removal pipeline for one spec."""
        self.spec = spec
        try:
            if not self.dependencies_ok(spec) and not self.ask_if_ok(spec):
                raise DependencyConflictError(
                    package=spec.full_name,
                    dependents=[d.describe() for d in self.conflicting_dependents(spec)],
                )

            context = RemovalContext(spec=spec, request=self.request, bin_dir=self.bin_dir_for(spec))
            self.hooks.fire_pre(context)

            self.remove_executables(spec)
            self.remove(spec, pending)

            self.hooks.fire_post(context)
        finally:
            self.spec = None

    def bin_dir_for(self, spec: PackageSpec) -> Path:
        return self.request.bin_dir or bindir_for(spec.install_root)

    def dependency_graph(self) -> DependencyGraph:
        """Graph over the index snapshot taken at construction.

        Specs already removed earlier in the same cascade still count.
        """
        groups: list[Iterable[PackageSpec]] = [self.home_index.specs()]
        if self.user_index is not None:
            groups.append(self.user_index.specs())
        return self.graph_factory(*groups)

    def dependencies_ok(self, spec: PackageSpec) -> bool:
        if self.request.ignore_dependencies:
            return True

        ok = self.dependency_graph().ok_to_remove(spec.full_name)
        if not ok:
            log.warning("dependency_check_failed", package=spec.full_name)
        return ok

    def conflicting_dependents(self, spec: PackageSpec) -> list[Dependent]:
        return self.dependency_graph().unmet_dependents(spec)

    def ask_if_ok(self, spec: PackageSpec) -> bool:
        msg = [""]
        msg.append("You have requested to uninstall the package:")
        msg.append(f"\t{spec.full_name}")
        for dependent in self.conflicting_dependents(spec):
            msg.append(dependent.describe())
        msg.append("If you remove this package, one or more dependencies will not be met.")
        msg.append("Continue with Uninstall?")
        return self.ui.confirm("\n".join(msg), True)

    def formatted_program_filename(self, filename: str) -> str:
        if self.request.format_executable:
            return self.env.exec_format % Path(filename).name
        return filename

    def remove_executables(self, spec: PackageSpec) -> None:
        """Remove the executables only this version of ``spec`` provides.

        An executable still declared by another installed version of the
        same package is never deleted, even when other declared names are
        removed alongside it. Deleting every declared name as soon as one
        of them is unshared would break the remaining versions. The prompt
        lists everything the spec declares.

        Raises:
            PermissionDeniedError: If the bin directory is not writable.
        """
        if not spec.executables:
            return

        bindir = self.bin_dir_for(spec)

        others = [s for s in self.home_index.find_by_name(spec.name) if s.version != spec.version]
        retained = [e for e in spec.executables if not any(e in s.executables for s in others)]

        if not retained:
            log.info("executables_kept", package=spec.full_name, reason="shared")
            return

        if self.request.executables is ExecutableChoice.ASK:
            remove = self.ui.confirm(
                "Remove executables:\n"
                f"\t{', '.join(spec.executables)}\n\n"
                "in addition to the package?",
                True,
            )
        else:
            remove = self.request.executables is ExecutableChoice.YES

        if not remove:
            log.info("executables_kept", package=spec.full_name, reason="declined")
            self.ui.notify("Executables and scripts will remain installed.")
            return

        if not is_writable(bindir):
            raise PermissionDeniedError(path=str(bindir))

        for exe_name in retained:
            self.ui.notify(f"Removing {exe_name}")
            program = self.formatted_program_filename(exe_name)
            rm_f(bindir / program)
            rm_f(bindir / f"{program}.bat")

        log.info(
            "executables_removed",
            package=spec.full_name,
            path=str(bindir),
            count=len(retained),
        )

    def path_ok(self, root: Path, spec: PackageSpec) -> bool:
        """Is ``spec`` installed under ``root``?

        The install directory itself is not resolved, so a symlinked
        package directory inside ``root/gems`` still counts as owned.
        """
        path = spec.full_path
        actual = path.parent.resolve() / path.name
        gems = root.resolve() / "gems"
        return actual in (gems / spec.full_name, gems / spec.original_name)

    def remove(self, spec: PackageSpec, pending: PendingSet) -> None:
        """Delete the install directory, metadata file, cached file and docs.

        Side effect: ``spec`` is discarded from ``pending`` once removed.

        Raises:
            OwnershipViolationError: If ``spec`` is not under a configured root.
            PermissionDeniedError: If its install root is not writable.
        """
        owned = self.path_ok(self.home, spec) or (
            self.user_install and self.path_ok(self.env.user_home, spec)
        )
        if not owned:
            log.error(
                "ownership_violation",
                package=spec.full_name,
                path=str(spec.full_path),
                root=str(self.home),
            )
            raise OwnershipViolationError(
                root=str(self.home), package=spec.full_name, path=str(spec.full_path)
            )

        if not is_writable(spec.install_root):
            raise PermissionDeniedError(path=str(spec.install_root))

        rm_rf(spec.full_path)

        spec_dir = spec.install_root / "specifications"
        metadata = spec_dir / spec.spec_file_name
        if not metadata.exists():
            metadata = spec_dir / f"{spec.legacy_name}.gemspec"
        rm_rf(metadata)

        cached = locate_cached(spec.file_name, spec.install_root)
        if not cached.exists():
            cached = locate_cached(f"{spec.legacy_name}.gem", spec.install_root)
        rm_rf(cached)

        self.docs.remove_docs(spec)

        log.info("artifact_removed", package=spec.full_name, path=str(spec.full_path))
        self.ui.notify(f"Successfully uninstalled {spec.full_name}")

        self.removed.append(spec)
        pending.discard(spec)
