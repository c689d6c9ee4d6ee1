"""Removal of generated package documentation."""

from __future__ import annotations

from typing import Protocol

from pluck.core.fs import rm_rf
from pluck.core.logging import get_logger
from pluck.core.models import PackageSpec

log = get_logger(__name__)


class DocRemover(Protocol):
    """Protocol for documentation removal collaborators."""

    def remove_docs(self, spec: PackageSpec) -> None:
        """Remove any documentation generated for ``spec``."""
        ...


class DocDirectoryRemover:
    """Deletes ``<root>/doc/<full_name>``."""

    def remove_docs(self, spec: PackageSpec) -> None:
        path = spec.install_root / "doc" / spec.full_name
        if rm_rf(path):
            log.info("docs_removed", package=spec.full_name, path=str(path))
