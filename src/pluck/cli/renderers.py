"""Renderers for displaying installed packages in the CLI using Rich."""

from __future__ import annotations

from typing import Iterable

from rich import box
from rich.console import Console
from rich.table import Table

from pluck.core.models import PackageSpec

console = Console()


def spec_table(specs: Iterable[PackageSpec]) -> Table:
    """Create a Rich Table listing installed package versions.

    Args:
        specs: The specs to display.

    Returns:
        A Rich Table with one row per spec.
    """
    table = Table(box=box.MINIMAL_HEAVY_HEAD)
    table.add_column("Name", style="bold")
    table.add_column("Version")
    table.add_column("Platform")
    table.add_column("Executables")
    table.add_column("Required by", style="dim")
    table.add_column("Root", style="dim")

    for spec in specs:
        table.add_row(
            spec.name,
            spec.version,
            spec.declared_platform,
            ", ".join(spec.executables),
            ", ".join(f"{d.name}-{d.version}" for d in spec.dependents),
            str(spec.install_root),
        )

    return table
