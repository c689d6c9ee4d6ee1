"""CLI entry point for pluck."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from pluck.cli.prompts import ConsoleUI
from pluck.cli.renderers import console, spec_table
from pluck.core.config import discover_env
from pluck.core.errors import (
    EXIT_SYSTEM_ERROR,
    EXIT_USER_ERROR,
    PluckError,
    SystemError,
    UserError,
    format_error_message,
)
from pluck.core.hooks import HookRegistry, load_plugins
from pluck.core.logging import configure_logging, get_logger
from pluck.core.models import ExecutableChoice, RemovalRequest
from pluck.core.uninstaller import Uninstaller
from pluck.providers.spec_files import load_indexes

log = get_logger(__name__)

app = typer.Typer(help="pluck: remove installed packages safely.")


def handle_error(error: Exception) -> int:
    """Handle errors and return appropriate exit codes.

    Args:
        error: The exception to handle.

    Returns:
        An integer exit code.
    """
    if isinstance(error, PluckError):
        log.error(
            "cli_error",
            error_type=type(error).__name__,
            message=error.message,
            context=error.context,
            exc_info=True
        )
        console.print(f"\n{format_error_message(error)}\n", style="bold red", markup=False)

        if isinstance(error, UserError):
            return EXIT_USER_ERROR
        elif isinstance(error, SystemError):
            return EXIT_SYSTEM_ERROR
        else:
            return EXIT_USER_ERROR
    else:
        log.error(
            "unexpected_error",
            error=str(error),
            exc_info=True
        )
        console.print(
            f"\n⚠️ Unexpected error occurred: {error}\n",
            style="bold red",
            markup=False
        )
        return EXIT_SYSTEM_ERROR


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to the console")) -> None:
    """Remove installed packages safely."""
    if verbose:
        configure_logging(level="DEBUG", enable_console=True, force=True)


@app.command()
def uninstall(
    name: str,
    version: Optional[str] = typer.Option(
        None, "--version", "-V", help="Requirement the versions must meet, e.g. '~> 1.2'"
    ),
    all_versions: bool = typer.Option(False, "--all", "-a", help="Remove every matching version"),
    ignore_dependencies: bool = typer.Option(
        False, "--ignore-dependencies", "-I", help="Skip the dependency check"
    ),
    executables: Optional[bool] = typer.Option(
        None, "--executables/--no-executables", help="Remove executables without asking"
    ),
    bin_dir: Optional[Path] = typer.Option(None, "--bin-dir", help="Directory holding executables"),
    format_executable: bool = typer.Option(
        False, "--format-executable", help="Apply PLUCK_EXEC_FORMAT to executable names"
    ),
    user_install: bool = typer.Option(False, "--user-install", help="Also search the user root"),
    install_dir: Optional[Path] = typer.Option(
        None, "--install-dir", "-i", help="Root to uninstall from instead of PLUCK_HOME"
    ),
) -> None:
    """Uninstall a package.

    Args:
        name: Name of the package.
    """
    try:
        if executables is None:
            choice = ExecutableChoice.ASK
        else:
            choice = ExecutableChoice.YES if executables else ExecutableChoice.NO

        request = RemovalRequest(
            name=name,
            version=version,
            install_dir=install_dir,
            executables=choice,
            all_versions=all_versions,
            ignore_dependencies=ignore_dependencies,
            bin_dir=bin_dir,
            format_executable=format_executable,
            user_install=user_install,
        )

        env = discover_env()
        home_index, user_index = load_indexes(env, install_dir, user_install)

        hooks = HookRegistry()
        load_plugins(hooks)

        uninstaller = Uninstaller(
            request, env, home_index, user_index, ui=ConsoleUI(console), hooks=hooks
        )
        uninstaller.uninstall()
    except Exception as e:
        sys.exit(handle_error(e))


@app.command("list")
def list_installed(
    name: Optional[str] = typer.Argument(None, help="Only show this package"),
    user_install: bool = typer.Option(False, "--user-install", help="Include the user root"),
    install_dir: Optional[Path] = typer.Option(None, "--install-dir", "-i", help="Root to list"),
) -> None:
    """List installed package versions.

    Args:
        name: Optional package name to filter by.
    """
    try:
        env = discover_env()
        home_index, user_index = load_indexes(env, install_dir, user_install)

        specs = home_index.specs()
        if user_index is not None:
            specs += user_index.specs()
        if name:
            specs = [s for s in specs if s.name == name]

        console.print(spec_table(specs))
    except Exception as e:
        sys.exit(handle_error(e))


if __name__ == "__main__":
    app()
