"""Module defining custom exceptions for pluck."""

from __future__ import annotations

from typing import Any, Self

# Exit Codes
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1
EXIT_SYSTEM_ERROR = 2


class PluckError(Exception):
    """Base exception class with context propagation.

    All exceptions raised by pluck inherit from this class.
    Context is a dictionary that accumulates relevant information
    as the exception propagates up the call stack.

    Example:
        raise PluckError("An error occurred", context={"package": "foo-1.0"})

        # Or with context propagation
        try:
            ...
        except PluckError as e:
            raise e.with_context(operation="uninstall")
    """
    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def with_context(self, **new_context: Any) -> Self:
        """Merge additional context into the exception.

        Args:
            **new_context: Additional context to add to the exception.

        Returns:
            The same exception instance with merged context.
        """
        self.context.update(new_context)
        return self

    def __str__(self) -> str:
        """String representation of the exception including context."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


class UserError(PluckError):
    """Errors caused by user input or decisions.

    These should not be retried without the user changing the request
    or answering a prompt differently.
    """
    pass


class SystemError(PluckError):
    """Errors due to the state of the filesystem or environment.

    Typically a permission problem or a package that lives somewhere
    pluck does not manage. Requires user or system intervention.
    """
    pass


## Specific Exceptions ##

class NotInstalledError(UserError):
    """No installed package matched the requested name and version."""
    def __init__(
        self,
        message: str | None = None,
        package: str | None = None,
        requirement: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if package:
            ctx["package"] = package
        if requirement:
            ctx["requirement"] = requirement

        if message is None:
            message = f"Cannot uninstall '{package or 'unknown'}': no matching version is installed"

        super().__init__(message, context=ctx)


class InvalidSelectionError(UserError):
    """A menu selection fell outside the offered range.

    This is reported to the user rather than raised; the invocation
    simply removes nothing.
    """
    def __init__(
        self,
        message: str | None = None,
        selection: int | None = None,
        choices: int | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if selection is not None:
            ctx["selection"] = selection
        if choices is not None:
            ctx["choices"] = choices

        if message is None:
            message = f"Error: must enter a number [1-{choices or '?'}]"

        super().__init__(message, context=ctx)


class DependencyConflictError(UserError):
    """Removal was refused because other installed packages depend on it."""
    def __init__(
        self,
        message: str | None = None,
        package: str | None = None,
        dependents: list[str] | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if package:
            ctx["package"] = package
        if dependents:
            ctx["dependents"] = ", ".join(dependents)

        if message is None:
            message = "Uninstallation aborted due to dependent package(s)"

        super().__init__(message, context=ctx)


class OwnershipViolationError(SystemError):
    """The package's install path is not under a configured root.

    Nothing is deleted when this is raised.
    """
    def __init__(
        self,
        message: str | None = None,
        package: str | None = None,
        root: str | None = None,
        path: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if package:
            ctx["package"] = package
        if root:
            ctx["root"] = root
        if path:
            ctx["path"] = path

        if message is None:
            message = f"Package is not installed in directory {root or 'unknown'}"

        super().__init__(message, context=ctx)


class PermissionDeniedError(SystemError):
    """A directory that must be modified is not writable."""
    def __init__(
        self,
        message: str | None = None,
        path: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if path:
            ctx["path"] = path

        if message is None:
            message = f"You don't have write permissions for {path or 'unknown'}"

        super().__init__(message, context=ctx)


class HookFailureError(SystemError):
    """A pre- or post-removal hook raised an exception."""
    def __init__(
        self,
        message: str | None = None,
        hook: str | None = None,
        stage: str | None = None,
        package: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if hook:
            ctx["hook"] = hook
        if stage:
            ctx["stage"] = stage
        if package:
            ctx["package"] = package

        if message is None:
            message = f"{stage or 'Removal'} hook {hook or 'unknown'} failed"

        super().__init__(message, context=ctx)


# CLI Error Message Templates

ERROR_TEMPLATES = {
    NotInstalledError: (
        "❌ {message}\n"
        "   Suggestion: Try 'pluck list {package}' to see installed versions"
    ),
    DependencyConflictError: (
        "❌ {message}\n"
        "   Required by: {dependents}"
    ),
    OwnershipViolationError: (
        "⚠️ {message}\n"
        "   Package path: {path}"
    ),
    PermissionDeniedError: (
        "⚠️ Permission denied: {path}\n"
        "   Fix: Re-run with sufficient privileges or choose another --install-dir"
    ),
    HookFailureError: (
        "⚠️ {message}\n"
        "   Package: {package}\n"
        "   Error: {error}"
    ),
    UserError: (
        "❌ {message}"
    ),
    SystemError: (
        "⚠️ System error: {message}\n"
        "   Please check your system configuration and try again"
    ),
    PluckError: (
        "❌ {message}"
    ),
}


def format_error_message(error: PluckError) -> str:
    """Formats an error message for CLI display based on the error type.

    Args:
        error: The PluckError instance to format.

    Returns:
        A formatted string message for CLI display.
    """
    template = ERROR_TEMPLATES.get(type(error), ERROR_TEMPLATES[PluckError])
    try:
        return template.format(message=error.message, **getattr(error, "context", {}))
    except KeyError:
        return f"❌ {error.message}"
