"""Pre- and post-removal hook registry."""

from __future__ import annotations

from importlib.metadata import entry_points
from typing import Callable

from pluck.core.errors import HookFailureError
from pluck.core.logging import get_logger
from pluck.core.models import RemovalContext

log = get_logger(__name__)

Hook = Callable[[RemovalContext], object]

PLUGIN_GROUP = "pluck.plugins"


def _hook_name(hook: Hook) -> str:
    return getattr(hook, "__qualname__", None) or repr(hook)


class HookRegistry:
    """Append-only, ordered lists of removal hooks.

    Built once at startup, then shared by every removal in the process.
    """

    def __init__(self) -> None:
        self._pre: list[Hook] = []
        self._post: list[Hook] = []

    @property
    def pre_hooks(self) -> tuple[Hook, ...]:
        return tuple(self._pre)

    @property
    def post_hooks(self) -> tuple[Hook, ...]:
        return tuple(self._post)

    def register_pre(self, hook: Hook) -> Hook:
        """Register a hook run before anything is deleted. Usable as a decorator."""
        self._pre.append(hook)
        return hook

    def register_post(self, hook: Hook) -> Hook:
        """Register a hook run after a package is fully removed. Usable as a decorator."""
        self._post.append(hook)
        return hook

    def fire_pre(self, context: RemovalContext) -> None:
        self._fire("pre", self._pre, context)

    def fire_post(self, context: RemovalContext) -> None:
        self._fire("post", self._post, context)

    def _fire(self, stage: str, hooks: list[Hook], context: RemovalContext) -> None:
        for hook in list(hooks):
            name = _hook_name(hook)
            log.debug("hook_start", stage=stage, hook=name, package=context.spec.full_name)
            try:
                hook(context)
            except Exception as e:
                log.error(
                    "hook_failed",
                    stage=stage,
                    hook=name,
                    package=context.spec.full_name,
                    error=str(e),
                    exc_info=True,
                )
                raise HookFailureError(
                    hook=name,
                    stage=stage,
                    package=context.spec.full_name,
                    context={"error": str(e)},
                ) from e


def load_plugins(registry: HookRegistry, group: str = PLUGIN_GROUP) -> int:
    """Call every installed plugin entry point with ``registry``.

    Each entry point must resolve to a callable taking the registry,
    which it uses to register its hooks.

    Returns:
        The number of plugins loaded.
    """
    count = 0
    for ep in entry_points(group=group):
        plugin = ep.load()
        plugin(registry)
        count += 1
        log.info("plugin_loaded", plugin=ep.name, value=ep.value)
    return count
