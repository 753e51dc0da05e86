"""Plugin contract and result coercion."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Mapping, Protocol, Union

from ..models import PluginContext, PluginResult

PluginOutput = Union[PluginResult, Mapping[str, Any]]
PluginCallable = Callable[[PluginContext], Union[PluginOutput, Awaitable[PluginOutput]]]


class Plugin(Protocol):
    """Anything exposing ``execute(context)``; plain callables are accepted too."""

    def execute(self, context: PluginContext) -> Union[PluginOutput, Awaitable[PluginOutput]]:
        """Inspect a documentation source and report entries plus manifest additions."""


class PluginExecutionError(RuntimeError):
    """Raised when a plugin fails; the original error is chained as ``__cause__``."""

    def __init__(self, plugin_name: str, position: int, cause: BaseException) -> None:
        super().__init__(f"Plugin '{plugin_name}' (#{position + 1}) failed: {cause}")
        self.plugin_name = plugin_name
        self.position = position


def as_callable(obj: object) -> PluginCallable:
    """Return the callable to invoke for a plugin object, class, or function."""
    if isinstance(obj, type):
        obj = obj()
    execute = getattr(obj, "execute", None)
    if callable(execute):
        return execute
    if callable(obj):
        return obj  # type: ignore[return-value]
    raise TypeError("Plugin must be callable or define execute(context)")


def run_plugin(plugin: object, context: PluginContext) -> PluginResult:
    """Invoke a plugin and normalize whatever it returns."""
    output = as_callable(plugin)(context)
    if inspect.isawaitable(output):
        if in_event_loop():
            if inspect.iscoroutine(output):
                output.close()
            raise RuntimeError(
                "Async plugins cannot run inside an active event loop; "
                "call the build from synchronous code or via asyncio.to_thread()"
            )
        output = asyncio.run(_await(output))
    return coerce_result(output)


def in_event_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


async def _await(awaitable: Awaitable[PluginOutput]) -> PluginOutput:
    return await awaitable


def coerce_result(output: object) -> PluginResult:
    if isinstance(output, PluginResult):
        return output
    if not isinstance(output, Mapping):
        raise TypeError(f"Plugin returned {type(output).__name__}; expected a mapping with 'entries'")
    entries = output.get("entries") or {}
    if not isinstance(entries, Mapping):
        raise TypeError("Plugin 'entries' must be a mapping of entry types")
    manifest = output.get("manifest")
    if manifest is None:
        manifest = output.get("plist") or {}
    if not isinstance(manifest, Mapping):
        raise TypeError("Plugin 'manifest' must be a mapping of manifest keys")
    return PluginResult(entries=dict(entries), manifest={str(k): v for k, v in manifest.items()})


__all__ = [
    "Plugin",
    "PluginCallable",
    "PluginExecutionError",
    "as_callable",
    "coerce_result",
    "in_event_loop",
    "run_plugin",
]
