"""Plugin implementations and discovery utilities."""

from __future__ import annotations

import importlib
from importlib import metadata
from typing import Callable, Dict, Iterable, List, Sequence

from ..config import PluginConfig
from ..models import PluginDescriptor
from .base import Plugin, PluginExecutionError, as_callable, coerce_result, in_event_loop, run_plugin
from .directory import DirectoryPlugin

_ENTRY_POINT_GROUP = "docsetgen.plugins"

_BUILTIN_FACTORIES: Dict[str, Callable[[], object]] = {
    "directory": DirectoryPlugin,
}


def load_plugins(configs: Sequence[PluginConfig]) -> List[PluginDescriptor]:
    """Resolve configured plugin names, in order, into descriptors."""

    entry_points = {entry.name.lower(): entry for entry in _iter_entry_points()}
    descriptors: List[PluginDescriptor] = []
    missing: List[str] = []

    for config in configs:
        key = config.name.lower()
        if key in _BUILTIN_FACTORIES:
            plugin = _BUILTIN_FACTORIES[key]()
        elif key in entry_points:
            try:
                loaded = entry_points[key].load()
            except Exception as exc:  # pragma: no cover - defensive guard
                raise RuntimeError(f"Failed to load plugin entry point '{config.name}': {exc}") from exc
            plugin = _instantiate(loaded)
        elif ":" in config.name:
            plugin = _instantiate(_import_spec(config.name))
        else:
            missing.append(config.name)
            continue
        as_callable(plugin)
        descriptors.append(
            PluginDescriptor(
                name=config.name,
                plugin=plugin,
                options=dict(config.options),
                use_as_index=config.use_as_index,
            )
        )

    if missing:
        raise ValueError(f"Unknown plugins requested: {', '.join(sorted(missing))}")

    return descriptors


def _instantiate(obj: object) -> object:
    if isinstance(obj, type):
        return obj()
    return obj


def _import_spec(spec: str) -> object:
    module_name, _, attr = spec.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ValueError(f"Cannot import plugin module '{module_name}': {exc}") from exc
    target: object = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ValueError(f"Plugin '{spec}' not found: {exc}") from exc
    return target


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "DirectoryPlugin",
    "Plugin",
    "PluginExecutionError",
    "as_callable",
    "coerce_result",
    "in_event_loop",
    "load_plugins",
    "run_plugin",
]
