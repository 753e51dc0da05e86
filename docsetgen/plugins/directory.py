"""Built-in plugin that includes a pre-rendered HTML tree and reports configured entries."""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Any, Dict, Mapping

from ..logging import get_logger
from ..models import INDEX_KEY, PluginContext, PluginResult
from ..paths import resolve_user_path


class DirectoryPlugin:
    """Copies ``path`` into the docset and reports entries relative to it.

    Options:
        path: directory to include (relative to the working directory).
        root_dir_name: optional sub-directory of Documents to copy into; entry
            and index paths are prefixed with it.
        entries: ``{type: {name: path}}`` reported as-is (after prefixing).
        index: landing page path inside ``path``.
        manifest: extra Info.plist keys.
    """

    name = "directory"

    def __init__(self) -> None:
        self.logger = get_logger("plugins.directory")

    def execute(self, context: PluginContext) -> PluginResult:
        options = context.plugin_options
        root_dir_name = _optional_str(options.get("root_dir_name"))
        source = options.get("path")
        if source:
            source_path = resolve_user_path(str(source), Path(context.working_dir))
            self.logger.debug("Including %s", source_path)
            context.include(path=source_path, root_dir_name=root_dir_name)

        entries: Dict[str, Any] = {}
        configured = options.get("entries") or {}
        if not isinstance(configured, Mapping):
            raise TypeError("directory plugin 'entries' option must be a mapping")
        for type_name, named in configured.items():
            if not isinstance(named, Mapping):
                raise TypeError(f"directory plugin entries for '{type_name}' must be a mapping")
            entries[str(type_name)] = {
                str(name): _prefixed(root_dir_name, str(path)) for name, path in named.items()
            }

        index = _optional_str(options.get("index"))
        if index:
            entries[INDEX_KEY] = _prefixed(root_dir_name, index)

        manifest = options.get("manifest") or {}
        if not isinstance(manifest, Mapping):
            raise TypeError("directory plugin 'manifest' option must be a mapping")
        return PluginResult(entries=entries, manifest={str(k): str(v) for k, v in manifest.items()})


def _prefixed(root_dir_name: str | None, path: str) -> str:
    if not root_dir_name or path.startswith(("#", "/")):
        return path
    return posixpath.join(root_dir_name, path)


def _optional_str(value: object) -> str | None:
    return str(value) if isinstance(value, str) and value else None


__all__ = ["DirectoryPlugin"]
