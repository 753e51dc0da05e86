"""Configuration loading for docsetgen (.docset.yml)."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

CONFIG_FILE_NAME = ".docset.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class PluginConfig:
    """One entry of the ``plugins`` list."""

    name: str
    options: Dict[str, Any] = field(default_factory=dict)
    use_as_index: bool = False


@dataclass
class DocsetConfig:
    """Represents the settings defined in .docset.yml."""

    root: Path
    identifier: Optional[str] = None
    name: Optional[str] = None
    platform_family: Optional[str] = None
    javascript_enabled: bool = False
    fallback_url: Optional[str] = None
    output_path: Optional[str] = None
    docs_path: Optional[str] = None
    icons_path: Optional[str] = None
    index_file_name: Optional[str] = None
    index_file_dir_path: Optional[str] = None
    archive: bool = False
    entries: Dict[str, Any] = field(default_factory=dict)
    plugins: List[PluginConfig] = field(default_factory=list)
    dry_run: bool = False

    @property
    def docset_identifier(self) -> str:
        return self.identifier or default_identifier(self.root)

    @property
    def docset_name(self) -> str:
        return self.name or self.docset_identifier

    @property
    def docset_platform_family(self) -> str:
        return self.platform_family or self.docset_identifier


def load_config(config_path: Path) -> DocsetConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DocsetConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a mapping at the root")

    entries = data.get("entries")
    if entries is None:
        entries = {}
    if not isinstance(entries, dict):
        raise ConfigError("'entries' must be a mapping of entry types")

    return DocsetConfig(
        root=root,
        identifier=_as_str(data.get("identifier")),
        name=_as_str(data.get("name")),
        platform_family=_as_str(data.get("platform_family")),
        javascript_enabled=_as_bool(data.get("javascript_enabled")) or False,
        fallback_url=_as_str(data.get("fallback_url")),
        output_path=_as_str(data.get("output_path")),
        docs_path=_as_str(data.get("docs_path")),
        icons_path=_as_str(data.get("icons_path")),
        index_file_name=_as_str(data.get("index_file_name")),
        index_file_dir_path=_as_str(data.get("index_file_dir_path")),
        archive=_as_bool(data.get("archive")) or False,
        entries=entries,
        plugins=_parse_plugins(data.get("plugins")),
    )


def default_identifier(root: Path) -> str:
    """Fall back to ``[project].name`` from pyproject.toml, else the directory name."""
    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        try:
            data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"Failed to read project name from {pyproject}: {exc}") from exc
        name = data.get("project", {}).get("name")
        if isinstance(name, str) and name:
            return name
    return root.name or "docset"


def _parse_plugins(value: Any) -> List[PluginConfig]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError("'plugins' must be a list")
    plugins: List[PluginConfig] = []
    for position, item in enumerate(value):
        if isinstance(item, str):
            plugins.append(PluginConfig(name=item))
            continue
        if not isinstance(item, dict):
            raise ConfigError(f"Plugin #{position + 1} must be a name or a mapping")
        name = _as_str(item.get("name"))
        if not name:
            raise ConfigError(f"Plugin #{position + 1} is missing a name")
        options = item.get("options") or {}
        if not isinstance(options, dict):
            raise ConfigError(f"Options for plugin '{name}' must be a mapping")
        plugins.append(
            PluginConfig(
                name=name,
                options=options,
                use_as_index=_as_bool(item.get("use_as_index")) or False,
            )
        )
    return plugins


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = ["CONFIG_FILE_NAME", "ConfigError", "DocsetConfig", "PluginConfig", "default_identifier", "load_config"]
