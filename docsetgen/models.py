"""Core data models shared across docsetgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Sequence, Union

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .config import DocsetConfig

INDEX_KEY = "index"

# type -> name -> path(s); the "index" key maps straight to a single path.
EntriesByType = Mapping[str, Union[str, Mapping[str, Union[str, Sequence[str]]]]]
ManifestFragment = Mapping[str, str]


@dataclass(frozen=True)
class Entry:
    """A named, typed reference to a location inside the docset."""

    name: str
    type: Optional[str]
    path: str
    raw_path: str = ""

    @property
    def key(self) -> tuple[str, Optional[str], str]:
        return (self.name, self.type, self.path)

    @property
    def is_index(self) -> bool:
        return self.type is None

    def describe(self) -> str:
        if self.type is None:
            return f"[{self.name}] {self.path}"
        return f"{self.type} > {self.name} ({self.path})"


@dataclass
class PluginResult:
    """Entries and manifest additions returned by one plugin run."""

    entries: Dict[str, Any] = field(default_factory=dict)
    manifest: Dict[str, str] = field(default_factory=dict)

    @property
    def index(self) -> Optional[str]:
        value = self.entries.get(INDEX_KEY)
        return value if isinstance(value, str) and value else None


@dataclass
class PluginContext:
    """Scoped working context handed to a plugin for a single build."""

    cli_args: Mapping[str, Any]
    create_tmp_folder: Callable[[], Path]
    include: Callable[..., None]
    plugin_options: Mapping[str, Any]
    main_options: "DocsetConfig"
    working_dir: Path
    dry_run: bool = False


@dataclass
class PluginDescriptor:
    """A configured plugin: the callable plus its options and index claim."""

    name: str
    plugin: Any
    options: Dict[str, Any] = field(default_factory=dict)
    use_as_index: bool = False
