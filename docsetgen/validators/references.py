"""Reference validation against the materialized Documents tree."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional
from urllib.parse import quote

from ..logging import get_logger
from ..models import Entry
from ..paths import is_anchor_only, strip_anchor


@dataclass(frozen=True)
class MissingReference:
    """An entry whose target file does not exist under the Documents root."""

    entry: Entry
    resolved_path: str
    checked_path: Path


class MissingReferenceError(RuntimeError):
    """Raised when an entry points at a file that is not part of the docset."""

    def __init__(self, missing: MissingReference) -> None:
        entry = missing.entry
        label = f"{entry.type} > {entry.name}" if entry.type else f"[{entry.name}]"
        super().__init__(f"{label}: {missing.resolved_path} not found ({missing.checked_path})")
        self.entry = entry
        self.resolved_path = missing.resolved_path
        self.checked_path = missing.checked_path


class ReferenceValidator:
    """Ensures every entry resolves to a real file inside the docset."""

    def __init__(self, documents_root: Path, index_path: str) -> None:
        self.documents_root = Path(documents_root)
        self.index_path = index_path
        self.logger = get_logger("validators.references")

    def resolve(self, entry: Entry) -> str:
        """Return the entry path with bare ``#anchors`` pointed at the index page."""
        if is_anchor_only(entry.path) and self.index_path:
            return self.index_path + entry.path
        return entry.path

    def iter_missing(self, entries: Iterable[Entry]) -> Iterator[MissingReference]:
        for entry in entries:
            missing = self._check(entry)
            if missing is not None:
                yield missing

    def validate(self, entries: Iterable[Entry]) -> List[str]:
        """Raise on the first dangling entry; otherwise return ``file://`` URIs of all targets."""
        uris: List[str] = []
        for entry in entries:
            missing = self._check(entry)
            if missing is not None:
                raise MissingReferenceError(missing)
            resolved = self.resolve(entry)
            anchor = resolved[len(strip_anchor(resolved)):]
            uri = "file://" + quote(self._target(resolved).as_posix()) + anchor
            self.logger.debug("%s\n\t%s", entry.describe(), uri)
            uris.append(uri)
        return uris

    def _check(self, entry: Entry) -> Optional[MissingReference]:
        resolved = self.resolve(entry)
        candidate = self._target(resolved)
        # Targets must live inside Documents; ``..`` may not escape the bundle.
        inside = candidate.resolve().is_relative_to(self.documents_root.resolve())
        if inside and candidate.is_file():
            return None
        return MissingReference(entry=entry, resolved_path=resolved, checked_path=candidate)

    def _target(self, resolved: str) -> Path:
        return self.documents_root / strip_anchor(resolved)


__all__ = ["MissingReference", "MissingReferenceError", "ReferenceValidator"]
