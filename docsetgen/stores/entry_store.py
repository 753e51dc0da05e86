"""Namespace of docset entries keyed by (name, type, path)."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from ..models import INDEX_KEY, EntriesByType, Entry
from ..paths import normalize_path

_Key = Tuple[str, Optional[str], str]


class EntryStore:
    """Ordered, additive collection of entries with at most one record per triple."""

    def __init__(self) -> None:
        self._entries: List[Entry] = []
        self._keys: Set[_Key] = set()
        self._types: Dict[str, None] = {}
        self._index: Optional[Entry] = None

    @classmethod
    def from_contributions(
        cls,
        contributions: Iterable[EntriesByType],
        *,
        index_file_name: str,
        base_dir: Optional[str] = None,
    ) -> "EntryStore":
        """Build a store by merging contributions in the order they were reported."""
        store = cls()
        for entries in contributions:
            store.merge(entries, index_file_name=index_file_name, base_dir=base_dir)
        return store

    def insert(self, type: str, name: str, path: str, raw_path: Optional[str] = None) -> bool:
        """Append an entry unless the exact (name, type, path) triple is already stored."""
        key = (name, type, path)
        if key in self._keys:
            return False
        self._keys.add(key)
        self._types.setdefault(type, None)
        self._entries.append(Entry(name=name, type=type, path=path, raw_path=raw_path or path))
        return True

    def set_index(self, path: str, raw_path: Optional[str] = None) -> None:
        self._index = Entry(name=INDEX_KEY, type=None, path=path, raw_path=raw_path or path)

    def merge(
        self,
        entries: EntriesByType,
        *,
        index_file_name: str,
        base_dir: Optional[str] = None,
    ) -> int:
        """Normalize and insert one contribution; returns the number of new entries."""
        added = 0
        for type_name, named in entries.items():
            if type_name == INDEX_KEY:
                if isinstance(named, str) and named:
                    self.set_index(normalize_path(named, index_file_name, base_dir), named)
                continue
            if not isinstance(named, Mapping):
                raise TypeError(
                    f"Entries for type '{type_name}' must map names to paths, got {type(named).__name__}"
                )
            for name, paths in named.items():
                for raw in _as_paths(paths):
                    path = normalize_path(raw, index_file_name, base_dir)
                    if self.insert(type_name, str(name), path, raw):
                        added += 1
        return added

    @property
    def index(self) -> Optional[Entry]:
        return self._index

    def types(self) -> List[str]:
        return list(self._types)

    def entries(self, type: Optional[str] = None) -> List[Entry]:
        if type is None:
            return list(self._entries)
        return [entry for entry in self._entries if entry.type == type]

    def all_references(self) -> Iterator[Entry]:
        """Yield the index entry (when set) followed by every typed entry."""
        if self._index is not None:
            yield self._index
        yield from self._entries

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._keys


def _as_paths(value: object) -> Sequence[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        for item in value:
            if not isinstance(item, str):
                raise TypeError(f"Entry paths must be strings, got {type(item).__name__} in list")
        return list(value)
    raise TypeError(f"Entry path must be a string or list of strings, got {type(value).__name__}")


__all__ = ["EntryStore"]
