"""Accumulation of manifest fields contributed across plugins."""

from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Tuple


class ManifestAccumulator:
    """Ordered multi-value mapping: every contributed value is kept, per key."""

    def __init__(self) -> None:
        self._values: Dict[str, List[str]] = {}

    def add(self, fragment: Mapping[str, object]) -> None:
        for key, value in fragment.items():
            if value is None:
                continue
            self._values.setdefault(str(key), []).append(value if isinstance(value, str) else str(value))

    def get(self, key: str) -> List[str]:
        return list(self._values.get(key, []))

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        for key, values in self._values.items():
            yield key, list(values)

    def as_dict(self) -> Dict[str, List[str]]:
        return {key: list(values) for key, values in self._values.items()}

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values


__all__ = ["ManifestAccumulator"]
