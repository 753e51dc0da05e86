"""In-memory stores folded together by the build orchestrator."""

from .entry_store import EntryStore
from .manifest import ManifestAccumulator

__all__ = ["EntryStore", "ManifestAccumulator"]
