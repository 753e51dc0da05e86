"""SQLite search index (``docSet.dsidx``) writer."""

from __future__ import annotations

import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Iterable

from ..logging import get_logger
from ..models import Entry

_SCHEMA = (
    "CREATE TABLE searchIndex(id INTEGER PRIMARY KEY, name TEXT, type TEXT, path TEXT)",
    "CREATE UNIQUE INDEX anchor ON searchIndex (name, type, path)",
)

logger = get_logger("writers.search_index")


def write_search_index(entries: Iterable[Entry], path: Path) -> int:
    """Write typed entries to a fresh index database and return the stored row count.

    Rows go in with ``INSERT OR IGNORE`` so the unique ``(name, type, path)``
    index drops duplicates instead of failing the build. The untyped index entry
    is never written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        path.unlink()

    rows = [(entry.name, entry.type, entry.path) for entry in entries if entry.type is not None]
    with closing(sqlite3.connect(str(path))) as conn:
        with conn:
            for statement in _SCHEMA:
                conn.execute(statement)
            conn.executemany(
                "INSERT OR IGNORE INTO searchIndex(name, type, path) VALUES (?, ?, ?)",
                rows,
            )
        (count,) = conn.execute("SELECT COUNT(*) FROM searchIndex").fetchone()

    if count != len(rows):
        logger.debug("Ignored %d duplicate index rows", len(rows) - count)
    logger.info("Wrote %d entries to %s", count, path.name)
    return int(count)


__all__ = ["write_search_index"]
