"""Path canonicalization for docset entries."""

from __future__ import annotations

import posixpath
import re
from pathlib import Path
from typing import Optional

_SEPARATOR_ANCHOR = re.compile(r"[\\/]+#")
_ROOTED = re.compile(r"^\.?/")


def normalize_path(raw: str, index_file_name: str, base_dir: Optional[str] = None) -> str:
    """Turn a plugin-reported path into a docset-relative path.

    Applied in order: ``dir/#frag`` collapses to ``dir#frag``, backslashes become
    forward slashes, a trailing separator points at ``index_file_name``, paths
    not rooted with ``./`` or ``/`` are joined onto ``base_dir`` (when given) and
    collapsed, and any leading ``/`` is dropped. Bare ``#fragment`` references are
    left for the reference validator to resolve against the index page.

    Without ``base_dir`` the result is a fixed point of this function.
    """
    path = _SEPARATOR_ANCHOR.sub("#", raw)
    path = path.replace("\\", "/")
    if path.endswith("/"):
        path = path + index_file_name
    if base_dir and path and not path.startswith("#") and not _ROOTED.match(path):
        base = base_dir.replace("\\", "/")
        path = posixpath.normpath(posixpath.join(base, path))
    return path.lstrip("/")


def strip_anchor(path: str) -> str:
    """Return ``path`` without its ``#fragment``."""
    return path.split("#", 1)[0]


def is_anchor_only(path: str) -> bool:
    return path.startswith("#")


def resolve_user_path(path: str | Path, working_dir: Path) -> Path:
    """Resolve a configured filesystem path against the build's working directory."""
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = working_dir / candidate
    return candidate.resolve()


__all__ = ["is_anchor_only", "normalize_path", "resolve_user_path", "strip_anchor"]
