"""Selection of the docset landing page."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Optional, Tuple

from .paths import normalize_path

DEFAULT_INDEX_FILE_NAME = "index.html"


@dataclass(frozen=True)
class IndexLocation:
    """Where the docset's landing page lives, relative to Documents."""

    file_name: str
    dir_path: str
    path: str


def split_index_path(raw: str) -> Tuple[str, str]:
    """Split a plugin-reported index path into ``(directory, file name)``."""
    normalized = normalize_path(raw, DEFAULT_INDEX_FILE_NAME)
    dir_path, file_name = posixpath.split(normalized)
    return dir_path, file_name


def select_index(
    explicit_file_name: Optional[str] = None,
    explicit_dir: Optional[str] = None,
    captured: Optional[Tuple[str, str]] = None,
) -> IndexLocation:
    """Pick the index page.

    An explicitly configured file name wins, then the one captured from the
    designated plugin, then ``index.html``. A configured directory always wins;
    the captured directory only applies together with the captured file name.
    """
    captured_dir, captured_file = captured if captured else ("", "")
    dir_path = (explicit_dir or "").replace("\\", "/")
    if explicit_file_name:
        file_name = explicit_file_name
    elif captured_file:
        file_name = captured_file
        dir_path = dir_path or captured_dir
    else:
        file_name = DEFAULT_INDEX_FILE_NAME

    joined = posixpath.normpath(posixpath.join(dir_path, file_name)) if dir_path else file_name
    path = normalize_path(joined, file_name)
    return IndexLocation(file_name=file_name, dir_path=dir_path, path=path)


__all__ = ["DEFAULT_INDEX_FILE_NAME", "IndexLocation", "select_index", "split_index_path"]
