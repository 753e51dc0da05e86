"""Serialization of the assembled docset: search index, manifest, layout."""

from .info_plist import build_info_plist, write_info_plist
from .package import DocsetLayout, copy_icons, create_archive
from .search_index import write_search_index

__all__ = [
    "DocsetLayout",
    "build_info_plist",
    "copy_icons",
    "create_archive",
    "write_info_plist",
    "write_search_index",
]
