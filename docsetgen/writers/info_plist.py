"""``Info.plist`` construction for the docset manifest."""

from __future__ import annotations

import plistlib
from pathlib import Path
from typing import Any, Dict, Optional

from ..logging import get_logger
from ..stores import ManifestAccumulator

logger = get_logger("writers.info_plist")


def build_info_plist(
    *,
    identifier: str,
    name: str,
    platform_family: str,
    index_path: str,
    javascript_enabled: bool = False,
    fallback_url: Optional[str] = None,
    additions: Optional[ManifestAccumulator] = None,
) -> Dict[str, Any]:
    """Return the manifest mapping: required identity fields, then accumulated keys.

    An accumulated key with a single contributed value is stored as a string;
    several values become an array in contribution order. Accumulated keys may
    not replace required fields.
    """
    plist: Dict[str, Any] = {
        "CFBundleIdentifier": identifier,
        "CFBundleName": name,
        "DocSetPlatformFamily": platform_family,
        "isDashDocset": True,
        "dashIndexFilePath": index_path.replace("\\", "/"),
        "isJavaScriptEnabled": bool(javascript_enabled),
    }
    if fallback_url:
        plist["DashDocSetFallbackURL"] = fallback_url

    if additions is not None:
        for key, values in additions.items():
            if key in plist:
                logger.warning("Ignoring manifest addition '%s'; the key is reserved", key)
                continue
            plist[key] = values[0] if len(values) == 1 else values
    return plist


def write_info_plist(plist: Dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as handle:
        plistlib.dump(plist, handle, sort_keys=False)
    logger.info("Wrote %s", path.name)
    return path


__all__ = ["build_info_plist", "write_info_plist"]
