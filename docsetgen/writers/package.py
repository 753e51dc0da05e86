"""On-disk docset layout, icons, and archive."""

from __future__ import annotations

import shutil
import tarfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..logging import get_logger

ICON_FILES = ("icon.png", "icon@2x.png")

logger = get_logger("writers.package")


@dataclass(frozen=True)
class DocsetLayout:
    """Paths of a ``<identifier>.docset`` bundle under an output directory."""

    output_path: Path
    identifier: str

    @property
    def base(self) -> Path:
        return self.output_path / f"{self.identifier}.docset"

    @property
    def archive(self) -> Path:
        return self.output_path / f"{self.identifier}.docset.tgz"

    @property
    def contents(self) -> Path:
        return self.base / "Contents"

    @property
    def resources(self) -> Path:
        return self.contents / "Resources"

    @property
    def documents(self) -> Path:
        return self.resources / "Documents"

    @property
    def info_plist(self) -> Path:
        return self.contents / "Info.plist"

    @property
    def search_index(self) -> Path:
        return self.resources / "docSet.dsidx"

    def reset(self) -> None:
        """Remove any previous bundle and archive, then recreate the Documents tree."""
        if self.base.exists():
            shutil.rmtree(self.base)
        if self.archive.exists():
            self.archive.unlink()
        self.documents.mkdir(parents=True, exist_ok=True)


def copy_tree(source: Path, destination: Path) -> None:
    if not source.is_dir():
        raise FileNotFoundError(f"Documentation source {source} is not a directory")
    shutil.copytree(source, destination, dirs_exist_ok=True)


def copy_icons(icons_path: Optional[Path], layout: DocsetLayout) -> List[Path]:
    """Copy ``icon.png`` and ``icon@2x.png`` next to ``Contents``; missing icons are warnings."""
    if icons_path is None:
        return []
    copied: List[Path] = []
    for file_name in ICON_FILES:
        source = icons_path / file_name
        if not source.is_file():
            logger.warning("%s does not exist", source)
            continue
        target = layout.base / file_name
        shutil.copyfile(source, target)
        copied.append(target)
    return copied


def create_archive(layout: DocsetLayout) -> Path:
    """Pack the docset bundle into ``<identifier>.docset.tgz``, excluding macOS metadata files."""

    def _exclude(info: tarfile.TarInfo) -> Optional[tarfile.TarInfo]:
        return None if Path(info.name).name == ".DS_Store" else info

    with tarfile.open(layout.archive, "w:gz") as archive:
        archive.add(layout.base, arcname=layout.base.name, filter=_exclude)
    logger.info("Archived docset to %s", layout.archive)
    return layout.archive


__all__ = ["DocsetLayout", "ICON_FILES", "copy_icons", "copy_tree", "create_archive"]
