"""Helper utilities for constructing temporary documentation projects in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Mapping

import yaml

from docsetgen.config import CONFIG_FILE_NAME


class ProjectBuilder:
    """Writes HTML trees and a .docset.yml into a throwaway project directory."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")

    def html(self, *relative_paths: str) -> None:
        """Write minimal HTML pages at the given project-relative paths."""
        self.write({relative: f"<html><body>{relative}</body></html>\n" for relative in relative_paths})

    def configure(self, data: Mapping[str, Any]) -> Path:
        path = self.root / CONFIG_FILE_NAME
        path.write_text(yaml.safe_dump(dict(data), sort_keys=False), encoding="utf-8")
        return path

    def path(self) -> Path:
        return self.root


__all__ = ["ProjectBuilder"]
