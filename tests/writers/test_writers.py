"""Tests for docset serialization."""

from __future__ import annotations

import plistlib
import sqlite3
import tarfile
from pathlib import Path

from docsetgen.models import Entry
from docsetgen.stores import ManifestAccumulator
from docsetgen.writers import (
    DocsetLayout,
    build_info_plist,
    copy_icons,
    create_archive,
    write_info_plist,
    write_search_index,
)


def test_search_index_ignores_duplicates_and_index_entry(tmp_path: Path) -> None:
    db_path = tmp_path / "docSet.dsidx"
    entries = [
        Entry(name="index", type=None, path="index.html"),
        Entry(name="Foo", type="Class", path="a.html"),
        Entry(name="Foo", type="Class", path="a.html"),
        Entry(name="bar", type="Function", path="a.html#bar"),
    ]

    assert write_search_index(entries, db_path) == 2

    conn = sqlite3.connect(str(db_path))
    try:
        rows = conn.execute("SELECT name, type, path FROM searchIndex ORDER BY id").fetchall()
        indexes = conn.execute("SELECT name FROM sqlite_master WHERE type = 'index'").fetchall()
    finally:
        conn.close()
    assert rows == [("Foo", "Class", "a.html"), ("bar", "Function", "a.html#bar")]
    assert ("anchor",) in indexes


def test_search_index_replaces_existing_file(tmp_path: Path) -> None:
    db_path = tmp_path / "docSet.dsidx"
    write_search_index([Entry(name="Old", type="Class", path="old.html")], db_path)
    write_search_index([Entry(name="New", type="Class", path="new.html")], db_path)
    conn = sqlite3.connect(str(db_path))
    try:
        names = [row[0] for row in conn.execute("SELECT name FROM searchIndex")]
    finally:
        conn.close()
    assert names == ["New"]


def test_info_plist_includes_required_and_accumulated_fields(tmp_path: Path) -> None:
    additions = ManifestAccumulator()
    additions.add({"DashDocSetFamily": "dashtoc", "DashDocSetKeyword": "a<b>&c"})
    additions.add({"DashDocSetKeyword": "second"})
    additions.add({"CFBundleName": "hijacked"})

    plist = build_info_plist(
        identifier="mylib",
        name="My Lib",
        platform_family="mylib",
        index_path="api\\index.html",
        javascript_enabled=True,
        fallback_url="https://example.org/docs/",
        additions=additions,
    )
    path = write_info_plist(plist, tmp_path / "Contents" / "Info.plist")

    raw = path.read_text(encoding="utf-8")
    assert "a&lt;b&gt;&amp;c" in raw

    with path.open("rb") as handle:
        loaded = plistlib.load(handle)
    assert loaded["CFBundleIdentifier"] == "mylib"
    assert loaded["CFBundleName"] == "My Lib"
    assert loaded["isDashDocset"] is True
    assert loaded["isJavaScriptEnabled"] is True
    assert loaded["dashIndexFilePath"] == "api/index.html"
    assert loaded["DashDocSetFallbackURL"] == "https://example.org/docs/"
    assert loaded["DashDocSetFamily"] == "dashtoc"
    assert loaded["DashDocSetKeyword"] == ["a<b>&c", "second"]


def test_info_plist_omits_fallback_url_when_unset() -> None:
    plist = build_info_plist(identifier="x", name="x", platform_family="x", index_path="index.html")
    assert "DashDocSetFallbackURL" not in plist
    assert plist["isJavaScriptEnabled"] is False


def test_layout_reset_wipes_previous_build(tmp_path: Path) -> None:
    layout = DocsetLayout(output_path=tmp_path, identifier="mylib")
    layout.documents.mkdir(parents=True)
    (layout.documents / "stale.html").write_text("old", encoding="utf-8")
    layout.archive.write_bytes(b"old")

    layout.reset()

    assert layout.base == tmp_path / "mylib.docset"
    assert layout.documents.is_dir()
    assert not (layout.documents / "stale.html").exists()
    assert not layout.archive.exists()


def test_copy_icons_skips_missing_files(tmp_path: Path, caplog) -> None:
    icons = tmp_path / "icons"
    icons.mkdir()
    (icons / "icon.png").write_bytes(b"png")
    layout = DocsetLayout(output_path=tmp_path / "out", identifier="mylib")
    layout.reset()

    with caplog.at_level("WARNING", logger="docsetgen"):
        copied = copy_icons(icons, layout)

    assert copied == [layout.base / "icon.png"]
    assert "icon@2x.png does not exist" in caplog.text


def test_create_archive_packs_docset(tmp_path: Path) -> None:
    layout = DocsetLayout(output_path=tmp_path, identifier="mylib")
    layout.reset()
    (layout.documents / "index.html").write_text("<html></html>", encoding="utf-8")
    archive = create_archive(layout)

    assert archive == tmp_path / "mylib.docset.tgz"

    archive = create_archive(layout)

    with tarfile.open(archive, "r:gz") as handle:
        names = handle.getnames()
    assert "mylib.docset/Contents/Resources/Documents/index.html" in names
    assert not any(name.endswith(".DS_Store") for name in names)
