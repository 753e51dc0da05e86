"""Tests for the manifest accumulator."""

from __future__ import annotations

from docsetgen.stores import ManifestAccumulator


def test_values_accumulate_per_key_in_contribution_order() -> None:
    manifest = ManifestAccumulator()
    manifest.add({"DashDocSetKeyword": "alpha", "DashDocSetFamily": "dashtoc"})
    manifest.add({"DashDocSetKeyword": "beta"})

    assert manifest.get("DashDocSetKeyword") == ["alpha", "beta"]
    assert manifest.as_dict() == {
        "DashDocSetKeyword": ["alpha", "beta"],
        "DashDocSetFamily": ["dashtoc"],
    }
    assert list(key for key, _ in manifest.items()) == ["DashDocSetKeyword", "DashDocSetFamily"]
    assert len(manifest) == 2


def test_identical_values_are_all_retained() -> None:
    manifest = ManifestAccumulator()
    manifest.add({"key": "same"})
    manifest.add({"key": "same"})
    assert manifest.get("key") == ["same", "same"]


def test_non_string_values_are_coerced_and_none_skipped() -> None:
    manifest = ManifestAccumulator()
    manifest.add({"count": 3, "skipped": None})
    assert manifest.get("count") == ["3"]
    assert "skipped" not in manifest
    assert manifest.get("missing") == []
