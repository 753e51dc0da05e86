"""CLI behaviour tests."""

from __future__ import annotations

import pytest

from docsetgen.cli import _build_parser, main


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "build"])
    assert args.verbose is True
    assert args.command == "build"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["build", "--verbose"])
    assert args.verbose is True


def test_cli_accepts_dry_run_and_config() -> None:
    parser = _build_parser()
    args = parser.parse_args(["build", "docs", "--dry-run", "--config", "alt.yml"])
    assert args.dry_run is True
    assert str(args.config) == "alt.yml"
    assert args.path == "docs"


def test_main_builds_docset(project, capsys) -> None:
    project.html("site/index.html", "site/a.html")
    project.configure({"identifier": "demo", "docs_path": "site", "entries": {"Class": {"A": "a.html"}}})

    main(["build", str(project.path())])

    out = capsys.readouterr().out
    assert "with 1 entries" in out
    assert (project.path().resolve() / "demo.docset" / "Contents" / "Info.plist").is_file()


def test_main_reports_missing_references(project, capsys) -> None:
    project.configure({"identifier": "demo", "entries": {"Class": {"A": "missing.html"}}})

    with pytest.raises(SystemExit) as excinfo:
        main(["build", str(project.path())])

    assert excinfo.value.code == 1
    assert "missing.html" in capsys.readouterr().err


def test_main_reports_invalid_configuration(project, capsys) -> None:
    project.write({".docset.yml": "plugins: directory\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["build", str(project.path())])

    assert excinfo.value.code == 1
    assert "Invalid configuration" in capsys.readouterr().err
