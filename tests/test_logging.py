"""Tests for docsetgen.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from docsetgen.config import DocsetConfig
from docsetgen.logging import configure_logging, get_logger, plugin_scope
from docsetgen.models import PluginDescriptor
from docsetgen.orchestrator import Orchestrator


def _flush() -> None:
    for handler in logging.getLogger("docsetgen").handlers:
        handler.flush()


def test_plugin_scope_tags_console_and_file_records(tmp_path: Path, capsys) -> None:
    log_file = tmp_path / "logs" / "build.log"
    configure_logging(log_file=log_file)
    logger = get_logger("plugins.sample")

    with plugin_scope("sphinx"):
        logger.info("rendering pages")
    logger.info("after plugins")
    _flush()

    err = capsys.readouterr().err
    assert "[docsetgen] INFO <sphinx> rendering pages" in err
    assert "[docsetgen] INFO after plugins" in err
    text = log_file.read_text(encoding="utf-8")
    assert "[sphinx] docsetgen.plugins.sample: rendering pages" in text
    assert "[-] docsetgen.plugins.sample: after plugins" in text


def test_orchestrator_scopes_records_to_running_plugin(tmp_path: Path) -> None:
    log_file = tmp_path / "build.log"
    configure_logging(verbose=True, log_file=log_file)

    def noisy(context):
        get_logger("plugins.noisy").warning("no pages found")
        return {"entries": {}}

    orchestrator = Orchestrator(
        plugins=[PluginDescriptor(name="noisy", plugin=noisy, options={}, use_as_index=False)]
    )
    orchestrator.run_build(config=DocsetConfig(root=tmp_path, identifier="demo"))
    _flush()

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert any("[noisy] docsetgen.plugins.noisy: no pages found" in line for line in lines)
    assert any("[-] docsetgen.orchestrator: Running plugin noisy" in line for line in lines)
