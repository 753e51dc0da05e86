"""Build orchestration: plugins, merge, index selection, validation, packaging."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .config import DocsetConfig, load_config
from .index import IndexLocation, select_index, split_index_path
from .logging import get_logger, plugin_scope
from .models import EntriesByType, PluginContext, PluginDescriptor
from .paths import resolve_user_path
from .plugins import PluginExecutionError, in_event_loop, load_plugins, run_plugin
from .stores import EntryStore, ManifestAccumulator
from .validators import ReferenceValidator
from .writers import DocsetLayout, build_info_plist, copy_icons, create_archive, write_info_plist, write_search_index
from .writers.package import copy_tree

TMP_DIR_NAME = "._docset_tmp"


class BuildState(Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class TempFolderAllocator:
    """Hands out unique, not-yet-created folders under a private root."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self._count = 0

    def __call__(self) -> Path:
        self._count += 1
        return self.root / str(self._count)

    @property
    def count(self) -> int:
        return self._count


@dataclass
class PluginRunOutcome:
    """What the plugin phase contributed, in orchestration order."""

    contributions: List[EntriesByType] = field(default_factory=list)
    manifest: ManifestAccumulator = field(default_factory=ManifestAccumulator)
    captured_index: Optional[Tuple[str, str]] = None
    index_claimed_by: Optional[str] = None


@dataclass
class BuildResult:
    """Summary of a completed build."""

    layout: DocsetLayout
    index: IndexLocation
    entries: EntryStore
    manifest: ManifestAccumulator
    references: List[str]
    dry_run: bool
    archive: Optional[Path] = None


class Orchestrator:
    """Runs plugins in order and assembles their output into a validated docset."""

    def __init__(self, plugins: Optional[Sequence[PluginDescriptor]] = None) -> None:
        self._plugin_overrides = list(plugins) if plugins is not None else None
        self.logger = get_logger("orchestrator")
        self.state = BuildState.PENDING
        self.current_plugin: Optional[int] = None

    def run_build(
        self,
        path: str | Path = ".",
        *,
        config: DocsetConfig | None = None,
        dry_run: bool = False,
        cli_args: Mapping[str, Any] | None = None,
    ) -> BuildResult:
        """Build ``<identifier>.docset`` from the configuration at ``path``.

        Blocking; async plugins get their own event loop, so callers already
        inside one should use ``asyncio.to_thread(orchestrator.run_build, ...)``.
        """
        if in_event_loop():
            raise RuntimeError("run_build() cannot be called from a running event loop; use asyncio.to_thread()")
        if config is None:
            config = load_config(Path(path))
        config = replace(config, dry_run=dry_run)
        working_dir = config.root
        output_path = resolve_user_path(config.output_path, working_dir) if config.output_path else working_dir
        layout = DocsetLayout(output_path=output_path, identifier=config.docset_identifier)

        self.state = BuildState.PENDING
        self.current_plugin = None
        self.logger.info("Building %s (dry-run=%s)", layout.base, dry_run)

        try:
            layout.reset()
            plugins = self._resolve_plugins(config)
            outcome = self.run_plugins(
                plugins,
                config=config,
                layout=layout,
                cli_args=dict(cli_args or {}),
            )

            if config.docs_path:
                docs_path = resolve_user_path(config.docs_path, working_dir)
                self.logger.info("Copying %s to %s", docs_path, layout.documents)
                copy_tree(docs_path, layout.documents)

            index = select_index(
                config.index_file_name,
                config.index_file_dir_path,
                outcome.captured_index,
            )
            self.logger.debug("Index page: %s", index.path)

            store = EntryStore.from_contributions(
                outcome.contributions,
                index_file_name=index.file_name,
                base_dir=config.index_file_dir_path,
            )
            self.logger.info("Validating %d entries", len(store) + (1 if store.index else 0))
            references = ReferenceValidator(layout.documents, index.path).validate(store.all_references())

            self.logger.info("Creating search index")
            write_search_index(store, layout.search_index)
            self.logger.info("Creating Info.plist")
            plist = build_info_plist(
                identifier=config.docset_identifier,
                name=config.docset_name,
                platform_family=config.docset_platform_family,
                index_path=index.path,
                javascript_enabled=config.javascript_enabled,
                fallback_url=config.fallback_url,
                additions=outcome.manifest,
            )
            write_info_plist(plist, layout.info_plist)

            if config.icons_path:
                self.logger.info("Copying icons")
                copy_icons(resolve_user_path(config.icons_path, working_dir), layout)

            archive = create_archive(layout) if config.archive else None
        except Exception as exc:
            self.state = BuildState.FAILED
            self._log_exception("Docset build failed", exc)
            raise

        self.state = BuildState.COMPLETED
        self.current_plugin = None
        self.logger.info("Docset created at %s", layout.base)
        return BuildResult(
            layout=layout,
            index=index,
            entries=store,
            manifest=outcome.manifest,
            references=references,
            dry_run=dry_run,
            archive=archive,
        )

    def run_plugins(
        self,
        plugins: Sequence[PluginDescriptor],
        *,
        config: DocsetConfig,
        layout: DocsetLayout,
        cli_args: Mapping[str, Any],
    ) -> PluginRunOutcome:
        """Execute plugins sequentially and fold their output together.

        Seed entries from the configuration come first. The private temp root is
        removed afterwards whether or not a plugin failed.
        """
        outcome = PluginRunOutcome()
        if config.entries:
            outcome.contributions.append(config.entries)

        working_dir = config.root
        tmp_root = working_dir / TMP_DIR_NAME

        def include(path: str | Path, root_dir_name: str | None = None) -> None:
            if config.dry_run:
                self.logger.debug("Dry-run: skipping include of %s", path)
                return
            destination = layout.documents / root_dir_name if root_dir_name else layout.documents
            source = resolve_user_path(path, working_dir)
            self.logger.debug("Including %s into %s", source, destination)
            copy_tree(source, destination)

        self.state = BuildState.RUNNING
        try:
            for position, descriptor in enumerate(plugins):
                self.current_plugin = position
                self.logger.info("Running plugin %s (%d/%d)", descriptor.name, position + 1, len(plugins))
                context = PluginContext(
                    cli_args=cli_args,
                    create_tmp_folder=TempFolderAllocator(tmp_root / str(position + 1)),
                    include=include,
                    plugin_options=descriptor.options,
                    main_options=config,
                    working_dir=working_dir,
                    dry_run=config.dry_run,
                )
                try:
                    with plugin_scope(descriptor.name):
                        result = run_plugin(descriptor.plugin, context)
                except Exception as exc:
                    raise PluginExecutionError(descriptor.name, position, exc) from exc

                outcome.contributions.append(result.entries)
                outcome.manifest.add(result.manifest)
                self._capture_index(outcome, descriptor, result.index, single=len(plugins) == 1)
        finally:
            self._cleanup(tmp_root)
        return outcome

    def _capture_index(
        self,
        outcome: PluginRunOutcome,
        descriptor: PluginDescriptor,
        reported: Optional[str],
        *,
        single: bool,
    ) -> None:
        if not reported or not (descriptor.use_as_index or single):
            return
        if outcome.captured_index is not None:
            self.logger.debug(
                "Plugin %s also claims the index; keeping %s's",
                descriptor.name,
                outcome.index_claimed_by,
            )
            return
        outcome.captured_index = split_index_path(reported)
        outcome.index_claimed_by = descriptor.name

    def _resolve_plugins(self, config: DocsetConfig) -> List[PluginDescriptor]:
        if self._plugin_overrides is not None:
            return list(self._plugin_overrides)
        return load_plugins(config.plugins)

    def _cleanup(self, tmp_root: Path) -> None:
        if not tmp_root.exists():
            return
        try:
            shutil.rmtree(tmp_root)
        except OSError as exc:
            self.logger.warning("Failed to remove temporary folder %s: %s", tmp_root, exc)

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)


def build_docset(
    path: str | Path = ".",
    *,
    dry_run: bool = False,
    cli_args: Mapping[str, Any] | None = None,
) -> BuildResult:
    """Convenience wrapper around :meth:`Orchestrator.run_build`."""
    return Orchestrator().run_build(path, dry_run=dry_run, cli_args=cli_args)


__all__ = [
    "BuildResult",
    "BuildState",
    "Orchestrator",
    "PluginRunOutcome",
    "TempFolderAllocator",
    "build_docset",
]
