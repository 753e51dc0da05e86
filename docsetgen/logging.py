"""Logging utilities for docsetgen builds."""

from __future__ import annotations

import contextlib
import contextvars
import logging
from pathlib import Path
from typing import Iterator

_LOGGER_NAME = "docsetgen"

_current_plugin: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "docsetgen_plugin", default=None
)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the docsetgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


@contextlib.contextmanager
def plugin_scope(name: str) -> Iterator[None]:
    """Tag every record logged inside the block with the running plugin's name."""
    token = _current_plugin.set(name)
    try:
        yield
    finally:
        _current_plugin.reset(token)


class PluginContextFilter(logging.Filter):
    """Adds ``plugin`` and ``plugin_prefix`` attributes to log records.

    Plugins log through their own loggers, so the tag is attached at the
    handler rather than on the ``docsetgen`` logger.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        plugin = _current_plugin.get()
        record.plugin = plugin or "-"
        record.plugin_prefix = f"<{plugin}> " if plugin else ""
        return True


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the docsetgen logger with console output and optional file sink.

    Records emitted while a plugin runs carry its name, on the console as a
    ``<name>`` prefix and in the file sink as a dedicated column.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations in one process do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    context_filter = PluginContextFilter()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.addFilter(context_filter)
    stream_handler.setFormatter(
        logging.Formatter("[docsetgen] %(levelname)s %(plugin_prefix)s%(message)s")
    )
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.addFilter(context_filter)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(plugin)s] %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["PluginContextFilter", "configure_logging", "get_logger", "plugin_scope"]
