"""Logging utilities for docsync commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "docsync"
_CONSOLE_FORMAT = "[{label}] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(process)d %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the docsync hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def _console_handler(label: str) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT.format(label=label)))
    return handler


def _file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    return handler


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    label: str = _LOGGER_NAME,
) -> logging.Logger:
    """Point the docsync logger at the console and, optionally, a log file.

    ``label`` prefixes console lines. The watch server and the ``sync``
    child processes it spawns share one terminal, so each command tags its
    own output. The file sink records the process id for the same reason.
    Calling this again replaces (and closes) the handlers of the last call.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    for stale in list(logger.handlers):
        logger.removeHandler(stale)
        stale.close()

    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)
    logger.propagate = False

    handlers = [_console_handler(label)]
    if log_file is not None:
        handlers.append(_file_handler(log_file))
    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
