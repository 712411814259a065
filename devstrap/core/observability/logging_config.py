"""
Process-wide logging for the devstrap CLI.

``main.py`` calls ``setup_logging`` once; modules only ever do
``logger = logging.getLogger(__name__)``.

Console level precedence:
    --debug  >  --verbose  >  --quiet  >  DEVSTRAP_LOG_LEVEL  >  WARNING

DEVSTRAP_LOG_FILE adds a file handler, at DEVSTRAP_LOG_FILE_LEVEL if set.
"""

from __future__ import annotations

import logging
import sys

# (max level, format, datefmt) for the console, most verbose first
_CONSOLE_FORMATS = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_CONSOLE_DEFAULT = ("%(message)s", None)

_FILE_FORMAT = ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%Y-%m-%d %H:%M:%S")

def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env_level: str | None = None,
) -> str:
    """Console level name from the CLI flags, falling back to the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return env_level or "WARNING"

def _to_level(name: str | None) -> int:
    level = logging.getLevelName(name.upper()) if name else logging.WARNING
    return level if isinstance(level, int) else logging.WARNING

def _console_formatter(level: int) -> logging.Formatter:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter(*_CONSOLE_DEFAULT)

def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Install the stderr handler (and the optional file handler) on the root logger.

    Args:
        level: Console level name.
        log_file: Also log to this file.
        log_file_level: File level name; defaults to ``level``.
    """
    console_level = _to_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _to_level(log_file_level) if log_file_level else console_level
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(*_FILE_FORMAT))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)

    logging.raiseExceptions = False
