"""
Logging setup for the ``aegis`` command.

Called once by the CLI before any command runs. Modules log through
``logging.getLogger(__name__)`` and inherit what is configured here.

Console level, highest precedence first:
    --debug  >  --verbose  >  --quiet  >  AEGIS_LOG_LEVEL  >  WARNING

AEGIS_LOG_FILE adds a file handler (level from AEGIS_LOG_FILE_LEVEL,
else the console level). Progress lines and errors meant for the
operator are printed by the CLI itself, not logged.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "AEGIS_LOG_LEVEL"
ENV_FILE = "AEGIS_LOG_FILE"
ENV_FILE_LEVEL = "AEGIS_LOG_FILE_LEVEL"

_FMT_CONSOLE = "%(message)s"
_FMT_INFO = "%(asctime)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"
_DATEFMT_CONSOLE = "%H:%M:%S"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# apscheduler is only used to parse cron expressions
_NOISY_LOGGERS = ("apscheduler", "tzlocal")


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name.
        log_file: Optional log file path; defaults to ``$AEGIS_LOG_FILE``.
        log_file_level: Level for the file; defaults to
            ``$AEGIS_LOG_FILE_LEVEL``, then ``level``.
        quiet_third_party: Hold library loggers at WARNING below DEBUG.
    """
    numeric_level = _parse_level(level)
    log_file = log_file or os.environ.get(ENV_FILE) or None
    log_file_level = log_file_level or os.environ.get(ENV_FILE_LEVEL) or None

    if numeric_level <= logging.DEBUG:
        fmt = _FMT_DEBUG
    elif numeric_level <= logging.INFO:
        fmt = _FMT_INFO
    else:
        fmt = _FMT_CONSOLE

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=_DATEFMT_CONSOLE))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; anything unknown is WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
