"""
Logging configuration, set up once by the CLI.

Every module logs through ``logging.getLogger(__name__)`` and inherits
what is configured here. Console output goes to stderr so that the
``sources`` and ``bin`` commands keep stdout machine readable.

Level precedence:
    --debug  >  -v / -q  >  VESSEL_LOG_LEVEL  >  INFO

An extra log file can be requested with VESSEL_LOG_FILE and its level
set separately with VESSEL_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

DEFAULT_LEVEL = "INFO"

ENV_LEVEL = "VESSEL_LOG_LEVEL"
ENV_FILE = "VESSEL_LOG_FILE"
ENV_FILE_LEVEL = "VESSEL_LOG_FILE_LEVEL"

# INFO and up: progress messages, printed as-is
_FMT_PLAIN = "%(message)s"

# DEBUG: where each message came from
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

_NOISY_LOGGERS = ("urllib3", "charset_normalizer")


def resolve_level(
    flag_level: str | None = None, environ: Mapping[str, str] | None = None
) -> str:
    """Pick the console level from a CLI flag, the environment, or the default."""
    if flag_level:
        return flag_level
    env = os.environ if environ is None else environ
    return env.get(ENV_LEVEL) or DEFAULT_LEVEL


def setup_logging(
    level: str = DEFAULT_LEVEL,
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure logging for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path of a file to log to as well.
        log_file_level: Level for the file, defaulting to ``level``.
        quiet_third_party: Keep chatty libraries at WARNING unless at DEBUG.
    """
    numeric_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    if numeric_level <= logging.DEBUG:
        console.setFormatter(logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_DEBUG))
    else:
        console.setFormatter(logging.Formatter(_FMT_PLAIN))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(handler)

    root.setLevel(effective_level)

    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown names mean INFO."""
    if not level:
        return logging.INFO
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.INFO
    return numeric
