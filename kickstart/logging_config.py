"""
logging_config.py

Responsibility: configure process-wide logging once, from the CLI entrypoint.

Every module does ``logger = logging.getLogger(__name__)`` and inherits this.

Levels are resolved in precedence order:
    CLI flag  >  KICKSTART_LOG_LEVEL env var  >  WARNING (default)
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "KICKSTART_LOG_LEVEL"

# WARNING level: message only
_FMT_MINIMAL = "%(message)s"

# INFO level: timestamped with module context
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"

# DEBUG level: full diagnostic with file:line
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"

_DATEFMT = "%H:%M:%S"


def resolve_level(flag_level: str | None) -> str:
    return flag_level or os.environ.get(LOG_LEVEL_ENV) or "WARNING"


def setup_logging(level: str = "WARNING") -> None:
    """Configure the root logger with a single stderr handler."""
    numeric_level = _parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root.setLevel(numeric_level)


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
