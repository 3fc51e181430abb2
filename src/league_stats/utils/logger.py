"""Project logging setup on top of the standard `logging` module.

Four verbosity names are accepted, one of them a custom level:

    ========  ==============  =====
    Name      Python level    Value
    ========  ==============  =====
    QUIET     WARNING          30
    NORMAL    INFO             20
    VERBOSE   VERBOSE (custom) 15
    DEBUG     DEBUG            10
    ========  ==============  =====

Call `configure_logging` once from an entry point (the CLI does this), then
use `get_logger` or plain ``logging.getLogger(__name__)`` inside modules::

    >>> from league_stats.utils.logger import configure_logging, get_logger
    >>> configure_logging("VERBOSE")
    >>> log = get_logger("stats.standings")
    >>> log.info("Ranking %d teams", 8)

When no level is passed, ``LEAGUE_STATS_LOG_LEVEL`` is consulted
(case-insensitive) before falling back to ``NORMAL``.

Timestamps are written in UTC (``2025-03-08T20:00:00.123Z``), the same zone
the match dates are stored in, so log lines and fixtures line up.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from typing import TextIO

VERBOSE: int = 15
"""Between INFO and DEBUG; per-category and per-file progress messages."""

logging.addLevelName(VERBOSE, "VERBOSE")

QUIET: int = logging.WARNING
NORMAL: int = logging.INFO
DEBUG: int = logging.DEBUG

_LEVEL_MAP: dict[str, int] = {
    "QUIET": QUIET,
    "NORMAL": NORMAL,
    "VERBOSE": VERBOSE,
    "DEBUG": DEBUG,
}

LOG_LEVEL_ENV_VAR: str = "LEAGUE_STATS_LOG_LEVEL"

_ROOT_LOGGER_NAME: str = "league_stats"
_LOG_FORMAT: str = "%(asctime)s | %(name)s | %(levelname)-8s | %(message)s"


class UtcFormatter(logging.Formatter):
    """ISO-8601 UTC timestamps with milliseconds and a ``Z`` suffix."""

    converter = time.gmtime
    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"


def configure_logging(level: str | None = None, *, stream: TextIO | None = None) -> None:
    """Install a single stream handler on the ``league_stats`` logger.

    Args:
        level: ``"QUIET"``, ``"NORMAL"``, ``"VERBOSE"`` or ``"DEBUG"``
            (any case).  ``None`` reads ``LEAGUE_STATS_LOG_LEVEL`` and then
            falls back to ``"NORMAL"``.
        stream: Where records go; ``sys.stderr`` (looked up at call time)
            when omitted, so stdout stays free for the CLI tables.

    Raises:
        ValueError: If the resolved level name is not one of the above.
    """
    resolved: str = level if level is not None else os.environ.get(LOG_LEVEL_ENV_VAR, "NORMAL")
    resolved_upper = resolved.upper()

    if resolved_upper not in _LEVEL_MAP:
        msg = f"Unknown log level {resolved!r}. Valid levels: {', '.join(sorted(_LEVEL_MAP))}"
        raise ValueError(msg)

    numeric_level = _LEVEL_MAP[resolved_upper]

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(numeric_level)

    # Re-configuring must not stack handlers.
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(UtcFormatter(_LOG_FORMAT))
    root.addHandler(handler)

    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return ``league_stats.<name>``.

    >>> get_logger("ingest.repository").name
    'league_stats.ingest.repository'
    """
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
