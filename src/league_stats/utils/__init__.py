"""Shared utilities module."""

from __future__ import annotations

from league_stats.utils.assertions import (
    assert_columns,
    assert_no_nulls,
    assert_value_range,
)
from league_stats.utils.logger import (
    DEBUG,
    NORMAL,
    QUIET,
    VERBOSE,
    configure_logging,
    get_logger,
)

__all__ = [
    "DEBUG",
    "NORMAL",
    "QUIET",
    "VERBOSE",
    "assert_columns",
    "assert_no_nulls",
    "assert_value_range",
    "configure_logging",
    "get_logger",
]
