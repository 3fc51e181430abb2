"""Standings and box-score statistics for a regional basketball league."""

from __future__ import annotations

__version__ = "0.1.0"
