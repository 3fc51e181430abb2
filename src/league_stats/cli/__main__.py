"""Allow ``python -m league_stats.cli``."""

from __future__ import annotations

from league_stats.cli.main import app

app()
