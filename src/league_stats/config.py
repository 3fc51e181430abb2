"""League scoring rule and environment-driven settings."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict

DATA_DIR_ENV_VAR: str = "LEAGUE_STATS_DATA_DIR"
_DEFAULT_DATA_DIR = Path("data/")


class PointsRule(BaseModel):
    """League-points awarded per match outcome.

    The defaults are the league's scheme: 2 for a win, 1 for a loss on
    the court, 0 for a walkover loss. A tied result awards ``tie`` to both
    sides and counts as neither a win nor a loss.
    """

    model_config = ConfigDict(frozen=True)

    win: int = 2
    loss: int = 1
    walkover_loss: int = 0
    tie: int = 0


DEFAULT_POINTS_RULE = PointsRule()


def default_data_dir() -> Path:
    """Return ``$LEAGUE_STATS_DATA_DIR`` if set, else ``data/``."""
    raw = os.environ.get(DATA_DIR_ENV_VAR, "").strip()
    return Path(raw) if raw else _DEFAULT_DATA_DIR
