"""Pandera-backed checks for tables read from the local store.

`assert_columns` and `assert_no_nulls` propagate
`pandera.errors.SchemaError`; the repository converts that into its own
`DataFormatError` so callers only handle one error family.

Usage:
    >>> import pandas as pd
    >>> from league_stats.utils.assertions import assert_columns, assert_no_nulls
    >>> df = pd.DataFrame({"match_id": ["m1"], "player_id": ["p1"]})
    >>> assert_columns(df, ["match_id", "player_id"])
    >>> assert_no_nulls(df, ["match_id", "player_id"])
"""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd  # type: ignore[import-untyped]
import pandera.pandas as pa


def assert_columns(df: pd.DataFrame, required: Sequence[str]) -> None:
    """Fail unless every column in *required* exists in *df*.

    Only presence is checked; nulls are allowed (see `assert_no_nulls`).

    Raises:
        pa.errors.SchemaError: If any required column is missing.
    """
    if not required:
        return
    pa.DataFrameSchema(
        {col: pa.Column(nullable=True) for col in required},
        strict=False,
    ).validate(df)


def assert_no_nulls(
    df: pd.DataFrame,
    columns: Sequence[str] | None = None,
) -> None:
    """Fail if *columns* (all columns when ``None``) hold any null.

    Raises:
        pa.errors.SchemaError: If nulls are found, or a column is absent.
    """
    cols = list(df.columns) if columns is None else list(columns)
    if not cols:
        return
    pa.DataFrameSchema(
        {col: pa.Column(nullable=False) for col in cols},
        strict=False,
    ).validate(df)


def assert_value_range(
    df: pd.DataFrame,
    column: str,
    *,
    min_val: float | None = None,
    max_val: float | None = None,
) -> None:
    """Fail if any value of *column* falls outside the inclusive bounds.

    Example:
        >>> import pandas as pd
        >>> df = pd.DataFrame({"home_score": [61, 0, 88]})
        >>> assert_value_range(df, "home_score", min_val=0)

    Raises:
        pa.errors.SchemaError: If a value is out of range, or the column
            is absent.
    """
    checks: list[pa.Check] = []
    if min_val is not None:
        checks.append(pa.Check.ge(min_val))
    if max_val is not None:
        checks.append(pa.Check.le(max_val))
    pa.DataFrameSchema(
        {column: pa.Column(checks=checks or None, nullable=True)},
        strict=False,
    ).validate(df)
