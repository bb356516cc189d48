from __future__ import annotations

"""Turn profiles and the session log into analysis-ready frames."""

import numpy as np
import pandas as pd

from tabletrainer.profile.models import UserProfile
from tabletrainer.questions.model import MAX_FACTOR, MIN_FACTOR

from .config import AnalyticsConfig
from .metrics import compute_table_metrics

STAT_COLUMNS = ["key", "factor1", "factor2", "attempts", "correct", "success_rate", "average_time", "last_attempted"]


def question_stats_frame(profile: UserProfile) -> pd.DataFrame:
    """One row per practiced pair, sorted by (factor1, factor2)."""
    rows = [
        {
            "key": s.key,
            "factor1": s.factor1,
            "factor2": s.factor2,
            "attempts": s.attempts,
            "correct": s.correct,
            "success_rate": s.success_rate,
            "average_time": s.average_time,
            "last_attempted": s.last_attempted,
        }
        for s in profile.question_stats.values()
    ]
    if not rows:
        return pd.DataFrame({c: pd.Series(dtype="object") for c in STAT_COLUMNS})
    df = pd.DataFrame(rows, columns=STAT_COLUMNS)
    df["last_attempted"] = pd.to_datetime(df["last_attempted"], utc=True)
    return df.sort_values(["factor1", "factor2"], kind="stable").reset_index(drop=True)


def table_matrix(frame: pd.DataFrame, value_col: str = "success_rate", min_attempts: int = 1) -> pd.DataFrame:
    """12×12 grid of ``value_col``; symmetric, NaN for pairs never practiced
    or tried fewer than ``min_attempts`` times."""
    index = pd.Index(range(MIN_FACTOR, MAX_FACTOR + 1), name="factor1")
    columns = pd.Index(range(MIN_FACTOR, MAX_FACTOR + 1), name="factor2")
    grid = pd.DataFrame(np.nan, index=index, columns=columns, dtype="float64")
    for row in frame.itertuples(index=False):
        if row.attempts < min_attempts:
            continue
        v = float(getattr(row, value_col))
        grid.loc[row.factor1, row.factor2] = v
        grid.loc[row.factor2, row.factor1] = v
    return grid


def prepare_log(log: pd.DataFrame, cfg: AnalyticsConfig, user_id: str | None = None) -> pd.DataFrame:
    """Filter the session log, compute metrics and add a stable ``session_idx``."""
    df = log.copy()
    if user_id is not None:
        df = df[(df["user_id"].astype("string") == user_id).fillna(False).astype(bool)]
    df = df.sort_values(["session_start", "session_id"], kind="stable")
    df = compute_table_metrics(df, cfg)
    df["session_idx"] = pd.factorize(df["session_id"])[0]
    return df.reset_index(drop=True)
