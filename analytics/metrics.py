from __future__ import annotations

"""Accuracy/speed marks for session-log rows and per-table totals."""

import numpy as np
import pandas as pd
from .config import AnalyticsConfig

SUMMARY_COLUMNS = ["table", "sessions", "Q", "C", "T_ms", "acc", "rt_mean_ms", "rt_factor", "mark"]


def _speed_factor(rt_mean_ms: pd.Series, cfg: AnalyticsConfig) -> pd.Series:
    return np.exp(-float(cfg.alpha) * (rt_mean_ms / float(cfg.T_ref_ms))).astype("float32")


def compute_table_metrics(df: pd.DataFrame, cfg: AnalyticsConfig) -> pd.DataFrame:
    """Add ``acc``, ``rt_mean_ms``, ``rt_factor`` and ``mark`` to a copy of ``df``."""
    out = df.copy()
    q = out["Q"].astype("float32").where(out["Q"] > 0, other=1.0)
    out["acc"] = (out["C"].astype("float32") / q).astype("float32")
    out["rt_mean_ms"] = (out["T_ms"].astype("float32") / q).astype("float32")
    out["rt_factor"] = _speed_factor(out["rt_mean_ms"], cfg)
    out["mark"] = (out["acc"] * out["rt_factor"]).clip(0, 1).astype("float32")
    return out


def table_summary(df: pd.DataFrame, cfg: AnalyticsConfig) -> pd.DataFrame:
    """Totals per table across every logged session, with the same marks."""
    if df.empty:
        return pd.DataFrame({c: pd.Series(dtype="float32") for c in SUMMARY_COLUMNS})
    totals = (
        df.assign(table=df["table"].astype(int), Q=df["Q"].astype(int), C=df["C"].astype(int), T_ms=df["T_ms"].astype(int))
        .groupby("table", sort=True)
        .agg(sessions=("session_id", "nunique"), Q=("Q", "sum"), C=("C", "sum"), T_ms=("T_ms", "sum"))
        .reset_index()
    )
    return compute_table_metrics(totals, cfg)[SUMMARY_COLUMNS]
