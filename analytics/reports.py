from __future__ import annotations

"""Write a learner's plots and CSV snapshots to a directory."""

from pathlib import Path
from typing import List

import pandas as pd

from tabletrainer.profile.models import UserProfile

from .config import AnalyticsConfig
from .metrics import table_summary
from .plots import plot_table_heatmap, plot_table_trend
from .prepare import prepare_log, question_stats_frame, table_matrix
from .smoothing import ewma_by_session


def write_reports(profile: UserProfile, log: pd.DataFrame, outdir: Path, cfg: AnalyticsConfig) -> List[Path]:
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    frame = question_stats_frame(profile)
    if not frame.empty:
        snap = outdir / "question_stats.csv"
        frame.to_csv(snap, index=False)
        written.append(snap)
        for col in ("success_rate", "average_time"):
            path = outdir / f"heatmap_{col}.png"
            grid = table_matrix(frame, col, min_attempts=cfg.min_attempts)
            if plot_table_heatmap(grid, value_col=col, save_path=path):
                written.append(path)

    df = prepare_log(log, cfg, user_id=profile.id)
    if not df.empty:
        summary = outdir / "table_summary.csv"
        table_summary(df, cfg).to_csv(summary, index=False)
        written.append(summary)
        df = ewma_by_session(df, value_col="acc", span=cfg.smoothing_span, group_cols=["table"])
        for table in sorted(df["table"].astype(int).unique()):
            path = outdir / f"trend_table_{table}.png"
            if plot_table_trend(df, table=int(table), value_col="acc", save_path=path):
                written.append(path)
    return written
