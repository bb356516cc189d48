from __future__ import annotations

"""Matplotlib plots: times-table heatmap and per-table trends."""

import os
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


def plot_table_heatmap(
    grid: pd.DataFrame,
    *,
    value_col: str = "success_rate",
    save_path: Optional[str | os.PathLike[str]] = None,
) -> bool:
    """Draw a 12×12 grid (see ``table_matrix``); returns False if nothing to plot."""
    if grid.isna().all().all():
        return False
    M = np.ma.masked_invalid(grid.to_numpy(dtype="float64"))
    plt.figure()
    im = plt.imshow(M, origin="upper", cmap="RdYlGn" if value_col == "success_rate" else "viridis")
    plt.colorbar(im, label=value_col)
    plt.xticks(ticks=np.arange(grid.shape[1]), labels=grid.columns.astype(str))
    plt.yticks(ticks=np.arange(grid.shape[0]), labels=grid.index.astype(str))
    plt.title(f"Times table ({value_col})")
    plt.xlabel("Factor")
    plt.ylabel("Factor")
    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close()
    return True


def plot_table_trend(
    df: pd.DataFrame,
    *,
    table: int,
    value_col: str = "acc",
    save_path: Optional[str | os.PathLike[str]] = None,
) -> bool:
    g = df[df["table"].astype(int) == int(table)]
    if g.empty:
        return False
    g = g.sort_values("session_idx")
    plt.figure()
    plt.plot(g["session_idx"], g[value_col], marker="o", linestyle="", label=value_col)
    smooth_col = f"{value_col}_smooth"
    if smooth_col in g.columns:
        plt.plot(g["session_idx"], g[smooth_col], linewidth=2, label=f"{value_col} (EWMA)")
    plt.xlabel("Session")
    plt.ylabel(value_col)
    plt.title(f"Trend: table {table}")
    plt.legend()
    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close()
    return True
