from __future__ import annotations

"""Parquet log of per-table session results, for trend analytics."""

from pathlib import Path
from typing import List, Optional

import pandas as pd

from tabletrainer.session.models import SessionStats

from .schema import LOG_DTYPES, SessionTableRow

DATA_FILE = "session_table_stats.parquet"


def _empty_df() -> pd.DataFrame:
    return pd.DataFrame({k: pd.Series(dtype=v) for k, v in LOG_DTYPES.items()})


def _fix_dtypes(df: pd.DataFrame) -> pd.DataFrame:
    for col, dt in LOG_DTYPES.items():
        if col not in df.columns:
            df[col] = pd.Series(pd.NA, index=df.index)
        df[col] = df[col].astype(dt)
    return df[list(LOG_DTYPES.keys())]


def init_log(data_dir: Path) -> None:
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    f = data_dir / DATA_FILE
    if not f.exists():
        _empty_df().to_parquet(f, engine="pyarrow", compression="zstd", index=False)


def rows_from_session(session_id: str, stats: SessionStats, user_id: Optional[str] = None) -> List[SessionTableRow]:
    """One row per practiced table; a 3×4 answer counts for tables 3 and 4."""
    per: dict[int, dict[str, int]] = {}
    for result in stats.questions:
        q = result.question
        for table in {q.factor1, q.factor2}:
            b = per.setdefault(table, {"Q": 0, "C": 0, "T": 0})
            b["Q"] += 1
            b["C"] += 1 if result.is_correct else 0
            b["T"] += result.time_spent
    return [
        SessionTableRow(
            session_id=session_id,
            session_start=stats.start_time,
            user_id=user_id,
            table=table,
            Q=b["Q"],
            C=b["C"],
            T_ms=b["T"],
        )
        for table, b in sorted(per.items())
    ]


def validate_rows(rows: list[SessionTableRow]) -> pd.DataFrame:
    if not isinstance(rows, list):
        raise TypeError("rows must be a list[SessionTableRow]")
    parsed = [r if isinstance(r, SessionTableRow) else SessionTableRow.model_validate(r) for r in rows]
    df = pd.DataFrame([r.model_dump() for r in parsed])
    return _fix_dtypes(df)


def append_session_rows(df_new: pd.DataFrame, data_dir: Path) -> None:
    f = Path(data_dir) / DATA_FILE
    if f.exists():
        df_old = _fix_dtypes(pd.read_parquet(f, engine="pyarrow"))
    else:
        Path(data_dir).mkdir(parents=True, exist_ok=True)
        df_old = _empty_df()
    df_new = _fix_dtypes(df_new.copy())
    if df_old.empty:
        combined = df_new
    else:
        combined = pd.concat([df_old, df_new], ignore_index=True)
    combined = _fix_dtypes(combined).drop_duplicates()
    combined.to_parquet(f, engine="pyarrow", compression="zstd", index=False)


def load_log(data_dir: Path) -> pd.DataFrame:
    """All logged rows plus derived ``acc`` and ``rt_mean_ms`` columns."""
    f = Path(data_dir) / DATA_FILE
    if not f.exists():
        return _empty_df().assign(acc=pd.Series(dtype="float32"), rt_mean_ms=pd.Series(dtype="float32"))
    df = _fix_dtypes(pd.read_parquet(f, engine="pyarrow"))
    q = df["Q"].astype("float32").where(df["Q"] > 0, other=1.0)
    df["acc"] = (df["C"].astype("float32") / q).astype("float32")
    df["rt_mean_ms"] = (df["T_ms"].astype("float32") / q).astype("float32")
    return df


def query_table_trend(df: pd.DataFrame, *, table: int, user_id: Optional[str] = None) -> pd.DataFrame:
    if not (1 <= int(table) <= 12):
        raise ValueError(f"Unknown table: {table}")
    mask = df["table"].astype(int) == int(table)
    if user_id is not None:
        mask &= (df["user_id"].astype("string") == user_id).fillna(False).astype(bool)
    return df[mask].sort_values("session_start").reset_index(drop=True)


def export_ndjson(df: pd.DataFrame, out_path: Path) -> None:
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_json(out_path, orient="records", lines=True, date_format="iso")
