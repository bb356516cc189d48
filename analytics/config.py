from __future__ import annotations

"""Settings for the learner reports."""

from pydantic import BaseModel, Field


class AnalyticsConfig(BaseModel):
    """Knobs for the composite mark, trend smoothing and heatmaps.

    A table's mark is ``acc * exp(-alpha * rt_mean_ms / T_ref_ms)``: full
    accuracy at the reference speed scores about 0.6 with the defaults.
    Pairs answered fewer than ``min_attempts`` times are left blank on the
    heatmaps.
    """

    alpha: float = Field(0.5, gt=0)
    T_ref_ms: int = Field(3000, gt=0)
    smoothing_span: int = Field(5, gt=1)
    min_attempts: int = Field(1, ge=1)
