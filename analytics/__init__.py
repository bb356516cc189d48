from .config import AnalyticsConfig
from .metrics import compute_table_metrics, table_summary
from .prepare import prepare_log, question_stats_frame, table_matrix
from .smoothing import ewma_by_session
from .plots import plot_table_heatmap, plot_table_trend
from .reports import write_reports

__all__ = [
    "AnalyticsConfig",
    "compute_table_metrics",
    "table_summary",
    "prepare_log",
    "question_stats_frame",
    "table_matrix",
    "ewma_by_session",
    "plot_table_heatmap",
    "plot_table_trend",
    "write_reports",
]
