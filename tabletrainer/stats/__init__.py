from .stats import (
    Grade,
    SessionReport,
    StreakInfo,
    TablePerformance,
    build_session_report,
    calculate_accuracy,
    calculate_average_time,
    calculate_total_time,
    format_summary,
    format_time,
    performance_by_table,
    performance_grade,
    streak_info,
)
from .improvement import ImprovementIndicator, calculate_improvement_indicators, format_improvement_message

__all__ = [
    "Grade",
    "SessionReport",
    "StreakInfo",
    "TablePerformance",
    "build_session_report",
    "calculate_accuracy",
    "calculate_average_time",
    "calculate_total_time",
    "format_summary",
    "format_time",
    "performance_by_table",
    "performance_grade",
    "streak_info",
    "ImprovementIndicator",
    "calculate_improvement_indicators",
    "format_improvement_message",
]
