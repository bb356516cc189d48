from __future__ import annotations

"""Session statistics: accuracy, timing, streaks, per-table breakdown and grade."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..profile.models import QuestionStats
from ..session.models import QuestionResult, SessionStats
from ..util.mathutil import percent, round_half_up
from ..util.timeutil import elapsed_ms
from .improvement import ImprovementIndicator, calculate_improvement_indicators, format_improvement_message


@dataclass(frozen=True)
class Grade:
    grade: str
    color: str
    message: str


@dataclass(frozen=True)
class StreakInfo:
    current_streak: int
    longest_streak: int


@dataclass
class TablePerformance:
    correct: int = 0
    total: int = 0
    accuracy: int = 0


# Evaluated top-down; first threshold the accuracy reaches wins.
GRADE_LADDER = [
    (95, Grade("A+", "#22c55e", "Excellent work!")),
    (90, Grade("A", "#16a34a", "Great job!")),
    (85, Grade("B+", "#65a30d", "Very good!")),
    (80, Grade("B", "#84cc16", "Good work!")),
    (75, Grade("B-", "#a3a3a3", "Keep practicing!")),
    (70, Grade("C+", "#f59e0b", "You're improving!")),
    (65, Grade("C", "#f97316", "More practice needed!")),
]
LOWEST_GRADE = Grade("C-", "#ef4444", "Keep trying!")


def calculate_accuracy(stats: SessionStats) -> int:
    if stats.total == 0:
        return 0
    return percent(stats.correct, stats.total)


def calculate_total_time(stats: SessionStats) -> int:
    """Wall-clock session length in ms; 0 until the session has ended."""
    if not stats.is_finished:
        return 0
    return elapsed_ms(stats.start_time, stats.end_time)


def calculate_average_time(stats: SessionStats) -> int:
    if not stats.questions:
        return 0
    return round_half_up(sum(q.time_spent for q in stats.questions) / len(stats.questions))


def performance_by_table(stats: SessionStats) -> Dict[int, TablePerformance]:
    """Per-table results; a 3×4 question counts towards both table 3 and table 4."""
    tables: Dict[int, TablePerformance] = {}
    for result in stats.questions:
        for table in (result.question.factor1, result.question.factor2):
            bucket = tables.setdefault(table, TablePerformance())
            bucket.total += 1
            if result.is_correct:
                bucket.correct += 1
    for bucket in tables.values():
        bucket.accuracy = percent(bucket.correct, bucket.total)
    return dict(sorted(tables.items()))


def performance_grade(accuracy: int) -> Grade:
    for threshold, grade in GRADE_LADDER:
        if accuracy >= threshold:
            return grade
    return LOWEST_GRADE


def streak_info(questions: Sequence[QuestionResult]) -> StreakInfo:
    current = 0
    for result in reversed(questions):
        if not result.is_correct:
            break
        current += 1

    longest = 0
    run = 0
    for result in questions:
        if result.is_correct:
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return StreakInfo(current_streak=current, longest_streak=longest)


def format_time(milliseconds: int) -> str:
    seconds = int(milliseconds // 1000)
    minutes = seconds // 60
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"


@dataclass
class SessionReport:
    """Everything the results view shows for a finished session."""

    correct: int
    total: int
    accuracy: int
    total_time: int
    average_time: int
    grade: Grade
    streaks: StreakInfo
    by_table: Dict[int, TablePerformance] = field(default_factory=dict)
    improvements: List[ImprovementIndicator] = field(default_factory=list)


def build_session_report(stats: SessionStats, question_stats: Optional[QuestionStats] = None) -> SessionReport:
    """Assemble the results view.

    ``question_stats`` must be the profile's history *before* this session is
    merged in; without it no improvement indicators are produced.
    """
    accuracy = calculate_accuracy(stats)
    return SessionReport(
        correct=stats.correct,
        total=stats.total,
        accuracy=accuracy,
        total_time=calculate_total_time(stats),
        average_time=calculate_average_time(stats),
        grade=performance_grade(accuracy),
        streaks=streak_info(stats.questions),
        by_table=performance_by_table(stats),
        improvements=calculate_improvement_indicators(stats, question_stats) if question_stats else [],
    )


def format_summary(report: SessionReport) -> str:
    """Return a human-readable summary of a session report."""
    lines = [
        f"Grade: {report.grade.grade} - {report.grade.message}",
        f"Score: {report.correct}/{report.total} correct ({report.accuracy}%)",
        f"Time: {format_time(report.total_time)} total, {report.average_time / 1000:.1f}s per question",
        f"Streak: {report.streaks.current_streak} current, {report.streaks.longest_streak} best",
    ]
    for table, perf in report.by_table.items():
        lines.append(f"Table {table}: {perf.correct}/{perf.total} ({perf.accuracy}%)")
    if report.improvements:
        lines.append("Changes since your previous attempts:")
        for imp in report.improvements:
            lines.append(f"  {format_improvement_message(imp)}")
    return "\n".join(lines)
