from __future__ import annotations

"""Speed-change detection from each pair's rolling attempt history."""

from dataclasses import dataclass
from typing import List, Sequence

from ..profile.models import QuestionAttempt, QuestionStats, find_stat
from ..session.models import SessionStats

WINDOW = 3
MIN_HISTORY = 2 * WINDOW
SIGNIFICANT_CHANGE_PCT = 15


@dataclass(frozen=True)
class ImprovementIndicator:
    question_key: str
    factor1: int
    factor2: int
    recent_average_time: float
    previous_average_time: float
    improvement: float
    is_significant: bool


def _average_time(attempts: Sequence[QuestionAttempt]) -> float:
    if not attempts:
        return 0.0
    return sum(a.time_spent for a in attempts) / len(attempts)


def calculate_improvement_indicators(session_stats: SessionStats, question_stats: QuestionStats) -> List[ImprovementIndicator]:
    """Significant speed changes for the pairs practiced in this session.

    Compares the mean time of the last three recorded attempts with the three
    before them. Pairs with fewer than six attempts are skipped. Positive
    ``improvement`` means faster.
    """
    improvements: List[ImprovementIndicator] = []
    reported = set()
    for result in session_stats.questions:
        q = result.question
        if q.pair_key in reported:
            continue
        stat = find_stat(question_stats, q.factor1, q.factor2)
        if stat is None or len(stat.recent_attempts) < MIN_HISTORY:
            continue

        history = sorted(stat.recent_attempts, key=lambda a: a.date)
        recent = history[-WINDOW:]
        previous = history[-MIN_HISTORY:-WINDOW]
        recent_avg = _average_time(recent)
        previous_avg = _average_time(previous)
        if previous_avg == 0:
            continue

        improvement = 100 * (previous_avg - recent_avg) / previous_avg
        is_significant = abs(improvement) >= SIGNIFICANT_CHANGE_PCT
        if not is_significant:
            continue
        reported.add(q.pair_key)
        improvements.append(
            ImprovementIndicator(
                question_key=f"{q.factor1}x{q.factor2}",
                factor1=q.factor1,
                factor2=q.factor2,
                recent_average_time=recent_avg,
                previous_average_time=previous_avg,
                improvement=improvement,
                is_significant=is_significant,
            )
        )
    return improvements


def format_improvement_message(improvement: ImprovementIndicator) -> str:
    change_s = abs(improvement.previous_average_time - improvement.recent_average_time) / 1000
    if improvement.improvement > 0:
        return (
            f"{improvement.factor1} × {improvement.factor2}: {change_s:.1f}s faster "
            f"({improvement.improvement:.1f}% improvement)"
        )
    return (
        f"{improvement.factor1} × {improvement.factor2}: {change_s:.1f}s slower "
        f"({abs(improvement.improvement):.1f}% decline)"
    )
