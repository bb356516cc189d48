from __future__ import annotations

"""Profile operations: creation, merging a finished session, and summaries."""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Tuple

from ..util.mathutil import percent, round_half_up
from ..util.pairs import stat_key
from ..util.randomness import new_id
from ..util.timeutil import Clock, utcnow
from .models import QuestionAttempt, QuestionStatDetail, QuestionStats, UserProfile, find_stat, normalize_question_stats

if TYPE_CHECKING:
    from ..session.models import SessionStats

SORT_KEYS = ("attempts", "success_rate", "average_time")


def create_user_profile(name: str, clock: Optional[Clock] = None) -> UserProfile:
    return UserProfile(id=new_id("user-"), name=name.strip(), created_at=(clock or utcnow)())


def update_question_stats_with_attempts(
    current: QuestionStats,
    session_stats: SessionStats,
    now: Optional[datetime] = None,
) -> QuestionStats:
    """Return new stats with one attempt per session result folded in.

    Records are keyed by the unordered pair (``"3x4"`` for both 3×4 and 4×3).
    """
    now = now or utcnow()
    updated = normalize_question_stats(current)
    for result in session_stats.questions:
        q = result.question
        key = stat_key(q.factor1, q.factor2)
        stat = updated.get(key)
        if stat is None:
            lo, hi = min(q.factor1, q.factor2), max(q.factor1, q.factor2)
            stat = QuestionStatDetail(factor1=lo, factor2=hi, last_attempted=now)
            updated[key] = stat
        stat.record(QuestionAttempt(time_spent=result.time_spent, is_correct=result.is_correct, date=now))
    return updated


def update_user_with_session(user: UserProfile, session_stats: SessionStats, now: Optional[datetime] = None) -> UserProfile:
    """Fold a completed session into a copy of ``user``."""
    updated = user.copy()
    updated.total_sessions += 1
    updated.total_questions += session_stats.total
    updated.total_correct += session_stats.correct
    updated.question_stats = update_question_stats_with_attempts(updated.question_stats, session_stats, now=now)
    return updated


def get_question_history(user: UserProfile, factor1: int, factor2: int) -> Optional[QuestionStatDetail]:
    return find_stat(user.question_stats, factor1, factor2)


@dataclass(frozen=True)
class ProfileOverview:
    total_questions: int
    total_correct: int
    overall_accuracy: int
    total_sessions: int
    average_questions_per_session: int


def profile_overview(user: UserProfile) -> ProfileOverview:
    accuracy = percent(user.total_correct, user.total_questions)
    per_session = round_half_up(user.total_questions / user.total_sessions) if user.total_sessions > 0 else 0
    return ProfileOverview(
        total_questions=user.total_questions,
        total_correct=user.total_correct,
        overall_accuracy=accuracy,
        total_sessions=user.total_sessions,
        average_questions_per_session=per_session,
    )


def practiced_tables(user: UserProfile) -> List[int]:
    tables = set()
    for stat in user.question_stats.values():
        tables.add(stat.factor1)
        tables.add(stat.factor2)
    return sorted(tables)


def sorted_question_stats(user: UserProfile, sort_by: str = "attempts", table: Optional[int] = None) -> List[QuestionStatDetail]:
    """Stats ordered for display: most attempts, best success rate, or fastest first."""
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_by}")
    stats = [s for s in user.question_stats.values() if table is None or table in (s.factor1, s.factor2)]
    if sort_by == "attempts":
        return sorted(stats, key=lambda s: s.attempts, reverse=True)
    if sort_by == "success_rate":
        return sorted(stats, key=lambda s: s.success_rate, reverse=True)
    return sorted(stats, key=lambda s: s.average_time)


def best_and_worst(user: UserProfile, n: int = 3) -> Tuple[List[QuestionStatDetail], List[QuestionStatDetail]]:
    ranked = sorted_question_stats(user, "success_rate")
    worst = list(reversed(ranked[-n:])) if n > 0 else []
    return ranked[:n], worst


def most_and_least_practiced(user: UserProfile, n: int = 5) -> Tuple[List[QuestionStatDetail], List[QuestionStatDetail]]:
    ranked = sorted_question_stats(user, "attempts")
    least = list(reversed(ranked[-n:])) if n > 0 else []
    return ranked[:n], least
