from __future__ import annotations

"""Shared fixtures for the unittest suite."""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple

from tabletrainer.profile.models import QuestionAttempt, QuestionStatDetail
from tabletrainer.questions.model import Question
from tabletrainer.session.models import QuestionResult, SessionStats

T0 = datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


class StepClock:
    """Returns T0, T0+step, T0+2*step, ... on successive calls."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(seconds=1)) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.now
        self.now = self.now + self.step
        return value


class FixedRandom:
    """Stand-in rng whose random() replays the given values."""

    def __init__(self, values: Iterable[float]) -> None:
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)


def make_result(f1: int, f2: int, correct: bool = True, ms: int = 1000) -> QuestionResult:
    q = Question.make(f1, f2)
    return QuestionResult(question=q, user_answer=q.answer if correct else q.answer + 1, is_correct=correct, time_spent=ms)


def make_session(results: List[QuestionResult], start: datetime = T0, end: Optional[datetime] = None) -> SessionStats:
    return SessionStats(
        start_time=start,
        end_time=end,
        correct=sum(1 for r in results if r.is_correct),
        total=len(results),
        questions=list(results),
    )


def make_stat(
    f1: int,
    f2: int,
    *,
    attempts: int = 0,
    success_rate: int = 0,
    average_time: int = 0,
    times: Tuple[int, ...] = (),
) -> QuestionStatDetail:
    """Stat record; ``times`` become recent attempts one day apart."""
    history = [QuestionAttempt(time_spent=t, is_correct=True, date=T0 + timedelta(days=i)) for i, t in enumerate(times)]
    n = attempts or len(history)
    return QuestionStatDetail(
        factor1=f1,
        factor2=f2,
        attempts=n,
        correct=round(n * success_rate / 100),
        total_time=average_time * n,
        average_time=average_time,
        success_rate=success_rate,
        last_attempted=history[-1].date if history else T0,
        recent_attempts=history,
    )
