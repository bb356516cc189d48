from __future__ import annotations

"""Session tracker: Idle → Active → Ended, accumulating per-answer results."""

from enum import Enum
from typing import Optional

from ..errors import InvalidInputError, SessionStateError
from ..questions.model import Question
from ..util.timeutil import Clock, utcnow
from .models import QuestionResult, SessionStats


class SessionState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    ENDED = "ended"


class SessionTracker:
    """Owns the stats of the single active session.

    The UI calls ``start_session``, then ``submit_answer`` once per question,
    then ``end_session``. A new ``start_session`` after the end begins afresh.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or utcnow
        self._state = SessionState.IDLE
        self._stats: Optional[SessionStats] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is SessionState.ACTIVE

    @property
    def stats(self) -> Optional[SessionStats]:
        return self._stats

    def start_session(self) -> SessionStats:
        if self._state is SessionState.ACTIVE:
            raise SessionStateError("a session is already active")
        self._stats = SessionStats(start_time=self._clock())
        self._state = SessionState.ACTIVE
        return self._stats

    def submit_answer(self, question: Question, user_answer: Optional[int], time_spent: int) -> QuestionResult:
        if self._state is not SessionState.ACTIVE or self._stats is None:
            raise SessionStateError(f"cannot submit an answer while {self._state.value}")
        if time_spent < 0:
            raise InvalidInputError(f"time_spent must be >= 0, got {time_spent}")
        is_correct = user_answer is not None and user_answer == question.answer
        result = QuestionResult(question=question, user_answer=user_answer, is_correct=is_correct, time_spent=int(time_spent))
        self._stats.questions.append(result)
        self._stats.total += 1
        if is_correct:
            self._stats.correct += 1
        return result

    def end_session(self) -> SessionStats:
        if self._stats is None:
            raise SessionStateError("no session has been started")
        if self._state is SessionState.ACTIVE:
            self._stats.end_time = self._clock()
            self._state = SessionState.ENDED
        return self._stats
