from __future__ import annotations

"""Session Manager: orchestrates generation, tracking, reporting and persistence.

Front-end agnostic: the CLI (or any other UI) asks for the question set,
feeds answers through ``submit`` and calls ``finish`` once at the end.
"""

import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from storage.session_log import append_session_rows, rows_from_session, validate_rows
from storage.store import ProfileStore

from ..config.settings import PracticeSettings
from ..errors import InvalidInputError, SessionStateError
from ..profile.models import UserProfile
from ..profile.profile import update_user_with_session
from ..questions.generator import generate_adaptive_question_set, generate_question_set
from ..questions.model import Question
from ..session.models import QuestionResult, SessionStats
from ..session.tracker import SessionState, SessionTracker
from ..stats.stats import SessionReport, build_session_report
from ..util.randomness import new_id
from ..util.timeutil import Clock, utcnow
from .explain import trace as xtrace


@dataclass
class SessionOutcome:
    stats: SessionStats
    report: SessionReport
    profile: Optional[UserProfile]


class SessionManager:
    def __init__(
        self,
        store: Optional[ProfileStore] = None,
        *,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
        session_log_dir: Optional[Path] = None,
    ) -> None:
        self.store = store
        self.rng = rng
        self.clock = clock or utcnow
        self.session_log_dir = Path(session_log_dir) if session_log_dir else None
        self.tracker = SessionTracker(clock=self.clock)
        self.settings: Optional[PracticeSettings] = None
        self.profile: Optional[UserProfile] = None
        self.questions: List[Question] = []
        self.session_id: Optional[str] = None
        self.outcome: Optional[SessionOutcome] = None

    def start_session(self, settings: PracticeSettings, profile: Optional[UserProfile] = None) -> List[Question]:
        """Build the question set and start tracking.

        Adaptive weighting only applies when a profile supplies history.
        """
        if not settings.selected_tables:
            raise InvalidInputError("No multiplication tables selected")
        self.settings = settings
        self.profile = profile
        if settings.adaptive_difficulty and profile is not None:
            self.questions = generate_adaptive_question_set(
                settings.selected_tables, settings.session_length, profile.question_stats, settings, rng=self.rng
            )
        else:
            self.questions = generate_question_set(settings.selected_tables, settings.session_length, rng=self.rng)
        self.session_id = new_id()
        self.outcome = None
        self.tracker.start_session()
        xtrace(
            "session_started",
            {
                "session": self.session_id,
                "tables": settings.selected_tables,
                "adaptive": settings.adaptive_difficulty and profile is not None,
                "questions": len(self.questions),
            },
        )
        return list(self.questions)

    def submit(self, question: Question, user_answer: Optional[int], time_spent: int) -> QuestionResult:
        result = self.tracker.submit_answer(question, user_answer, time_spent)
        xtrace(
            "answer_submitted",
            {"q": f"{question.factor1}x{question.factor2}", "answer": user_answer, "correct": result.is_correct, "ms": time_spent},
        )
        return result

    def finish(self, save: bool = True) -> SessionOutcome:
        """End the session, build the report, merge and persist the profile.

        Only the first call merges and saves; later calls return the same
        outcome until the next ``start_session``.
        """
        if self.tracker.stats is None:
            raise SessionStateError("no session has been started")
        if self.tracker.state is SessionState.ENDED and self.outcome is not None:
            return self.outcome
        stats = self.tracker.end_session()
        # improvements compare against history from before this session
        prior = self.profile.question_stats if self.profile is not None else None
        report = build_session_report(stats, prior)
        xtrace("session_ended", {"session": self.session_id, "correct": stats.correct, "total": stats.total})

        updated = None
        if self.profile is not None and stats.total > 0:
            updated = update_user_with_session(self.profile, stats, now=self.clock())
            if save and self.store is not None:
                self.store.save(updated)
            self.profile = updated
        if save and self.session_log_dir is not None and stats.questions:
            rows = rows_from_session(self.session_id or new_id(), stats, updated.id if updated else None)
            append_session_rows(validate_rows(rows), self.session_log_dir)
        self.outcome = SessionOutcome(stats=stats, report=report, profile=updated)
        return self.outcome
