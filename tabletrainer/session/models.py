from __future__ import annotations

"""Session result records."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..questions.model import Question
from ..util.timeutil import parse_timestamp, to_iso


@dataclass(frozen=True)
class QuestionResult:
    question: Question
    user_answer: Optional[int]
    is_correct: bool
    time_spent: int

    def to_json(self) -> Dict[str, Any]:
        return {
            "question": self.question.to_json(),
            "userAnswer": self.user_answer,
            "isCorrect": self.is_correct,
            "timeSpent": self.time_spent,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "QuestionResult":
        ua = data.get("userAnswer")
        return cls(
            question=Question.from_json(data["question"]),
            user_answer=None if ua is None else int(ua),
            is_correct=bool(data.get("isCorrect", False)),
            time_spent=int(data.get("timeSpent", 0)),
        )


@dataclass
class SessionStats:
    """Running score of one session; ``questions`` is append-only."""

    start_time: datetime
    correct: int = 0
    total: int = 0
    end_time: Optional[datetime] = None
    questions: List[QuestionResult] = field(default_factory=list)

    @property
    def is_finished(self) -> bool:
        return self.end_time is not None

    def to_json(self) -> Dict[str, Any]:
        return {
            "correct": self.correct,
            "total": self.total,
            "startTime": to_iso(self.start_time),
            "endTime": to_iso(self.end_time) if self.end_time else None,
            "questions": [q.to_json() for q in self.questions],
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "SessionStats":
        return cls(
            start_time=parse_timestamp(data["startTime"]),
            correct=int(data.get("correct", 0)),
            total=int(data.get("total", 0)),
            end_time=parse_timestamp(data["endTime"]) if data.get("endTime") else None,
            questions=[QuestionResult.from_json(q) for q in data.get("questions", [])],
        )
