from __future__ import annotations

"""Pydantic models for persisted profiles and the Parquet session log."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tabletrainer.profile.models import QuestionAttempt, QuestionStatDetail, UserProfile, normalize_question_stats
from tabletrainer.util.mathutil import round_half_up
from tabletrainer.util.timeutil import parse_timestamp

SCHEMA_VERSION = 1
# counters and millisecond totals stay exactly representable as floats
MAX_COUNT = 2**53

# --- Session log dtypes ---

LOG_DTYPES = {
    "session_id": "string",
    # timezone-aware UTC timestamps
    "session_start": pd.DatetimeTZDtype(tz="UTC"),
    "user_id": "string",
    "table": "UInt8",
    "Q": "UInt16",
    "C": "UInt16",
    "T_ms": "UInt32",
}


def _utc(v: Any) -> datetime:
    return parse_timestamp(v)


# --- Profile records (camelCase on the wire) ---


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class QuestionAttemptRecord(_Record):
    time_spent: int = Field(alias="timeSpent", ge=0, le=MAX_COUNT)
    is_correct: bool = Field(alias="isCorrect")
    date: datetime

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v: Any) -> datetime:
        return _utc(v)

    def to_attempt(self) -> QuestionAttempt:
        return QuestionAttempt(time_spent=self.time_spent, is_correct=self.is_correct, date=self.date)


class QuestionStatRecord(_Record):
    factor1: int = Field(ge=1, le=12)
    factor2: int = Field(ge=1, le=12)
    attempts: int = Field(default=0, ge=0, le=MAX_COUNT)
    correct: int = Field(default=0, ge=0, le=MAX_COUNT)
    total_time: int = Field(default=0, alias="totalTime", ge=0, le=MAX_COUNT)
    average_time: Optional[int] = Field(default=None, alias="averageTime", ge=0, le=MAX_COUNT)
    success_rate: Optional[int] = Field(default=None, alias="successRate", ge=0, le=100)
    last_attempted: Optional[datetime] = Field(default=None, alias="lastAttempted")
    # older profiles predate the rolling history
    recent_attempts: Optional[List[QuestionAttemptRecord]] = Field(default=None, alias="recentAttempts")

    @field_validator("last_attempted", mode="before")
    @classmethod
    def _parse_last(cls, v: Any) -> Optional[datetime]:
        return None if v in (None, "") else _utc(v)

    @field_validator("average_time", "success_rate", mode="before")
    @classmethod
    def _round_number(cls, v: Any) -> Any:
        return round_half_up(v) if isinstance(v, float) else v

    @model_validator(mode="after")
    def _check_counts(self) -> "QuestionStatRecord":
        if self.correct > self.attempts:
            raise ValueError("correct must be <= attempts")
        return self

    def to_detail(self) -> QuestionStatDetail:
        history = [a.to_attempt() for a in (self.recent_attempts or [])]
        last = self.last_attempted
        if last is None:
            last = max((a.date for a in history), default=datetime.now(timezone.utc))
        detail = QuestionStatDetail(
            factor1=self.factor1,
            factor2=self.factor2,
            attempts=self.attempts,
            correct=self.correct,
            total_time=self.total_time,
            last_attempted=last,
            recent_attempts=history,
        )
        detail.recompute()
        # stored aggregates win so a save/load round trip is exact
        if self.average_time is not None:
            detail.average_time = self.average_time
        if self.success_rate is not None:
            detail.success_rate = self.success_rate
        return detail


class UserProfileRecord(_Record):
    id: str = Field(min_length=1)
    name: str = ""
    created_at: datetime = Field(alias="createdAt")
    total_sessions: int = Field(default=0, alias="totalSessions", ge=0, le=MAX_COUNT)
    total_questions: int = Field(default=0, alias="totalQuestions", ge=0, le=MAX_COUNT)
    total_correct: int = Field(default=0, alias="totalCorrect", ge=0, le=MAX_COUNT)
    question_stats: Dict[str, QuestionStatRecord] = Field(default_factory=dict, alias="questionStats")

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_created(cls, v: Any) -> datetime:
        return _utc(v)

    def to_profile(self) -> UserProfile:
        stats = {k: r.to_detail() for k, r in self.question_stats.items()}
        return UserProfile(
            id=self.id,
            name=self.name,
            created_at=self.created_at,
            total_sessions=self.total_sessions,
            total_questions=self.total_questions,
            total_correct=self.total_correct,
            question_stats=normalize_question_stats(stats),
        )


# --- Session log rows ---


class SessionTableRow(BaseModel):
    session_id: str
    session_start: datetime
    user_id: Optional[str] = None
    table: int = Field(ge=1, le=12)
    Q: int = Field(ge=1, le=65535)
    C: int = Field(ge=0, le=65535)
    T_ms: int = Field(ge=0, le=4294967295)

    @model_validator(mode="after")
    def _c_le_q(self) -> "SessionTableRow":
        if self.C > self.Q:
            raise ValueError("C must be <= Q")
        return self

    @field_validator("session_start", mode="before")
    @classmethod
    def _ensure_utc(cls, v: Any) -> datetime:
        return _utc(v)
