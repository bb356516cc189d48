from __future__ import annotations

"""Per-user history records: attempts, per-pair stats and the profile itself."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..util.pairs import ordered_pair, presented_key, stat_key
from ..util.mathutil import percent, round_half_up
from ..util.timeutil import parse_timestamp, to_iso, utcnow

RECENT_ATTEMPTS_LIMIT = 10


@dataclass(frozen=True)
class QuestionAttempt:
    time_spent: int
    is_correct: bool
    date: datetime

    def to_json(self) -> Dict[str, Any]:
        return {"timeSpent": self.time_spent, "isCorrect": self.is_correct, "date": to_iso(self.date)}

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "QuestionAttempt":
        return cls(
            time_spent=int(data.get("timeSpent", 0)),
            is_correct=bool(data.get("isCorrect", False)),
            date=parse_timestamp(data["date"]),
        )


@dataclass
class QuestionStatDetail:
    """Aggregated history for one factor pair."""

    factor1: int
    factor2: int
    attempts: int = 0
    correct: int = 0
    total_time: int = 0
    average_time: int = 0
    success_rate: int = 0
    last_attempted: datetime = field(default_factory=utcnow)
    recent_attempts: List[QuestionAttempt] = field(default_factory=list)

    @property
    def key(self) -> str:
        return stat_key(self.factor1, self.factor2)

    def recompute(self) -> None:
        """Refresh the derived fields from attempts/correct/total_time."""
        if self.attempts > 0:
            self.average_time = round_half_up(self.total_time / self.attempts)
            self.success_rate = percent(self.correct, self.attempts)
        else:
            self.average_time = 0
            self.success_rate = 0

    def record(self, attempt: QuestionAttempt) -> None:
        self.recent_attempts.append(attempt)
        if len(self.recent_attempts) > RECENT_ATTEMPTS_LIMIT:
            self.recent_attempts = self.recent_attempts[-RECENT_ATTEMPTS_LIMIT:]
        self.attempts += 1
        if attempt.is_correct:
            self.correct += 1
        self.total_time += attempt.time_spent
        self.last_attempted = attempt.date
        self.recompute()

    def copy(self) -> "QuestionStatDetail":
        return replace(self, recent_attempts=list(self.recent_attempts))

    def to_json(self) -> Dict[str, Any]:
        return {
            "factor1": self.factor1,
            "factor2": self.factor2,
            "attempts": self.attempts,
            "correct": self.correct,
            "totalTime": self.total_time,
            "averageTime": self.average_time,
            "successRate": self.success_rate,
            "lastAttempted": to_iso(self.last_attempted),
            "recentAttempts": [a.to_json() for a in self.recent_attempts],
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "QuestionStatDetail":
        return cls(
            factor1=int(data["factor1"]),
            factor2=int(data["factor2"]),
            attempts=int(data.get("attempts", 0)),
            correct=int(data.get("correct", 0)),
            total_time=int(data.get("totalTime", 0)),
            average_time=int(data.get("averageTime", 0)),
            success_rate=int(data.get("successRate", 0)),
            last_attempted=parse_timestamp(data["lastAttempted"]) if data.get("lastAttempted") else utcnow(),
            recent_attempts=[QuestionAttempt.from_json(a) for a in (data.get("recentAttempts") or [])],
        )


QuestionStats = Dict[str, QuestionStatDetail]


def merge_stat_details(a: QuestionStatDetail, b: QuestionStatDetail) -> QuestionStatDetail:
    """Combine two records of the same unordered pair.

    Each attempt was recorded under exactly one of the keys, so the totals
    add up; the recent history is re-sorted by date and trimmed.
    """
    lo, hi = ordered_pair(a.factor1, a.factor2)
    history = sorted(a.recent_attempts + b.recent_attempts, key=lambda x: x.date)
    merged = QuestionStatDetail(
        factor1=lo,
        factor2=hi,
        attempts=a.attempts + b.attempts,
        correct=a.correct + b.correct,
        total_time=a.total_time + b.total_time,
        last_attempted=max(a.last_attempted, b.last_attempted),
        recent_attempts=history[-RECENT_ATTEMPTS_LIMIT:],
    )
    merged.recompute()
    return merged


def find_stat(question_stats: QuestionStats, factor1: int, factor2: int) -> Optional[QuestionStatDetail]:
    """Look up a pair's stats regardless of the order it was stored in.

    Tries the canonical key and both presentation orders; when more than one
    record exists for the pair they are merged into a fresh read-only copy.
    """
    keys = [stat_key(factor1, factor2), presented_key(factor1, factor2), presented_key(factor2, factor1)]
    found: List[QuestionStatDetail] = []
    seen = set()
    for k in keys:
        if k in seen:
            continue
        seen.add(k)
        stat = question_stats.get(k)
        if stat is not None:
            found.append(stat)
    if not found:
        return None
    result = found[0]
    for other in found[1:]:
        result = merge_stat_details(result, other)
    return result


def normalize_question_stats(question_stats: QuestionStats) -> QuestionStats:
    """Re-key every record under its canonical unordered key.

    Legacy data keyed as presented ("4x3" next to "3x4") is folded into a
    single record per pair.
    """
    out: QuestionStats = {}
    for stat in question_stats.values():
        key = stat.key
        lo, hi = ordered_pair(stat.factor1, stat.factor2)
        if key in out:
            out[key] = merge_stat_details(out[key], stat)
        else:
            canon = stat.copy()
            canon.factor1, canon.factor2 = lo, hi
            out[key] = canon
    return out


@dataclass
class UserProfile:
    id: str
    name: str
    created_at: datetime = field(default_factory=utcnow)
    total_sessions: int = 0
    total_questions: int = 0
    total_correct: int = 0
    question_stats: QuestionStats = field(default_factory=dict)

    def copy(self) -> "UserProfile":
        return replace(self, question_stats={k: v.copy() for k, v in self.question_stats.items()})

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": to_iso(self.created_at),
            "totalSessions": self.total_sessions,
            "totalQuestions": self.total_questions,
            "totalCorrect": self.total_correct,
            "questionStats": {k: v.to_json() for k, v in self.question_stats.items()},
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "UserProfile":
        stats = {k: QuestionStatDetail.from_json(v) for k, v in (data.get("questionStats") or {}).items()}
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            created_at=parse_timestamp(data["createdAt"]) if data.get("createdAt") else utcnow(),
            total_sessions=int(data.get("totalSessions", 0)),
            total_questions=int(data.get("totalQuestions", 0)),
            total_correct=int(data.get("totalCorrect", 0)),
            question_stats=normalize_question_stats(stats),
        )
