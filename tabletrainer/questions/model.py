from __future__ import annotations

"""Question model."""

from dataclasses import dataclass, field
from typing import Any, Dict

from ..util.pairs import ordered_pair, pair_key, presented_key, stat_key
from ..util.randomness import new_id

MIN_FACTOR = 1
MAX_FACTOR = 12

__all__ = ["MIN_FACTOR", "MAX_FACTOR", "Question", "ordered_pair", "pair_key", "presented_key", "stat_key"]


@dataclass(frozen=True)
class Question:
    """One multiplication question.

    ``id`` is unique per instance, so two 3×4 questions in the same set are
    distinct entities even though they share a pair key.
    """

    factor1: int
    factor2: int
    answer: int
    id: str = field(default_factory=new_id)

    @classmethod
    def make(cls, factor1: int, factor2: int) -> "Question":
        return cls(factor1=factor1, factor2=factor2, answer=factor1 * factor2)

    @property
    def pair_key(self) -> str:
        return pair_key(self.factor1, self.factor2)

    @property
    def stat_key(self) -> str:
        return stat_key(self.factor1, self.factor2)

    def to_json(self) -> Dict[str, Any]:
        return {"factor1": self.factor1, "factor2": self.factor2, "answer": self.answer, "id": self.id}

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Question":
        f1 = int(data["factor1"])
        f2 = int(data["factor2"])
        return cls(
            factor1=f1,
            factor2=f2,
            answer=int(data.get("answer", f1 * f2)),
            id=str(data.get("id") or new_id()),
        )
