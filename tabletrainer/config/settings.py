from __future__ import annotations

"""Practice settings handed from the UI to the generator."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List

from .config import MULTIPLIER_RANGE, QUESTION_DELAY_RANGE, SESSION_LENGTH_RANGE, clamp


@dataclass(frozen=True)
class PracticeSettings:
    selected_tables: List[int] = field(default_factory=list)
    adaptive_difficulty: bool = False
    difficulty_multiplier: float = 2.0
    session_length: int = 20
    question_delay: int = 1500

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "PracticeSettings":
        """Build from a validated config's ``practice`` section."""
        p = cfg.get("practice", {})
        return cls(
            selected_tables=[int(t) for t in p.get("selected_tables", [])],
            adaptive_difficulty=bool(p.get("adaptive_difficulty", False)),
            difficulty_multiplier=float(p.get("difficulty_multiplier", 2.0)),
            session_length=int(p.get("session_length", 20)),
            question_delay=int(p.get("question_delay_ms", 1500)),
        )

    def with_overrides(self, **overrides: Any) -> "PracticeSettings":
        """Copy with non-None overrides applied and ranges re-clamped."""
        values = {k: v for k, v in overrides.items() if v is not None}
        s = replace(self, **values)
        return replace(
            s,
            difficulty_multiplier=clamp("difficulty_multiplier", s.difficulty_multiplier, MULTIPLIER_RANGE),
            session_length=clamp("session_length", s.session_length, SESSION_LENGTH_RANGE, int),
            question_delay=clamp("question_delay", s.question_delay, QUESTION_DELAY_RANGE, int),
        )
