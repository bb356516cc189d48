from __future__ import annotations

"""Curated practice presets.

Presets help learners pick sensible settings quickly without many flags.
"""

PRACTICE_PRESETS = {
    "beginner": {
        "selected_tables": [1, 2, 5, 10],
        "adaptive_difficulty": False,
        "difficulty_multiplier": 1.0,
        "session_length": 10,
        "question_delay_ms": 2500,
    },
    "default": {
        "selected_tables": [2, 3, 4, 5, 6, 7, 8, 9, 10],
        "adaptive_difficulty": False,
        "difficulty_multiplier": 2.0,
        "session_length": 20,
        "question_delay_ms": 1500,
    },
    "adaptive": {
        "selected_tables": [2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12],
        "adaptive_difficulty": True,
        "difficulty_multiplier": 2.0,
        "session_length": 30,
        "question_delay_ms": 1000,
    },
    "advanced": {
        "selected_tables": [6, 7, 8, 9, 11, 12],
        "adaptive_difficulty": True,
        "difficulty_multiplier": 3.0,
        "session_length": 50,
        "question_delay_ms": 500,
    },
}


def get_preset(name: str) -> dict:
    try:
        return dict(PRACTICE_PRESETS[name])
    except KeyError:
        raise KeyError(f"Unknown preset: {name}") from None
