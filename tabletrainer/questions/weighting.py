from __future__ import annotations

"""Difficulty weighting and roulette-wheel selection for adaptive drills."""

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..errors import InvalidInputError
from ..profile.models import QuestionStats, find_stat
from ..util.randomness import get_rng
from .model import MAX_FACTOR, MIN_FACTOR, Question

# Fewer attempts than this and a pair keeps the baseline weight.
MIN_ATTEMPTS_FOR_WEIGHTING = 3
TARGET_SUCCESS_RATE = 80
SLOW_ANSWER_MS = 3000
SLOW_PENALTY_SPAN_MS = 5000


@dataclass(frozen=True)
class WeightedQuestion:
    factor1: int
    factor2: int
    weight: float


def calculate_question_weight(
    factor1: int,
    factor2: int,
    question_stats: QuestionStats,
    difficulty_multiplier: float,
) -> float:
    """Selection weight for a pair: 1.0 plus accuracy and speed penalties."""
    stat = find_stat(question_stats, factor1, factor2)
    if stat is None or stat.attempts < MIN_ATTEMPTS_FOR_WEIGHTING:
        return 1.0

    weight = 1.0
    if stat.success_rate < TARGET_SUCCESS_RATE:
        success_penalty = (TARGET_SUCCESS_RATE - stat.success_rate) / TARGET_SUCCESS_RATE
        weight += success_penalty * difficulty_multiplier
    if stat.average_time > SLOW_ANSWER_MS:
        time_penalty = min((stat.average_time - SLOW_ANSWER_MS) / SLOW_PENALTY_SPAN_MS, 1.0)
        weight += time_penalty * difficulty_multiplier
    return weight


def create_weighted_pool(
    selected_tables: Iterable[int],
    question_stats: QuestionStats,
    difficulty_multiplier: float,
) -> List[WeightedQuestion]:
    """All table × factor combinations, both orderings, in a stable order."""
    pool: List[WeightedQuestion] = []
    seen_tables = []
    for table in selected_tables:
        if table in seen_tables:
            continue
        seen_tables.append(table)
        for factor in range(MIN_FACTOR, MAX_FACTOR + 1):
            pool.append(
                WeightedQuestion(table, factor, calculate_question_weight(table, factor, question_stats, difficulty_multiplier))
            )
            if factor != table:
                pool.append(
                    WeightedQuestion(factor, table, calculate_question_weight(factor, table, question_stats, difficulty_multiplier))
                )
    return pool


def select_from_weighted_pool(pool: List[WeightedQuestion], rng: Optional[random.Random] = None) -> Question:
    """Draw one question by inverting the cumulative weight distribution."""
    if not pool:
        raise InvalidInputError("cannot select from an empty question pool")
    rng = get_rng(rng)
    total_weight = sum(item.weight for item in pool)
    remaining = rng.random() * total_weight
    for item in pool:
        remaining -= item.weight
        if remaining <= 0:
            return Question.make(item.factor1, item.factor2)
    # float accumulation can leave a sliver behind
    last = pool[-1]
    return Question.make(last.factor1, last.factor2)
