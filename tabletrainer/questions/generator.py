from __future__ import annotations

"""Question generation: single questions and deduplicated question sets."""

import random
from typing import Callable, Iterable, List, Optional, Sequence

from ..errors import InvalidInputError
from ..profile.models import QuestionStats
from ..util.randomness import get_rng
from .model import MAX_FACTOR, MIN_FACTOR, Question
from .weighting import create_weighted_pool, select_from_weighted_pool

DEFAULT_RETRY_BUDGET = 50
DEFAULT_SET_SIZE = 20


def _validate_tables(selected_tables: Iterable[int]) -> List[int]:
    tables = list(selected_tables)
    if not tables:
        raise InvalidInputError("No multiplication tables selected")
    for t in tables:
        if not (MIN_FACTOR <= int(t) <= MAX_FACTOR):
            raise InvalidInputError(f"table {t} is outside {MIN_FACTOR}..{MAX_FACTOR}")
    return [int(t) for t in tables]


def generate_random_question(selected_tables: Iterable[int], rng: Optional[random.Random] = None) -> Question:
    """One question from a random selected table and a random factor 1..12.

    Which of the two is shown first is a coin flip.
    """
    tables = _validate_tables(selected_tables)
    rng = get_rng(rng)
    table = rng.choice(tables)
    factor = rng.randint(MIN_FACTOR, MAX_FACTOR)
    if rng.random() < 0.5:
        return Question.make(table, factor)
    return Question.make(factor, table)


def fill_with_retry(draw: Callable[[], Question], count: int, retry_budget: int = DEFAULT_RETRY_BUDGET) -> List[Question]:
    """Draw ``count`` questions, avoiding repeated unordered pairs.

    Each slot gets up to ``retry_budget`` extra draws to find an unused pair;
    after that the duplicate is accepted, so the result always has exactly
    ``count`` entries even when the pool of pairs is too small.
    """
    if count < 0:
        raise InvalidInputError(f"question count must be >= 0, got {count}")
    if retry_budget < 0:
        raise InvalidInputError(f"retry budget must be >= 0, got {retry_budget}")
    questions: List[Question] = []
    used = set()
    for _ in range(count):
        question = draw()
        retries = 0
        while question.pair_key in used and retries < retry_budget:
            question = draw()
            retries += 1
        used.add(question.pair_key)
        questions.append(question)
    return questions


def generate_question_set(
    selected_tables: Iterable[int],
    count: int = DEFAULT_SET_SIZE,
    rng: Optional[random.Random] = None,
    retry_budget: int = DEFAULT_RETRY_BUDGET,
) -> List[Question]:
    tables = _validate_tables(selected_tables)
    rng = get_rng(rng)
    return fill_with_retry(lambda: generate_random_question(tables, rng), count, retry_budget)


def generate_adaptive_question_set(
    selected_tables: Iterable[int],
    count: int,
    question_stats: QuestionStats,
    settings,
    rng: Optional[random.Random] = None,
    retry_budget: int = DEFAULT_RETRY_BUDGET,
) -> List[Question]:
    """Question set biased towards pairs the learner finds hard.

    ``settings`` only needs ``adaptive_difficulty`` and
    ``difficulty_multiplier`` attributes (see PracticeSettings).
    """
    tables = _validate_tables(selected_tables)
    if not settings.adaptive_difficulty:
        return generate_question_set(tables, count, rng=rng, retry_budget=retry_budget)
    rng = get_rng(rng)
    pool = create_weighted_pool(tables, question_stats, float(settings.difficulty_multiplier))
    return fill_with_retry(lambda: select_from_weighted_pool(pool, rng), count, retry_budget)


def shuffle_questions(questions: Sequence[Question], rng: Optional[random.Random] = None) -> List[Question]:
    """Return a shuffled copy; the input is left untouched."""
    out = list(questions)
    get_rng(rng).shuffle(out)
    return out
