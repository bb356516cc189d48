from .model import MIN_FACTOR, MAX_FACTOR, Question, pair_key, stat_key
from .generator import (
    fill_with_retry,
    generate_adaptive_question_set,
    generate_question_set,
    generate_random_question,
    shuffle_questions,
)
from .weighting import (
    WeightedQuestion,
    calculate_question_weight,
    create_weighted_pool,
    select_from_weighted_pool,
)

__all__ = [
    "MIN_FACTOR",
    "MAX_FACTOR",
    "Question",
    "pair_key",
    "stat_key",
    "fill_with_retry",
    "generate_adaptive_question_set",
    "generate_question_set",
    "generate_random_question",
    "shuffle_questions",
    "WeightedQuestion",
    "calculate_question_weight",
    "create_weighted_pool",
    "select_from_weighted_pool",
]
