from .models import (
    RECENT_ATTEMPTS_LIMIT,
    QuestionAttempt,
    QuestionStatDetail,
    QuestionStats,
    UserProfile,
    find_stat,
    merge_stat_details,
    normalize_question_stats,
)
from .profile import (
    ProfileOverview,
    best_and_worst,
    create_user_profile,
    get_question_history,
    most_and_least_practiced,
    practiced_tables,
    profile_overview,
    sorted_question_stats,
    update_question_stats_with_attempts,
    update_user_with_session,
)

__all__ = [
    "RECENT_ATTEMPTS_LIMIT",
    "QuestionAttempt",
    "QuestionStatDetail",
    "QuestionStats",
    "UserProfile",
    "find_stat",
    "merge_stat_details",
    "normalize_question_stats",
    "ProfileOverview",
    "best_and_worst",
    "create_user_profile",
    "get_question_history",
    "most_and_least_practiced",
    "practiced_tables",
    "profile_overview",
    "sorted_question_stats",
    "update_question_stats_with_attempts",
    "update_user_with_session",
]
