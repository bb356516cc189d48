from .schema import LOG_DTYPES, SCHEMA_VERSION, QuestionAttemptRecord, QuestionStatRecord, SessionTableRow, UserProfileRecord
from .store import InMemoryProfileStore, JsonProfileStore, ProfileStore, current_profile, parse_profile
from .session_log import (
    init_log,
    rows_from_session,
    validate_rows,
    append_session_rows,
    load_log,
    query_table_trend,
    export_ndjson,
)

__all__ = [
    "LOG_DTYPES",
    "SCHEMA_VERSION",
    "QuestionAttemptRecord",
    "QuestionStatRecord",
    "SessionTableRow",
    "UserProfileRecord",
    "InMemoryProfileStore",
    "JsonProfileStore",
    "ProfileStore",
    "current_profile",
    "parse_profile",
    "init_log",
    "rows_from_session",
    "validate_rows",
    "append_session_rows",
    "load_log",
    "query_table_trend",
    "export_ndjson",
]
