from .models import QuestionResult, SessionStats
from .tracker import SessionState, SessionTracker

__all__ = ["QuestionResult", "SessionStats", "SessionState", "SessionTracker"]
