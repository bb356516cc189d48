from __future__ import annotations

"""Exception types raised by the drilling core."""


class TableTrainerError(Exception):
    """Base class for all TableTrainer errors."""


class InvalidInputError(TableTrainerError, ValueError):
    """Raised when the caller hands the core unusable input (e.g. no tables)."""


class SessionStateError(TableTrainerError, RuntimeError):
    """Raised when a session operation is called in the wrong state."""
