"""TableTrainer package initialization.

Multiplication-table drills with adaptive question selection and
per-user performance history.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
