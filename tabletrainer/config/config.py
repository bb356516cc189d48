from __future__ import annotations

"""Configuration loading and validation for TableTrainer.

This module loads YAML configuration, applies defaults, and clamps
practice settings into the ranges the drills support.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import sys

import yaml

from ..questions.model import MAX_FACTOR, MIN_FACTOR

MULTIPLIER_RANGE = (1.0, 3.0)
SESSION_LENGTH_RANGE = (10, 50)
QUESTION_DELAY_RANGE = (500, 3000)


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        cfg = _load_yaml(Path(path))
    else:
        default_path = Path(__file__).with_name("defaults.yml")
        cfg = _load_yaml(default_path)
    return cfg


def clamp(name: str, value: Any, bounds: tuple, cast=float) -> Any:
    """Coerce ``value`` with ``cast`` and clamp it into ``bounds`` with a warning."""
    lo, hi = bounds
    try:
        v = cast(value)
    except (TypeError, ValueError):
        print(f"WARNING: Invalid {name} '{value}', using {lo}.")
        return cast(lo)
    if v < lo or v > hi:
        fixed = cast(min(max(v, lo), hi))
        print(f"WARNING: {name} {v} outside {lo}..{hi}, using {fixed}.")
        return fixed
    return v


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    cfg.setdefault("practice", {})
    cfg.setdefault("storage", {})
    cfg.setdefault("stats", {})
    cfg.setdefault("analytics", {})

    practice = cfg["practice"]
    storage = cfg["storage"]
    stats = cfg["stats"]
    analytics = cfg["analytics"]

    practice.setdefault("selected_tables", [2, 3, 4, 5])
    practice.setdefault("adaptive_difficulty", False)
    practice.setdefault("difficulty_multiplier", 2.0)
    practice.setdefault("session_length", 20)
    practice.setdefault("question_delay_ms", 1500)

    storage.setdefault("profiles_path", "./tabletrainer_profiles.json")
    storage.setdefault("session_log_dir", "./storage/data")
    storage.setdefault("write_session_log", True)

    stats.setdefault("show_per_question_feedback", True)
    stats.setdefault("show_summary", True)

    analytics.setdefault("reports_dir", "./reports")

    tables = []
    for t in practice.get("selected_tables") or []:
        try:
            n = int(t)
        except (TypeError, ValueError):
            print(f"WARNING: Ignoring table '{t}', not a number.")
            continue
        if not (MIN_FACTOR <= n <= MAX_FACTOR):
            print(f"WARNING: Ignoring table {n}, outside {MIN_FACTOR}..{MAX_FACTOR}.")
            continue
        if n not in tables:
            tables.append(n)
    practice["selected_tables"] = tables

    practice["adaptive_difficulty"] = bool(practice["adaptive_difficulty"])
    practice["difficulty_multiplier"] = clamp("difficulty_multiplier", practice["difficulty_multiplier"], MULTIPLIER_RANGE)
    practice["session_length"] = clamp("session_length", practice["session_length"], SESSION_LENGTH_RANGE, int)
    practice["question_delay_ms"] = clamp("question_delay_ms", practice["question_delay_ms"], QUESTION_DELAY_RANGE, int)

    return cfg
