from __future__ import annotations

"""Explain mode: one ``[EXPLAIN]`` line per drill milestone.

Off by default; ``run --explain`` turns it on. Warnings are always shown.
"""

import json
from contextlib import contextmanager
from typing import Any, Dict, Iterator

_ENABLED = False


def enable(flag: bool = True) -> None:
    global _ENABLED
    _ENABLED = bool(flag)


def enabled() -> bool:
    return _ENABLED


@contextmanager
def explaining(flag: bool = True) -> Iterator[None]:
    """Switch tracing on (or off) for the duration of a block."""
    previous = _ENABLED
    enable(flag)
    try:
        yield
    finally:
        enable(previous)


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not _ENABLED:
        return
    # datetimes and other non-JSON values are printed with str()
    body = json.dumps(payload or {}, separators=(",", ":"), default=str, ensure_ascii=False)
    print(f"[EXPLAIN] {event} :: {body}")


def warn(message: str) -> None:
    print(f"[WARN] {message}")
