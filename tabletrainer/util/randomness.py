from __future__ import annotations

"""Randomness helpers: shared source, seeding and id generation."""

import os
import random
from typing import Optional
from uuid import uuid4

import numpy as np

# Shared source used whenever a caller does not inject its own rng.
_RNG = random.Random()


def get_rng(rng: Optional[random.Random] = None) -> random.Random:
    """Return ``rng`` if given, else the module-wide source."""
    return rng if rng is not None else _RNG


def seed_if_needed() -> None:
    """Seed RNGs if SEED env var is set."""
    seed = os.environ.get("SEED")
    if seed is not None:
        try:
            s = int(seed)
        except ValueError:
            return
        _RNG.seed(s)
        np.random.seed(s)


def new_id(prefix: str = "") -> str:
    """Return a process-unique identifier, optionally prefixed."""
    return f"{prefix}{uuid4().hex}"
