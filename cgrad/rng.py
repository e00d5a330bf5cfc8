"""Process-wide pseudo-random source used for shuffling and initialisation."""

from __future__ import annotations

import random
import time

_rng = random.Random()


def init_random() -> None:
    """Seed the generator from the current time."""
    _rng.seed(int(time.time()))


def init_random_seed(seed: int) -> None:
    """Seed the generator with ``seed``."""
    _rng.seed(seed)


def sample_uniform(lower: float, upper: float) -> float:
    """A float drawn uniformly between ``lower`` and ``upper``."""
    return lower + _rng.random() * (upper - lower)


def sample_uniform_int(lower: int, upper: int) -> int:
    """An integer drawn uniformly from ``lower`` to ``upper`` inclusive."""
    if upper < lower:
        raise ValueError(f"empty range [{lower}, {upper}]")
    return _rng.randint(lower, upper)