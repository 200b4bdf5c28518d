"""Seedable random source for stat generation.

Each generation call should own its stream (or be handed one); a single
``StatRNG`` is not safe to share across threads without external locking.
"""

import random
from typing import Optional


class StatRNG:
    """Thin wrapper over ``random.Random`` exposing only the draws we need.

    Usage::

        rng = StatRNG(seed=123)
        u = rng.roll()           # float in [0.0, 1.0)
        hit = rng.chance(0.25)   # True 25% of the time
        n = rng.randint(2, 6)    # inclusive
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._random = random.Random(seed)

    def reseed(self, seed: int) -> None:
        """Restart the stream from *seed*."""
        self.seed = seed
        self._random = random.Random(seed)

    def spawn(self) -> "StatRNG":
        """Independent child stream derived from this one."""
        return StatRNG(self._random.randrange(2**31))

    def roll(self) -> float:
        """Return a float in [0.0, 1.0)."""
        return self._random.random()

    def chance(self, p: float) -> bool:
        """Bernoulli trial: True with probability *p*."""
        return self.roll() < p

    def randint(self, a: int, b: int) -> int:
        """Inclusive randint [a, b]."""
        return self._random.randint(a, b)
