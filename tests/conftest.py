"""Shared fixtures for the stat allocation test suite."""

import pytest

from src.stat_allocation.engine import StatAllocationEngine
from src.stat_allocation.models import CalibrationTable, GenerationConfig
from src.stat_allocation.rng import StatRNG


class ScriptedRNG:
    """Deterministic stand-in for StatRNG.

    ``roll()`` returns the scripted values in order, then repeats *tail*
    forever. ``randint(a, b)`` always returns *a*.
    """

    def __init__(self, rolls=(), tail=0.5):
        self._rolls = list(rolls)
        self.tail = tail
        self.calls = 0

    def roll(self) -> float:
        self.calls += 1
        if self._rolls:
            return self._rolls.pop(0)
        return self.tail

    def chance(self, p: float) -> bool:
        return self.roll() < p

    def randint(self, a: int, b: int) -> int:
        return a


# ------------------------------------------------------------------
# Lightweight factories – cheap to construct, no I/O
# ------------------------------------------------------------------

@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRNG instances."""
    return ScriptedRNG


@pytest.fixture
def seeded_rng():
    return StatRNG(seed=1234)


@pytest.fixture
def generation_config():
    return GenerationConfig(
        min_total_points=100,
        max_total_points=400,
        total_points_skew=2.0,
        anti_dominance_alpha=1.25,
        compare_to_current_min=True,
        spike_start_chance=0.01,
        spike_length_min=2,
        spike_length_max=6,
        spike_alpha=2.0,
        starting_level=1,
    )


@pytest.fixture
def calibration():
    return CalibrationTable(
        max_rank=100,
        max_level=50,
        rank1_level1=10.0,
        rank1_max_level=114.0,
        max_rank_level1=15.0,
        max_rank_max_level=150.0,
    )


@pytest.fixture
def engine(seeded_rng):
    return StatAllocationEngine(rng=seeded_rng)
