"""Character stats holder - per-stat ranks plus a level, evaluated on demand."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from src.stat_allocation.config import MIN_PERSISTED_RANK
from src.stat_allocation.models import (
    CalibrationTable,
    RankVector,
    normalize_stat_types,
    stat_name,
)
from src.stat_allocation.scaling_curve import clamp, evaluate_stat


@dataclass
class CharacterStats:
    """Ranks and level for one character, evaluated against a calibration.

    Ranks are kept in ``[1, max_rank]`` and the level in ``[1, max_level]``.
    A stat that was never set reads as rank 1.
    """

    calibration: CalibrationTable
    level: int = 1
    stat_types: Optional[Sequence[str]] = None
    ranks: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        self.calibration = self.calibration.normalized()
        self.stat_types = normalize_stat_types(self.stat_types)
        self.set_level(self.level)

        initial = dict(self.ranks)
        self.ranks = {}
        for stat, value in initial.items():
            self.set_rank(stat, value)

    @classmethod
    def from_rank_vector(
        cls,
        rank_vector: RankVector,
        level: int,
        calibration: CalibrationTable,
    ) -> "CharacterStats":
        """Build from a freshly allocated vector (0 ranks become 1)."""
        return cls(
            calibration=calibration,
            level=level,
            stat_types=rank_vector.stat_types,
            ranks=rank_vector.as_dict(),
        )

    def set_level(self, level: int):
        self.level = clamp(level, 1, self.calibration.max_level)

    def set_rank(self, stat, value: int):
        """Store *value* for *stat*, clamped to ``[1, max_rank]``."""
        name = self._check_stat(stat)
        self.ranks[name] = clamp(value, MIN_PERSISTED_RANK, self.calibration.max_rank)

    def get_rank(self, stat) -> int:
        name = self._check_stat(stat)
        return self.ranks.get(name, MIN_PERSISTED_RANK)

    def get_stat(self, stat) -> float:
        """Evaluated stat value at the current level."""
        return evaluate_stat(self.get_rank(stat), self.level, self.calibration)

    def get_all_ranks(self) -> Dict[str, int]:
        return {name: self.get_rank(name) for name in self.stat_types}

    def get_all_stats(self) -> Dict[str, float]:
        return {name: self.get_stat(name) for name in self.stat_types}

    def to_rank_vector(self) -> RankVector:
        return RankVector(
            stat_types=self.stat_types,
            ranks=tuple(self.get_rank(name) for name in self.stat_types),
        )

    def _check_stat(self, stat) -> str:
        name = stat_name(stat)
        if name not in self.stat_types:
            raise KeyError(f"Unknown stat {name!r}; expected one of {self.stat_types}")
        return name

    def __getitem__(self, stat) -> float:
        return self.get_stat(stat)

