"""Data models for stat allocation - immutable values passed between calls."""

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union

from src.stat_allocation.config import (
    DEFAULT_ANTI_DOMINANCE_ALPHA,
    DEFAULT_COMPARE_TO_CURRENT_MIN,
    DEFAULT_MAX_LEVEL,
    DEFAULT_MAX_RANK,
    DEFAULT_MAX_RANK_LEVEL1,
    DEFAULT_MAX_RANK_MAX_LEVEL,
    DEFAULT_MAX_TOTAL_POINTS,
    DEFAULT_MIN_TOTAL_POINTS,
    DEFAULT_RANK1_LEVEL1,
    DEFAULT_RANK1_MAX_LEVEL,
    DEFAULT_SPIKE_ALPHA,
    DEFAULT_SPIKE_LENGTH_MAX,
    DEFAULT_SPIKE_LENGTH_MIN,
    DEFAULT_SPIKE_START_CHANCE,
    DEFAULT_STARTING_LEVEL,
    DEFAULT_STAT_ORDER,
    DEFAULT_TOTAL_POINTS_SKEW,
    FALLBACK_TOTAL_POINTS_SKEW,
    MIN_PERSISTED_RANK,
)

logger = logging.getLogger(__name__)


class StatType(str, Enum):
    """Stat identifiers in persisted order. Append new members at the end."""

    STR = "STR"
    DEF = "DEF"
    VIT = "VIT"
    PTY = "PTY"
    INT = "INT"
    AGI = "AGI"


def stat_name(stat: Union[str, StatType]) -> str:
    """Plain string identifier for a stat (``StatType.STR`` -> ``"STR"``)."""
    if isinstance(stat, Enum):
        return str(stat.value)
    return str(stat)


def normalize_stat_types(stat_types: Optional[Iterable]) -> Tuple[str, ...]:
    """Return the ordered stat identifiers as a tuple of strings.

    ``None`` means the default order. Raises ``ValueError`` for a bare
    string, an empty sequence or duplicate identifiers.
    """
    if stat_types is None:
        return DEFAULT_STAT_ORDER
    if isinstance(stat_types, str):
        raise ValueError(
            f"stat_types must be a sequence of stats, not the string {stat_types!r}"
        )
    names = tuple(stat_name(s) for s in stat_types)
    if not names:
        raise ValueError("stat_types must contain at least one stat")
    if len(set(names)) != len(names):
        raise ValueError(f"Duplicate stat identifiers in {names!r}")
    return names


@dataclass(frozen=True)
class GenerationConfig:
    """Parameters for rolling a character's rank budget and distribution."""

    min_total_points: int = DEFAULT_MIN_TOTAL_POINTS
    max_total_points: int = DEFAULT_MAX_TOTAL_POINTS
    total_points_skew: float = DEFAULT_TOTAL_POINTS_SKEW
    anti_dominance_alpha: float = DEFAULT_ANTI_DOMINANCE_ALPHA
    compare_to_current_min: bool = DEFAULT_COMPARE_TO_CURRENT_MIN
    spike_start_chance: float = DEFAULT_SPIKE_START_CHANCE
    spike_length_min: int = DEFAULT_SPIKE_LENGTH_MIN
    spike_length_max: int = DEFAULT_SPIKE_LENGTH_MAX
    spike_alpha: float = DEFAULT_SPIKE_ALPHA
    starting_level: int = DEFAULT_STARTING_LEVEL

    @classmethod
    def default(cls) -> "GenerationConfig":
        return cls()

    def normalized(self) -> "GenerationConfig":
        """Return a copy with out-of-range designer values clamped.

        Bad ranges are corrected rather than rejected; every correction is
        logged as a warning.
        """
        changes: Dict[str, object] = {}

        lo, hi = self.min_total_points, self.max_total_points
        if lo > hi:
            lo, hi = hi, lo
        lo, hi = max(lo, 0), max(hi, 0)
        if (lo, hi) != (self.min_total_points, self.max_total_points):
            changes["min_total_points"] = lo
            changes["max_total_points"] = hi

        skew = self.total_points_skew
        if not math.isfinite(skew) or skew <= 0:
            changes["total_points_skew"] = FALLBACK_TOTAL_POINTS_SKEW

        if self.anti_dominance_alpha < 0:
            changes["anti_dominance_alpha"] = 0.0

        chance = min(max(self.spike_start_chance, 0.0), 1.0)
        if chance != self.spike_start_chance:
            changes["spike_start_chance"] = chance

        s_lo, s_hi = self.spike_length_min, self.spike_length_max
        if s_lo > s_hi:
            s_lo, s_hi = s_hi, s_lo
        s_lo, s_hi = max(s_lo, 0), max(s_hi, 0)
        if (s_lo, s_hi) != (self.spike_length_min, self.spike_length_max):
            changes["spike_length_min"] = s_lo
            changes["spike_length_max"] = s_hi

        if self.spike_alpha < 1:
            changes["spike_alpha"] = 1.0

        if self.starting_level < 1:
            changes["starting_level"] = 1

        if not changes:
            return self

        for name, value in changes.items():
            logger.warning(
                "GenerationConfig.%s=%r out of range, using %r",
                name, getattr(self, name), value,
            )
        return replace(self, **changes)


@dataclass(frozen=True)
class CalibrationTable:
    """Corner stat values for bilinear rank/level interpolation."""

    max_rank: int = DEFAULT_MAX_RANK
    max_level: int = DEFAULT_MAX_LEVEL
    rank1_level1: float = DEFAULT_RANK1_LEVEL1
    rank1_max_level: float = DEFAULT_RANK1_MAX_LEVEL
    max_rank_level1: float = DEFAULT_MAX_RANK_LEVEL1
    max_rank_max_level: float = DEFAULT_MAX_RANK_MAX_LEVEL

    @classmethod
    def default(cls) -> "CalibrationTable":
        return cls()

    def normalized(self) -> "CalibrationTable":
        """Return a copy with ``max_rank`` and ``max_level`` floored at 1."""
        changes: Dict[str, int] = {}
        if self.max_rank < 1:
            changes["max_rank"] = 1
        if self.max_level < 1:
            changes["max_level"] = 1
        if not changes:
            return self

        for name, value in changes.items():
            logger.warning(
                "CalibrationTable.%s=%r out of range, using %r",
                name, getattr(self, name), value,
            )
        return replace(self, **changes)


@dataclass(frozen=True)
class RankVector:
    """Per-stat ranks, index-aligned with ``stat_types``."""

    stat_types: Tuple[str, ...]
    ranks: Tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "stat_types", normalize_stat_types(self.stat_types))
        object.__setattr__(self, "ranks", tuple(int(r) for r in self.ranks))

        if len(self.ranks) != len(self.stat_types):
            raise ValueError(
                f"ranks length ({len(self.ranks)}) must match "
                f"stat_types length ({len(self.stat_types)})"
            )
        if any(r < 0 for r in self.ranks):
            raise ValueError(f"ranks must be non-negative, got {self.ranks}")

    @classmethod
    def from_dict(
        cls, ranks: Dict, stat_types: Optional[Sequence] = None
    ) -> "RankVector":
        """Build from a stat -> rank mapping; missing stats get 0."""
        names = normalize_stat_types(stat_types)
        by_name = {stat_name(k): v for k, v in ranks.items()}
        return cls(stat_types=names, ranks=tuple(by_name.get(n, 0) for n in names))

    @property
    def total(self) -> int:
        """Sum of all ranks (the budget that produced this vector)."""
        return sum(self.ranks)

    def __len__(self) -> int:
        return len(self.ranks)

    def __iter__(self):
        return iter(self.ranks)

    def __getitem__(self, key) -> int:
        if isinstance(key, int):
            return self.ranks[key]
        return self.ranks[self.index_of(key)]

    def index_of(self, stat) -> int:
        name = stat_name(stat)
        try:
            return self.stat_types.index(name)
        except ValueError:
            raise KeyError(f"Unknown stat {name!r}") from None

    def as_dict(self) -> Dict[str, int]:
        """Stat -> rank mapping in stat order."""
        return dict(zip(self.stat_types, self.ranks))

    def clamped(
        self, min_rank: int = MIN_PERSISTED_RANK, max_rank: Optional[int] = None
    ) -> "RankVector":
        """Copy with each rank clamped to ``[min_rank, max_rank]``.

        Allocation may produce 0; persisted ranks start at 1.
        """
        ranks = [max(r, min_rank) for r in self.ranks]
        if max_rank is not None:
            ranks = [min(r, max(max_rank, min_rank)) for r in ranks]
        return RankVector(stat_types=self.stat_types, ranks=tuple(ranks))


@dataclass(frozen=True)
class AllocationStep:
    """One allocated point, recorded by ``allocate_with_trace``."""

    step: int
    stat_index: int
    spike: bool  # selected with the spike weighting
    spike_started: bool = False
    weights: Tuple[float, ...] = field(default=(), compare=False, repr=False)
