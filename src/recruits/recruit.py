"""Recruit records - identity, class flags, level and persisted ranks."""

import logging
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Dict, List, Optional, Sequence

from src.recruits.character_stats import CharacterStats
from src.stat_allocation.config import MIN_PERSISTED_RANK
from src.stat_allocation.engine import ConfigurationMissing, StatAllocationEngine
from src.stat_allocation.models import (
    CalibrationTable,
    GenerationConfig,
    normalize_stat_types,
    stat_name,
)

logger = logging.getLogger(__name__)

DEFAULT_RECRUIT_NAME = "Recruit"


class RecruitClass(IntFlag):
    """Recruit jobs. Flags, so a recruit can be e.g. WARRIOR | THIEF."""

    NONE = 0
    WARRIOR = 1 << 0
    THIEF = 1 << 1
    MAGE = 1 << 2
    CLERIC = 1 << 3
    RANGER = 1 << 4
    PALADIN = 1 << 5
    ANY = WARRIOR | THIEF | MAGE | CLERIC | RANGER | PALADIN

    @classmethod
    def single_classes(cls) -> List["RecruitClass"]:
        return [c for c in cls if c.value and c.value & (c.value - 1) == 0]

    def to_label(self) -> str:
        """``"WARRIOR|MAGE"`` style label; ``"NONE"`` when empty."""
        names = [c.name for c in self.single_classes() if c in self]
        return "|".join(names) if names else "NONE"

    @classmethod
    def from_label(cls, label: str) -> "RecruitClass":
        """Parse a label produced by :meth:`to_label` (case-insensitive)."""
        result = cls.NONE
        for part in label.split("|"):
            part = part.strip().upper()
            if not part:
                continue
            try:
                result |= cls[part]
            except KeyError:
                raise ValueError(f"Unknown recruit class {part!r} in {label!r}") from None
        return result


@dataclass
class Recruit:
    """A generated or hand-authored recruit.

    Every stat in ``stat_types`` has a rank >= 1; missing stats are filled
    with 1.
    """

    name: str = DEFAULT_RECRUIT_NAME
    job: RecruitClass = RecruitClass.NONE
    level: int = 1
    ranks: Dict[str, int] = field(default_factory=dict)
    stat_types: Optional[Sequence[str]] = None

    def __post_init__(self):
        self.name = (self.name or "").strip() or DEFAULT_RECRUIT_NAME
        self.job = RecruitClass(self.job)
        self.level = max(1, int(self.level))
        self.stat_types = normalize_stat_types(self.stat_types)

        given = {stat_name(k): v for k, v in self.ranks.items()}
        unknown = set(given) - set(self.stat_types)
        if unknown:
            raise KeyError(f"Unknown stats {sorted(unknown)}; expected {self.stat_types}")
        self.ranks = {
            name: max(MIN_PERSISTED_RANK, int(given.get(name, MIN_PERSISTED_RANK)))
            for name in self.stat_types
        }

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def create_runtime_recruit(
        cls,
        name: str,
        job: RecruitClass,
        generation_config: Optional[GenerationConfig],
        calibration: Optional[CalibrationTable],
        level: Optional[int] = None,
        engine: Optional[StatAllocationEngine] = None,
    ) -> "Recruit":
        """Roll a new recruit's ranks through the allocation engine.

        Args:
            name: Display name (blank becomes ``"Recruit"``).
            job: Class flags.
            generation_config: Roll parameters.
            calibration: Stat calibration the recruit will be evaluated with.
            level: Starting level; defaults to the config's starting level.
            engine: Engine to roll with; a fresh unseeded one if omitted.

        Raises:
            ConfigurationMissing: If either config is None.
        """
        engine = engine or StatAllocationEngine()
        rank_vector, starting_level = engine.generate_character(
            generation_config, calibration
        )
        recruit = cls(
            name=name,
            job=job,
            level=starting_level if level is None else level,
            ranks=rank_vector.clamped().as_dict(),
            stat_types=rank_vector.stat_types,
        )
        logger.info(
            "Created recruit %s (%s) level %d, total rank %d",
            recruit.name, recruit.job.to_label(), recruit.level, recruit.total_rank,
        )
        return recruit

    # ------------------------------------------------------------------
    # Ranks
    # ------------------------------------------------------------------

    def get_rank(self, stat) -> int:
        return self.ranks[self._check_stat(stat)]

    def set_rank(self, stat, value: int):
        self.ranks[self._check_stat(stat)] = max(MIN_PERSISTED_RANK, int(value))

    def ranks_as_list(self) -> List[int]:
        """Ranks in stat order."""
        return [self.ranks[name] for name in self.stat_types]

    @property
    def total_rank(self) -> int:
        return sum(self.ranks.values())

    def _check_stat(self, stat) -> str:
        name = stat_name(stat)
        if name not in self.stat_types:
            raise KeyError(f"Unknown stat {name!r}; expected one of {self.stat_types}")
        return name

    def apply_to(self, calibration: Optional[CalibrationTable]) -> CharacterStats:
        """Build a :class:`CharacterStats` holder for this recruit."""
        if calibration is None:
            raise ConfigurationMissing("Calibration table is required")
        return CharacterStats(
            calibration=calibration,
            level=self.level,
            stat_types=self.stat_types,
            ranks=dict(self.ranks),
        )

    # ------------------------------------------------------------------
    # Record conversion
    # ------------------------------------------------------------------

    def to_record(self) -> Dict:
        """Plain-dict record; ranks are keyed by stat name."""
        return {
            "name": self.name,
            "job": self.job.to_label(),
            "level": self.level,
            "ranks": [
                {"stat": name, "rank": self.ranks[name]} for name in self.stat_types
            ],
        }

    @classmethod
    def from_record(
        cls, record: Dict, stat_types: Optional[Sequence] = None
    ) -> "Recruit":
        """Rebuild a recruit from :meth:`to_record` output.

        Stat names not in *stat_types* are dropped with a warning; stats
        missing from the record read as rank 1.
        """
        names = normalize_stat_types(stat_types)
        ranks: Dict[str, int] = {}
        for entry in record.get("ranks", []):
            stat = entry.get("stat")
            if stat not in names:
                logger.warning("Ignoring unknown stat %r in recruit record", stat)
                continue
            ranks[stat] = entry.get("rank", MIN_PERSISTED_RANK)

        return cls(
            name=record.get("name", DEFAULT_RECRUIT_NAME),
            job=RecruitClass.from_label(record.get("job", "NONE")),
            level=record.get("level", 1),
            ranks=ranks,
            stat_types=names,
        )
