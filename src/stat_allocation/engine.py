"""Stat allocation engine - orchestrates rank rolling and stat evaluation."""

import logging
from typing import Dict, Optional, Sequence, Tuple

from src.stat_allocation.allocation_policy import AllocationPolicy
from src.stat_allocation.models import (
    CalibrationTable,
    GenerationConfig,
    RankVector,
    normalize_stat_types,
)
from src.stat_allocation.rng import StatRNG
from src.stat_allocation.scaling_curve import evaluate_stat

logger = logging.getLogger(__name__)


class ConfigurationMissing(Exception):
    """Raised when a generation config or calibration table is not supplied."""

    pass


class StatAllocationEngine:
    """Main entry point for character stat generation.

    Coordinates AllocationPolicy (total roll and distribution) and the
    scaling curve (rank/level -> value). Holds no per-character state; the
    random source and stat order are the only things it keeps.
    """

    def __init__(
        self,
        rng: Optional[StatRNG] = None,
        stat_types: Optional[Sequence] = None,
    ):
        self.stat_types = normalize_stat_types(stat_types)
        self.policy = AllocationPolicy(rng)

    @property
    def rng(self) -> StatRNG:
        return self.policy.rng

    def generate_character(
        self,
        generation_config: Optional[GenerationConfig],
        calibration: Optional[CalibrationTable],
    ) -> Tuple[RankVector, int]:
        """Roll a fresh rank vector.

        Args:
            generation_config: Budget and weighting parameters.
            calibration: Calibration the consumer will evaluate against.
                Not used for the roll, but required so a missing table is
                caught here rather than at evaluation time.

        Returns:
            ``(rank_vector, starting_level)``. Ranks may be 0; consumers
            clamp to >= 1 before persisting.

        Raises:
            ConfigurationMissing: If either argument is None.
        """
        self._require(generation_config, calibration)

        cfg = generation_config.normalized()
        total = self.policy.roll_total_points(cfg)
        ranks = self.policy.allocate(total, cfg, self.stat_types)

        logger.debug(
            "Generated character: total=%d level=%d ranks=%s",
            total, cfg.starting_level, ranks.as_dict(),
        )
        return ranks, cfg.starting_level

    def evaluate_all(
        self,
        rank_vector: RankVector,
        level: int,
        calibration: Optional[CalibrationTable],
    ) -> Dict[str, float]:
        """Evaluate every stat in *rank_vector* at *level*.

        Ranks below 1 are clamped by the curve, so a raw allocation result
        can be passed in directly.

        Returns:
            Dict mapping stat identifier to value, in stat order.
        """
        if calibration is None:
            logger.error("evaluate_all called without a calibration table")
            raise ConfigurationMissing("Calibration table is required")

        cal = calibration.normalized()
        return {
            stat: evaluate_stat(rank, level, cal)
            for stat, rank in zip(rank_vector.stat_types, rank_vector.ranks)
        }

    @staticmethod
    def _require(
        generation_config: Optional[GenerationConfig],
        calibration: Optional[CalibrationTable],
    ):
        missing = []
        if generation_config is None:
            missing.append("generation config")
        if calibration is None:
            missing.append("calibration table")
        if missing:
            logger.error("Cannot generate character: missing %s", " and ".join(missing))
            raise ConfigurationMissing(f"Missing {' and '.join(missing)}")
