"""Rank budget sampling and point-by-point distribution.

Two steps turn a :class:`GenerationConfig` into a :class:`RankVector`:

1. **Total points** - a uniform draw ``u`` is skewed as ``u ** skew`` and
   mapped onto ``[min_total_points, max_total_points]``. Skew above 1 pulls
   totals toward the minimum.
2. **Allocation** - points are handed out one at a time by roulette-wheel
   selection. Normally the weighting is *anti-dominance*: stats already
   above the baseline (current minimum or mean) become less likely. With a
   small per-point chance a *spike* starts, and for a few points the
   weighting flips to favour stats that are already high.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from src.stat_allocation.config import WEIGHT_FLOOR
from src.stat_allocation.models import (
    AllocationStep,
    GenerationConfig,
    RankVector,
    normalize_stat_types,
)
from src.stat_allocation.rng import StatRNG
from src.stat_allocation.scaling_curve import lerp

logger = logging.getLogger(__name__)

# math.exp overflows a little above this
_MAX_LOG_WEIGHT = 700.0


class AllocationPolicy:
    """Sample rank budgets and distribute them across stats.

    The policy holds no state between calls other than its random source.
    The spike countdown lives inside a single :meth:`allocate` call.
    """

    def __init__(self, rng: Optional[StatRNG] = None):
        self.rng = rng or StatRNG()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def roll_total_points(self, config: GenerationConfig) -> int:
        """Sample the total number of rank points for one character.

        Formula::

            t = clamp(u ** total_points_skew, 0, 1)
            total = round(lerp(min_total_points, max_total_points, t))

        A non-positive skew is replaced by the uniform skew (see
        :meth:`GenerationConfig.normalized`).
        """
        cfg = config.normalized()
        u = self.rng.roll()
        skewed = min(max(u ** cfg.total_points_skew, 0.0), 1.0)
        return int(round(lerp(cfg.min_total_points, cfg.max_total_points, skewed)))

    def allocate(
        self,
        total_points: int,
        config: GenerationConfig,
        stat_types: Optional[Sequence] = None,
    ) -> RankVector:
        """Distribute *total_points* across *stat_types* one point at a time.

        Args:
            total_points: Budget to hand out (>= 0).
            config: Weighting and spike parameters.
            stat_types: Ordered stat identifiers; defaults to the standard
                six-stat order.

        Returns:
            A :class:`RankVector` whose ranks sum to *total_points*.
        """
        return self._run(total_points, config, stat_types, trace=None)

    def allocate_with_trace(
        self,
        total_points: int,
        config: GenerationConfig,
        stat_types: Optional[Sequence] = None,
    ) -> Tuple[RankVector, List[AllocationStep]]:
        """Same as :meth:`allocate`, also returning one step per point."""
        trace: List[AllocationStep] = []
        ranks = self._run(total_points, config, stat_types, trace=trace)
        return ranks, trace

    def weighted_pick(self, weights: Sequence[float]) -> int:
        """Roulette-wheel selection over *weights*.

        Each weight is floored at ``WEIGHT_FLOOR`` so the total is never
        zero. Returns the first index whose cumulative weight is >= the
        draw; if rounding leaves the draw above every cumulative sum the
        last index is returned.
        """
        if not weights:
            raise ValueError("weighted_pick needs at least one weight")

        floored = [max(WEIGHT_FLOOR, w) for w in weights]
        r = self.rng.roll() * sum(floored)

        acc = 0.0
        for i, w in enumerate(floored):
            acc += w
            if r <= acc:
                return i

        logger.warning(
            "Weighted pick fell through (r=%r, total=%r); using last index",
            r, acc,
        )
        return len(floored) - 1

    # ------------------------------------------------------------------
    # Weightings
    # ------------------------------------------------------------------

    @staticmethod
    def anti_dominance_weights(
        values: Sequence[int], alpha: float, compare_to_min: bool
    ) -> List[float]:
        """``1 / (1 + max(0, v - baseline)) ** alpha`` per stat.

        The baseline is the current minimum, or the (unrounded) mean when
        *compare_to_min* is False. A stat at or below the baseline gets
        weight 1.
        """
        if compare_to_min:
            baseline = float(min(values))
        else:
            baseline = sum(values) / len(values)

        # exp/log1p form underflows to 0 instead of overflowing
        return [
            math.exp(-alpha * math.log1p(max(0.0, v - baseline)))
            for v in values
        ]

    @staticmethod
    def spike_weights(values: Sequence[int], alpha: float) -> List[float]:
        """``(v + 1) ** alpha`` per stat, rescaled if it would overflow."""
        logs = [alpha * math.log(v + 1) for v in values]
        shift = max(0.0, max(logs) - _MAX_LOG_WEIGHT)
        return [math.exp(lw - shift) for lw in logs]

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _run(
        self,
        total_points: int,
        config: GenerationConfig,
        stat_types: Optional[Sequence],
        trace: Optional[List[AllocationStep]],
    ) -> RankVector:
        if total_points < 0:
            raise ValueError(f"total_points must be >= 0, got {total_points}")

        cfg = config.normalized()
        names = normalize_stat_types(stat_types)
        values = [0] * len(names)

        spike_remaining = 0
        spikes_started = 0

        for step in range(total_points):
            started = False
            if spike_remaining <= 0 and self.rng.chance(cfg.spike_start_chance):
                spike_remaining = self.rng.randint(
                    cfg.spike_length_min, cfg.spike_length_max
                )
                # A zero-length spike leaves this point in anti-dominance mode.
                if spike_remaining > 0:
                    started = True
                    spikes_started += 1
                    logger.debug(
                        "Spike started at point %d for %d points", step, spike_remaining
                    )

            if spike_remaining > 0:
                weights = self.spike_weights(values, cfg.spike_alpha)
                spike = True
                spike_remaining -= 1
            else:
                weights = self.anti_dominance_weights(
                    values, cfg.anti_dominance_alpha, cfg.compare_to_current_min
                )
                spike = False

            pick = self.weighted_pick(weights)
            values[pick] += 1

            if trace is not None:
                trace.append(
                    AllocationStep(
                        step=step,
                        stat_index=pick,
                        spike=spike,
                        spike_started=started,
                        weights=tuple(weights),
                    )
                )

        logger.debug(
            "Allocated %d points across %d stats (%d spikes): %s",
            total_points, len(names), spikes_started, values,
        )
        return RankVector(stat_types=names, ranks=tuple(values))

