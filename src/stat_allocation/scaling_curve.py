"""Rank/level -> stat value conversion.

A stat value is a bilinear interpolation over the four corners of a
:class:`CalibrationTable`::

    tL      = (level - 1) / (max_level - 1)
    min_stat = lerp(rank1_level1,    rank1_max_level,    tL)
    max_stat = lerp(max_rank_level1, max_rank_max_level, tL)
    tR      = (rank - 1) / (max_rank - 1)
    value   = lerp(min_stat, max_stat, tR)

Corner values are not required to be monotonic.
"""

from src.stat_allocation.models import CalibrationTable


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between *a* and *b* (``t`` is not clamped)."""
    return a + (b - a) * t


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _fraction(value: int, maximum: int) -> float:
    """Position of *value* in ``[1, maximum]`` as 0..1 (0 when maximum is 1)."""
    if maximum <= 1:
        return 0.0
    return (value - 1) / (maximum - 1)


def evaluate_stat(rank: int, level: int, calibration: CalibrationTable) -> float:
    """Return the interpolated stat value for *rank* at *level*.

    Args:
        rank: Stat rank; clamped to ``[1, max_rank]``.
        level: Character level; clamped to ``[1, max_level]``.
        calibration: Corner values. ``max_rank``/``max_level`` below 1
            are treated as 1.

    Returns:
        The stat value as a float.
    """
    cal = calibration.normalized()
    rank = clamp(rank, 1, cal.max_rank)
    level = clamp(level, 1, cal.max_level)

    t_level = _fraction(level, cal.max_level)
    min_stat = lerp(cal.rank1_level1, cal.rank1_max_level, t_level)
    max_stat = lerp(cal.max_rank_level1, cal.max_rank_max_level, t_level)

    t_rank = _fraction(rank, cal.max_rank)
    return lerp(min_stat, max_stat, t_rank)
