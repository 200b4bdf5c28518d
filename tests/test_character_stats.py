"""Tests for the CharacterStats holder."""

import pytest

from src.recruits.character_stats import CharacterStats
from src.stat_allocation.models import CalibrationTable, RankVector, StatType


def _make_stats(**overrides):
    defaults = {
        "calibration": CalibrationTable(),
        "level": 1,
    }
    defaults.update(overrides)
    return CharacterStats(**defaults)


class TestRanks:
    def test_unset_stat_reads_rank_one(self):
        stats = _make_stats()
        assert stats.get_rank(StatType.STR) == 1

    def test_set_and_get(self):
        stats = _make_stats()
        stats.set_rank("DEF", 42)
        assert stats.get_rank(StatType.DEF) == 42

    def test_rank_clamped_to_one(self):
        stats = _make_stats()
        stats.set_rank("STR", 0)
        assert stats.get_rank("STR") == 1

    def test_rank_clamped_to_max_rank(self):
        stats = _make_stats()
        stats.set_rank("STR", 1000)
        assert stats.get_rank("STR") == 100

    def test_initial_ranks_are_clamped(self):
        stats = _make_stats(ranks={"STR": 0, "AGI": 500})
        assert stats.get_rank("STR") == 1
        assert stats.get_rank("AGI") == 100

    def test_unknown_stat_raises(self):
        stats = _make_stats()
        with pytest.raises(KeyError):
            stats.set_rank("LCK", 3)

    def test_get_all_ranks_in_order(self):
        stats = _make_stats(ranks={"AGI": 9})
        assert stats.get_all_ranks() == {
            "STR": 1, "DEF": 1, "VIT": 1, "PTY": 1, "INT": 1, "AGI": 9,
        }


class TestLevel:
    def test_level_clamped_low(self):
        assert _make_stats(level=0).level == 1

    def test_level_clamped_high(self):
        assert _make_stats(level=99).level == 50

    def test_set_level(self):
        stats = _make_stats()
        stats.set_level(25)
        assert stats.level == 25


class TestStats:
    def test_get_stat_uses_curve(self):
        stats = _make_stats(level=25, ranks={"STR": 50})
        assert stats.get_stat("STR") == pytest.approx(70.93, abs=0.01)

    def test_indexing_returns_stat(self):
        stats = _make_stats(level=50, ranks={"VIT": 100})
        assert stats[StatType.VIT] == pytest.approx(150.0)

    def test_get_all_stats(self):
        stats = _make_stats(level=1)
        values = stats.get_all_stats()
        assert list(values) == ["STR", "DEF", "VIT", "PTY", "INT", "AGI"]
        assert all(v == pytest.approx(10.0) for v in values.values())


class TestFromRankVector:
    def test_zero_ranks_become_one(self):
        vector = RankVector(stat_types=None, ranks=(0, 5, 0, 10, 0, 2))
        stats = CharacterStats.from_rank_vector(vector, 3, CalibrationTable())
        assert stats.get_all_ranks() == {
            "STR": 1, "DEF": 5, "VIT": 1, "PTY": 10, "INT": 1, "AGI": 2,
        }
        assert stats.level == 3

    def test_custom_stat_types(self):
        vector = RankVector(stat_types=("HP", "MP"), ranks=(4, 0))
        stats = CharacterStats.from_rank_vector(vector, 1, CalibrationTable())
        assert stats.to_rank_vector() == RankVector(stat_types=("HP", "MP"), ranks=(4, 1))

    def test_degenerate_calibration(self):
        vector = RankVector(stat_types=("A",), ranks=(40,))
        stats = CharacterStats.from_rank_vector(vector, 10, CalibrationTable(max_rank=0, max_level=0))
        assert stats.get_rank("A") == 1
        assert stats.level == 1
