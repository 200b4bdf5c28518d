"""Tests for the stat allocation engine."""

import logging

import pytest

from src.stat_allocation.engine import ConfigurationMissing, StatAllocationEngine
from src.stat_allocation.models import GenerationConfig, RankVector, StatType
from src.stat_allocation.rng import StatRNG
from src.stat_allocation.scaling_curve import evaluate_stat


class TestGenerateCharacter:
    def test_returns_ranks_and_starting_level(self, engine, generation_config, calibration):
        ranks, level = engine.generate_character(generation_config, calibration)

        assert isinstance(ranks, RankVector)
        assert level == generation_config.starting_level
        assert 100 <= ranks.total <= 400
        assert all(r >= 0 for r in ranks.ranks)

    def test_starting_level_passed_through(self, engine, calibration):
        cfg = GenerationConfig(starting_level=7)
        _, level = engine.generate_character(cfg, calibration)
        assert level == 7

    def test_reproducible_with_seed(self, generation_config, calibration):
        a = StatAllocationEngine(rng=StatRNG(5)).generate_character(generation_config, calibration)
        b = StatAllocationEngine(rng=StatRNG(5)).generate_character(generation_config, calibration)
        assert a == b

    def test_successive_calls_are_independent_rolls(self, engine, generation_config, calibration):
        results = {engine.generate_character(generation_config, calibration)[0] for _ in range(20)}
        assert len(results) > 1

    def test_custom_stat_order(self, generation_config, calibration):
        engine = StatAllocationEngine(rng=StatRNG(1), stat_types=["HP", "MP"])
        ranks, _ = engine.generate_character(generation_config, calibration)
        assert ranks.stat_types == ("HP", "MP")

    def test_bare_string_stat_types_rejected(self):
        with pytest.raises(ValueError, match="string"):
            StatAllocationEngine(stat_types="STR")

    def test_invalid_ranges_are_clamped_not_fatal(self, engine, calibration):
        cfg = GenerationConfig(
            min_total_points=50, max_total_points=10,
            spike_length_min=5, spike_length_max=1,
            starting_level=0,
        )
        ranks, level = engine.generate_character(cfg, calibration)
        assert 10 <= ranks.total <= 50
        assert level == 1


class TestConfigurationMissing:
    def test_missing_generation_config(self, engine, calibration, caplog):
        with caplog.at_level(logging.ERROR):
            with pytest.raises(ConfigurationMissing, match="generation config"):
                engine.generate_character(None, calibration)
        assert "missing generation config" in caplog.text

    def test_missing_calibration(self, engine, generation_config):
        with pytest.raises(ConfigurationMissing, match="calibration table"):
            engine.generate_character(generation_config, None)

    def test_missing_both(self, engine):
        with pytest.raises(ConfigurationMissing, match="generation config and calibration table"):
            engine.generate_character(None, None)

    def test_no_randomness_consumed_on_failure(self, scripted_rng, calibration):
        rng = scripted_rng()
        engine = StatAllocationEngine(rng=rng)
        with pytest.raises(ConfigurationMissing):
            engine.generate_character(None, calibration)
        assert rng.calls == 0

    def test_evaluate_all_requires_calibration(self, engine):
        vector = RankVector(stat_types=("STR",), ranks=(3,))
        with pytest.raises(ConfigurationMissing):
            engine.evaluate_all(vector, 1, None)


class TestEvaluateAll:
    def test_one_value_per_stat_in_order(self, engine, calibration):
        vector = RankVector(stat_types=None, ranks=(1, 10, 20, 30, 40, 100))
        values = engine.evaluate_all(vector, 25, calibration)

        assert list(values) == ["STR", "DEF", "VIT", "PTY", "INT", "AGI"]
        for stat, rank in vector.as_dict().items():
            assert values[stat] == pytest.approx(evaluate_stat(rank, 25, calibration))

    def test_zero_rank_evaluates_as_rank_one(self, engine, calibration):
        vector = RankVector(stat_types=("A", "B"), ranks=(0, 1))
        values = engine.evaluate_all(vector, 1, calibration)
        assert values["A"] == values["B"] == pytest.approx(10.0)

    def test_enum_lookup_on_result(self, engine, calibration):
        vector = RankVector(stat_types=None, ranks=(100, 1, 1, 1, 1, 1))
        values = engine.evaluate_all(vector, 50, calibration)
        assert values[StatType.STR] == pytest.approx(150.0)

    def test_generated_character_round_trip(self, engine, generation_config, calibration):
        ranks, level = engine.generate_character(generation_config, calibration)
        values = engine.evaluate_all(ranks, level, calibration)
        assert set(values) == set(ranks.stat_types)
        assert all(10.0 <= v <= 15.0 for v in values.values())
