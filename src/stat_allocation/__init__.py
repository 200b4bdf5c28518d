from src.stat_allocation.allocation_policy import AllocationPolicy
from src.stat_allocation.engine import ConfigurationMissing, StatAllocationEngine
from src.stat_allocation.models import (
    AllocationStep,
    CalibrationTable,
    GenerationConfig,
    RankVector,
    StatType,
)
from src.stat_allocation.rng import StatRNG
from src.stat_allocation.scaling_curve import evaluate_stat, lerp

__all__ = [
    "AllocationPolicy",
    "AllocationStep",
    "CalibrationTable",
    "ConfigurationMissing",
    "GenerationConfig",
    "RankVector",
    "StatAllocationEngine",
    "StatRNG",
    "StatType",
    "evaluate_stat",
    "lerp",
]
