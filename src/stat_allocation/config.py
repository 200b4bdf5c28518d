# Stat order used when the caller does not supply one. Append only: persisted
# rank arrays are index-aligned with this tuple.
DEFAULT_STAT_ORDER = ("STR", "DEF", "VIT", "PTY", "INT", "AGI")

# Default generation parameters (recruit config)
DEFAULT_MIN_TOTAL_POINTS = 100
DEFAULT_MAX_TOTAL_POINTS = 400
DEFAULT_TOTAL_POINTS_SKEW = 2.0  # >1 favours low totals, 1 = uniform
DEFAULT_ANTI_DOMINANCE_ALPHA = 1.25
DEFAULT_COMPARE_TO_CURRENT_MIN = True
DEFAULT_SPIKE_START_CHANCE = 0.01  # 1% per allocated point
DEFAULT_SPIKE_LENGTH_MIN = 2
DEFAULT_SPIKE_LENGTH_MAX = 6
DEFAULT_SPIKE_ALPHA = 2.0
DEFAULT_STARTING_LEVEL = 1

# Skew substituted for a non-positive value
FALLBACK_TOTAL_POINTS_SKEW = 1.0

# Default calibration table (stat config)
DEFAULT_MAX_RANK = 100
DEFAULT_MAX_LEVEL = 50
DEFAULT_RANK1_LEVEL1 = 10.0
DEFAULT_RANK1_MAX_LEVEL = 114.0
DEFAULT_MAX_RANK_LEVEL1 = 15.0
DEFAULT_MAX_RANK_MAX_LEVEL = 150.0

# Weighted pick
WEIGHT_FLOOR = 1e-4  # keeps the roulette total above zero

# Lowest rank a consumer may persist
MIN_PERSISTED_RANK = 1
