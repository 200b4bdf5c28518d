# Batch report defaults
DEFAULT_BATCH_COUNT = 3
CHARACTER_NAME_PATTERN = "Recruit_{index}"

# Corner values must be reproduced within this tolerance
CALIBRATION_TOLERANCE = 1e-4
