# config.py
from types import SimpleNamespace

# --- Dataset Configuration ---
# Used as the run subdirectory when no --id is given
DATASET_ID = "lecture"

# --- Output Configuration ---
# Root directory for results reports
OUTPUTS_DIR = "outputs"

# --- Test Parameters ---
# Significance level parameter
ALPHA = 0.05
RANDOM_STATE = 423

# Cells with an expected count below this trigger the approximation warning
MIN_EXPECTED_COUNT = 5

# Apply Yates' continuity correction to 2x2 contingency tables
YATES_CORRECTION = True

# Monte Carlo Null Simulation Parameters
SIMULATION_N_SIMULATIONS = 5000
SIMULATION_BATCH_SIZE = 250
SIMULATION_HIST_BINS = 40
# -1 uses all available cores
N_JOBS = -1

# Distribution Demo Parameters
DISTRIBUTION_DFS = [1, 2, 3, 5, 10]
DISTRIBUTION_GRID_SIZE = 500
DISTRIBUTION_NORMAL_SAMPLES = 10000
DISTRIBUTION_NORMAL_DF = 3


def overridden(**overrides):
    """Returns a copy of this module's settings with the non-None overrides applied."""
    settings = {name: value for name, value in globals().items() if name.isupper()}
    for name, value in overrides.items():
        key = name.upper()
        if key not in settings:
            raise ValueError(f"Unknown config setting: {name}")
        if value is not None:
            settings[key] = value
    return SimpleNamespace(**settings)
