import os

# Default hyperparameters for training and querying. Each can be overridden from
# the environment; the CLI uses these as its argparse defaults.

DIM = int(os.getenv("WORDSIM_DIM", "64"))
EPOCHS = int(os.getenv("WORDSIM_EPOCHS", "10"))
WINDOW = int(os.getenv("WORDSIM_WINDOW", "3"))
NEGATIVES = int(os.getenv("WORDSIM_NEGATIVES", "5"))
LR = float(os.getenv("WORDSIM_LR", "0.025"))
BATCH_SIZE = int(os.getenv("WORDSIM_BATCH_SIZE", "32"))
MIN_COUNT = int(os.getenv("WORDSIM_MIN_COUNT", "1"))
SUBSAMPLE_T = float(os.getenv("WORDSIM_SUBSAMPLE_T", "1e-3"))
SEED = int(os.getenv("WORDSIM_SEED", "42"))
TOP_K = int(os.getenv("WORDSIM_TOP_K", "5"))

# "zero": similarity with a zero vector is 0.0; "raise": ZeroMagnitude is raised.
ZERO_MAGNITUDE = os.getenv("WORDSIM_ZERO_MAGNITUDE", "zero").lower()
ZERO_MAGNITUDE_POLICIES = ("zero", "raise")

if ZERO_MAGNITUDE not in ZERO_MAGNITUDE_POLICIES:
    ZERO_MAGNITUDE = "zero"
