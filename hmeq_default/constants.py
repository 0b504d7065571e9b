"""
Column names and defaults for the HMEQ (home-equity loan) dataset.
"""

LABEL_COLUMN = "BAD"

NUMERIC_FEATURES = (
    "LOAN",
    "MORTDUE",
    "VALUE",
    "YOJ",
    "DEROG",
    "DELINQ",
    "CLAGE",
    "NINQ",
    "CLNO",
    "DEBTINC",
)

CATEGORICAL_FEATURES = ("REASON", "JOB")

BIAS_COLUMN = "bias"

# Smallest sample std accepted when fitting the scaler.
ZERO_VARIANCE_TOL = 1e-12

DEFAULT_LEARNING_RATE = 0.001
DEFAULT_ITERATIONS = 100
DEFAULT_THRESHOLD = 0.5
DEFAULT_TEST_SIZE = 0.3
DEFAULT_RANDOM_STATE = 42
DEFAULT_CV_FOLDS = 5
