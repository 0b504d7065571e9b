"""
Shared fixtures: a synthetic HMEQ-shaped table with known signal and the
tiny separable dataset used for end-to-end checks.
"""

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def hmeq_df() -> pd.DataFrame:
    """400 loan applications; default driven mostly by DEBTINC and DELINQ."""
    rng = np.random.default_rng(42)
    n = 400
    df = pd.DataFrame(
        {
            "LOAN": rng.uniform(1_000, 90_000, n).round(),
            "MORTDUE": rng.uniform(2_000, 400_000, n).round(),
            "VALUE": rng.uniform(8_000, 850_000, n).round(),
            "YOJ": rng.uniform(0, 40, n).round(1),
            "DEROG": rng.poisson(0.3, n).astype(float),
            "DELINQ": rng.poisson(0.5, n).astype(float),
            "CLAGE": rng.uniform(0, 1_000, n),
            "NINQ": rng.poisson(1.2, n).astype(float),
            "CLNO": rng.integers(0, 70, n).astype(float),
            "DEBTINC": rng.normal(34, 8, n),
            "REASON": rng.choice(["DebtCon", "HomeImp"], n),
            "JOB": rng.choice(["Other", "Office", "Mgr", "ProfExe", "Sales", "Self"], n),
        }
    )
    score = 0.25 * (df["DEBTINC"] - 34) + 1.2 * df["DELINQ"] + 0.8 * df["DEROG"] - 1.5
    df["BAD"] = (rng.uniform(size=n) < 1 / (1 + np.exp(-score))).astype(int)

    # Sprinkle missing values the way the real file has them.
    for col, frac in (("DEBTINC", 0.1), ("YOJ", 0.05), ("REASON", 0.04), ("JOB", 0.04)):
        idx = rng.choice(n, int(n * frac), replace=False)
        df.loc[idx, col] = np.nan
    return df


@pytest.fixture
def tiny_df() -> pd.DataFrame:
    """Four rows, perfectly separable on both features."""
    return pd.DataFrame(
        {
            "x1": [1.0, 1.0, 5.0, 6.0],
            "x2": [2.0, 3.0, 8.0, 9.0],
            "BAD": [0, 0, 1, 1],
        }
    )


@pytest.fixture
def prediction_data():
    """Labels with noisy but informative scores."""
    rng = np.random.default_rng(7)
    y_true = rng.choice([0.0, 1.0], 500, p=[0.8, 0.2])
    y_prob = np.clip(0.3 * y_true + rng.uniform(0, 0.7, 500), 0, 1)
    return y_true, y_prob
