"""
Standardization fitted on the training split and reused verbatim elsewhere.

``fit_scaler`` is the only place statistics are computed. ``transform`` takes
the parameters as an explicit argument, so test data can never re-fit them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .constants import BIAS_COLUMN, ZERO_VARIANCE_TOL
from .data_prep import DesignMatrix
from .errors import DataError, ShapeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ScalingParameters:
    """Per-feature mean and sample std, one entry per non-bias column."""

    mean: np.ndarray
    std: np.ndarray
    columns: tuple[str, ...]

    def __post_init__(self):
        for name in ("mean", "std"):
            arr = np.array(getattr(self, name), dtype=float)
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)
        object.__setattr__(self, "columns", tuple(self.columns))
        if not (len(self.mean) == len(self.std) == len(self.columns)):
            raise ShapeError(
                "Scaling parameters have inconsistent lengths",
                details={
                    "mean": len(self.mean),
                    "std": len(self.std),
                    "columns": len(self.columns),
                },
            )


def _check_bias(matrix: DesignMatrix):
    if not matrix.columns or matrix.columns[0] != BIAS_COLUMN:
        raise ShapeError(
            "Design matrix must start with the bias column",
            details={"first_column": matrix.columns[0] if matrix.columns else None},
        )


def fit_scaler(matrix: DesignMatrix) -> ScalingParameters:
    """Compute mean and sample standard deviation (ddof=1) of every feature column."""
    _check_bias(matrix)
    if matrix.n_rows < 2:
        raise DataError(
            "Need at least two rows to estimate a standard deviation",
            details={"rows": matrix.n_rows},
        )

    features = matrix.values[:, 1:]
    mean = features.mean(axis=0)
    std = features.std(axis=0, ddof=1)

    degenerate = [
        name for name, s in zip(matrix.feature_names, std) if not s > ZERO_VARIANCE_TOL
    ]
    if degenerate:
        raise DataError(
            "Zero-variance feature column(s) cannot be standardized",
            details={"columns": degenerate},
        )

    logger.debug("Fitted scaler on %d rows, %d features", matrix.n_rows, len(mean))
    return ScalingParameters(mean=mean, std=std, columns=tuple(matrix.feature_names))


def transform(matrix: DesignMatrix, params: ScalingParameters) -> DesignMatrix:
    """Return a new matrix with ``(x - mean) / std`` applied to the feature columns."""
    _check_bias(matrix)
    if tuple(matrix.feature_names) != params.columns:
        raise ShapeError(
            "Design matrix columns do not match the fitted scaling parameters",
            details={"expected": list(params.columns), "got": matrix.feature_names},
        )

    scaled = np.array(matrix.values, dtype=float, copy=True)
    scaled[:, 1:] = (scaled[:, 1:] - params.mean) / params.std
    return matrix.with_values(scaled)
