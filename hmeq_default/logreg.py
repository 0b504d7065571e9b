"""
Logistic regression trained with plain full-batch gradient descent, plus the
prediction helpers that apply a fitted weight vector.

No regularization, momentum or early stopping: the loop runs for exactly
``iterations`` steps at a fixed ``learning_rate``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .data_prep import DesignMatrix
from .errors import DataError, NumericalError, ShapeError
from .scaling import ScalingParameters, fit_scaler, transform

logger = logging.getLogger(__name__)


def sigmoid(z) -> np.ndarray:
    """Logistic function that never overflows: exp is only taken of -|z|."""
    z = np.asarray(z, dtype=float)
    ez = np.exp(-np.abs(z))
    return np.where(z >= 0, 1.0 / (1.0 + ez), ez / (1.0 + ez))


def log_loss(X: np.ndarray, y: np.ndarray, theta: np.ndarray) -> float:
    """Mean binary cross-entropy of the linear score X @ theta."""
    z = X @ theta
    # -[y log s(z) + (1 - y) log(1 - s(z))] == log(1 + e^z) - y z
    return float(np.mean(np.logaddexp(0.0, z) - y * z))


@dataclass(frozen=True, eq=False)
class TrainingResult:
    """Final weights plus the loss at the start and after every step."""

    weights: np.ndarray
    loss_history: tuple[float, ...]
    iterations: int

    def __post_init__(self):
        weights = np.array(self.weights, dtype=float)
        weights.setflags(write=False)
        object.__setattr__(self, "weights", weights)
        object.__setattr__(self, "loss_history", tuple(self.loss_history))

    @property
    def final_loss(self) -> float:
        return self.loss_history[-1]


def _check_training_inputs(X, y) -> tuple[np.ndarray, np.ndarray]:
    X_arr = np.asarray(X, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    if X_arr.ndim != 2:
        raise ShapeError("X must be a 2-D matrix", details={"ndim": X_arr.ndim})
    if y_arr.ndim != 1:
        raise ShapeError("y must be a 1-D vector", details={"ndim": y_arr.ndim})
    if X_arr.shape[0] != y_arr.shape[0]:
        raise ShapeError(
            "X and y have different row counts",
            details={"X_rows": X_arr.shape[0], "y_rows": y_arr.shape[0]},
        )
    if X_arr.shape[0] == 0 or X_arr.shape[1] == 0:
        raise DataError("Cannot train on an empty matrix", details={"shape": X_arr.shape})
    if not np.isin(y_arr, (0.0, 1.0)).all():
        raise DataError("Labels must be 0.0 or 1.0")
    return X_arr, y_arr


def train(
    X,
    y,
    learning_rate: float,
    iterations: int,
    initial_theta=None,
    log_every: int = 0,
) -> TrainingResult:
    """
    Minimize binary cross-entropy with full-batch gradient descent.

    Each step computes ``p = sigmoid(X @ theta)``, the gradient
    ``X.T @ (p - y) / n`` and updates ``theta -= learning_rate * grad``.

    Raises:
        ShapeError: X and y (or initial_theta) do not line up.
        DataError: empty input or labels outside {0, 1}.
        NumericalError: a weight became non-finite.
    """
    X_arr, y_arr = _check_training_inputs(X, y)
    if not np.isfinite(learning_rate) or learning_rate <= 0:
        raise ValueError(f"learning_rate must be a positive number, got {learning_rate}")
    if int(iterations) != iterations or iterations < 0:
        raise ValueError(f"iterations must be a non-negative integer, got {iterations}")
    iterations = int(iterations)

    n_rows, n_cols = X_arr.shape
    if initial_theta is None:
        theta = np.zeros(n_cols)
    else:
        theta = np.array(initial_theta, dtype=float).ravel()
        if theta.shape[0] != n_cols:
            raise ShapeError(
                "initial_theta length does not match the number of columns",
                details={"theta": theta.shape[0], "columns": n_cols},
            )

    history = [log_loss(X_arr, y_arr, theta)]
    with np.errstate(over="ignore", invalid="ignore"):
        for step in range(1, iterations + 1):
            preds = sigmoid(X_arr @ theta)
            grad = (X_arr.T @ (preds - y_arr)) / n_rows
            theta = theta - learning_rate * grad

            if not np.all(np.isfinite(theta)):
                raise NumericalError(
                    "Gradient descent diverged: weights are no longer finite",
                    details={"iteration": step, "learning_rate": learning_rate},
                )

            history.append(log_loss(X_arr, y_arr, theta))
            if log_every and step % log_every == 0:
                logger.debug("[GD] step=%d, loss=%.6f", step, history[-1])

    logger.info(
        "Trained %d weights for %d iterations (loss %.6f -> %.6f)",
        n_cols,
        iterations,
        history[0],
        history[-1],
    )
    return TrainingResult(weights=theta, loss_history=history, iterations=iterations)


@dataclass(frozen=True, eq=False)
class PredictionResult:
    """Per-row probability of default and the thresholded class."""

    probabilities: np.ndarray
    labels: np.ndarray
    threshold: float

    @property
    def n_positive(self) -> int:
        return int(np.count_nonzero(self.labels))


def predict_proba(X, theta) -> np.ndarray:
    """Return P(default) = sigmoid(X @ theta) for every row."""
    X_arr = np.asarray(X, dtype=float)
    theta_arr = np.asarray(theta, dtype=float)
    if X_arr.ndim != 2 or X_arr.shape[1] != theta_arr.shape[0]:
        raise ShapeError(
            "Matrix columns do not match the weight vector",
            details={"X_shape": X_arr.shape, "weights": theta_arr.shape[0]},
        )
    return sigmoid(X_arr @ theta_arr)


def predict_class(probabilities, threshold: float = 0.5) -> np.ndarray:
    """Boolean labels: True where probability is strictly above ``threshold``."""
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must lie in [0, 1], got {threshold}")
    return np.asarray(probabilities, dtype=float) > threshold


def predict(X, theta, threshold: float = 0.5) -> PredictionResult:
    probs = predict_proba(X, theta)
    return PredictionResult(
        probabilities=probs,
        labels=predict_class(probs, threshold),
        threshold=threshold,
    )


class LogisticRegressionGD:
    """
    Estimator-style wrapper: fits the scaler on the training matrix, trains
    with gradient descent and reuses the stored scaling for prediction.
    """

    def __init__(
        self,
        lr: float,
        iterations: int,
        threshold: float = 0.5,
        log_every: int = 0,
    ):
        self.lr = lr
        self.iterations = iterations
        self.threshold = threshold
        self.log_every = log_every
        self.scaling_params_: ScalingParameters | None = None
        self.weights_: np.ndarray | None = None
        self.loss_history_: tuple[float, ...] = ()
        self.feature_names_: list[str] = []
        self.n_iter_: int = 0

    def fit(self, design: DesignMatrix) -> "LogisticRegressionGD":
        """Fit scaling parameters and weights on a training design matrix."""
        self.scaling_params_ = fit_scaler(design)
        scaled = transform(design, self.scaling_params_)
        result = train(
            scaled.values,
            scaled.labels,
            learning_rate=self.lr,
            iterations=self.iterations,
            log_every=self.log_every,
        )
        self.weights_ = result.weights
        self.loss_history_ = result.loss_history
        self.n_iter_ = result.iterations
        self.feature_names_ = design.feature_names
        self.intercept_ = float(self.weights_[0])
        self.coef_ = self.weights_[1:]
        return self

    def _check_fitted(self):
        if self.weights_ is None or self.scaling_params_ is None:
            raise RuntimeError("Model is not fitted.")

    def predict_proba(self, design: DesignMatrix) -> np.ndarray:
        """Return P(default) for each row of an unscaled design matrix."""
        self._check_fitted()
        return predict_proba(transform(design, self.scaling_params_).values, self.weights_)

    def predict(self, design: DesignMatrix, threshold: float | None = None) -> PredictionResult:
        """Probabilities plus labels at ``threshold`` (defaults to the model's)."""
        self._check_fitted()
        threshold = self.threshold if threshold is None else threshold
        scaled = transform(design, self.scaling_params_)
        return predict(scaled.values, self.weights_, threshold)
