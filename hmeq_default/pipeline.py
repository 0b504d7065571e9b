"""
End-to-end gradient-descent run: build matrices, scale with training
statistics, train, predict and score on the test split.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from .constants import (
    DEFAULT_ITERATIONS,
    DEFAULT_LEARNING_RATE,
    DEFAULT_THRESHOLD,
    LABEL_COLUMN,
    NUMERIC_FEATURES,
)
from .data_prep import build_design_matrix
from .logreg import PredictionResult, TrainingResult, predict, train
from .metrics import MetricsReport, evaluate
from .scaling import ScalingParameters, fit_scaler, transform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainingConfig:
    learning_rate: float = DEFAULT_LEARNING_RATE
    iterations: int = DEFAULT_ITERATIONS
    threshold: float = DEFAULT_THRESHOLD
    log_every: int = 10
    allow_undefined_metrics: bool = False


@dataclass(frozen=True)
class GDRunResult:
    scaling: ScalingParameters
    training: TrainingResult
    feature_names: list[str]
    prediction: PredictionResult
    train_report: MetricsReport
    test_report: MetricsReport


def run_gradient_descent(
    train_df: pd.DataFrame,
    test_df: pd.DataFrame,
    config: TrainingConfig = TrainingConfig(),
    numeric_fields: Sequence[str] = NUMERIC_FEATURES,
    label_column: str = LABEL_COLUMN,
) -> GDRunResult:
    """Fit on ``train_df`` only; ``test_df`` is scaled with the training parameters."""
    train_design = build_design_matrix(train_df, numeric_fields, label_column)
    test_design = build_design_matrix(test_df, numeric_fields, label_column)

    scaling = fit_scaler(train_design)
    train_scaled = transform(train_design, scaling)
    test_scaled = transform(test_design, scaling)

    training = train(
        train_scaled.values,
        train_scaled.labels,
        learning_rate=config.learning_rate,
        iterations=config.iterations,
        log_every=config.log_every,
    )

    train_prediction = predict(train_scaled.values, training.weights, config.threshold)
    test_prediction = predict(test_scaled.values, training.weights, config.threshold)
    logger.info(
        "Predicted %d / %d test rows as defaulted at threshold %.2f",
        test_prediction.n_positive,
        test_design.n_rows,
        config.threshold,
    )

    return GDRunResult(
        scaling=scaling,
        training=training,
        feature_names=train_design.feature_names,
        prediction=test_prediction,
        train_report=evaluate(
            train_scaled.labels, train_prediction, config.allow_undefined_metrics
        ),
        test_report=evaluate(test_scaled.labels, test_prediction, config.allow_undefined_metrics),
    )
