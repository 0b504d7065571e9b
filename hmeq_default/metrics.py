"""
Classification metrics shared by every model: confusion counts, accuracy,
sensitivity, specificity and rank-based ROC AUC, plus coefficient dumps.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd

from .errors import DataError, NumericalError, ShapeError
from .logreg import PredictionResult


@dataclass(frozen=True)
class ConfusionCounts:
    tp: int
    tn: int
    fp: int
    fn: int

    @property
    def total(self) -> int:
        return self.tp + self.tn + self.fp + self.fn


@dataclass(frozen=True)
class MetricsReport:
    """Read-only summary of one model on one dataset. Undefined values are NaN."""

    accuracy: float
    sensitivity: float
    specificity: float
    auc: float
    confusion: ConfusionCounts

    def as_dict(self) -> dict[str, float | int]:
        """Flat row for tabular rendering."""
        row = {
            "accuracy": self.accuracy,
            "auc": self.auc,
            "sensitivity": self.sensitivity,
            "specificity": self.specificity,
        }
        row.update(asdict(self.confusion))
        return row


def _binary_vector(values, name: str) -> np.ndarray:
    arr = np.asarray(values, dtype=float).ravel()
    if arr.size == 0:
        raise DataError(f"{name} is empty")
    if not np.isin(arr, (0.0, 1.0)).all():
        raise DataError(f"{name} must only contain the classes 0 and 1")
    return arr


def confusion_counts(y_true, y_pred) -> ConfusionCounts:
    """Count TP/TN/FP/FN by exact comparison against the two class values."""
    truth = _binary_vector(y_true, "y_true")
    pred = _binary_vector(y_pred, "y_pred")
    if truth.shape != pred.shape:
        raise ShapeError(
            "y_true and y_pred have different lengths",
            details={"y_true": truth.shape[0], "y_pred": pred.shape[0]},
        )
    return ConfusionCounts(
        tp=int(np.sum((truth == 1.0) & (pred == 1.0))),
        tn=int(np.sum((truth == 0.0) & (pred == 0.0))),
        fp=int(np.sum((truth == 0.0) & (pred == 1.0))),
        fn=int(np.sum((truth == 1.0) & (pred == 0.0))),
    )


def _ratio(num: int, den: int, name: str, allow_undefined: bool) -> float:
    if den == 0:
        if allow_undefined:
            return math.nan
        raise NumericalError(f"{name} is undefined: zero denominator", details={"metric": name})
    return num / den


def roc_auc(y_true, probabilities) -> float:
    """
    Area under the ROC curve via the rank-sum (Mann-Whitney U) statistic.

    Tied scores share their average rank, so a constant score gives 0.5.
    """
    truth = _binary_vector(y_true, "y_true")
    scores = np.asarray(probabilities, dtype=float).ravel()
    if truth.shape != scores.shape:
        raise ShapeError(
            "y_true and probabilities have different lengths",
            details={"y_true": truth.shape[0], "probabilities": scores.shape[0]},
        )
    n_pos = int(np.sum(truth == 1.0))
    n_neg = truth.size - n_pos
    if n_pos == 0 or n_neg == 0:
        raise NumericalError(
            "AUC needs at least one positive and one negative row",
            details={"positives": n_pos, "negatives": n_neg},
        )

    ranks = pd.Series(scores).rank(method="average").to_numpy()
    rank_sum = ranks[truth == 1.0].sum()
    return float((rank_sum - n_pos * (n_pos + 1) / 2.0) / (n_pos * n_neg))


def compute_metrics(
    y_true, y_pred, probabilities, allow_undefined: bool = False
) -> MetricsReport:
    """
    Accuracy, sensitivity, specificity and AUC from parallel vectors.

    With ``allow_undefined`` a zero denominator yields NaN instead of a
    NumericalError; it is never reported as 0.
    """
    counts = confusion_counts(y_true, y_pred)
    probs = np.asarray(probabilities, dtype=float).ravel()
    if probs.shape[0] != counts.total:
        raise ShapeError(
            "probabilities and labels have different lengths",
            details={"labels": counts.total, "probabilities": probs.shape[0]},
        )

    sensitivity = _ratio(counts.tp, counts.tp + counts.fn, "sensitivity", allow_undefined)
    specificity = _ratio(counts.tn, counts.tn + counts.fp, "specificity", allow_undefined)
    try:
        auc = roc_auc(y_true, probs)
    except NumericalError:
        if not allow_undefined:
            raise
        auc = math.nan

    return MetricsReport(
        accuracy=(counts.tp + counts.tn) / counts.total,
        sensitivity=sensitivity,
        specificity=specificity,
        auc=auc,
        confusion=counts,
    )


def evaluate(y_true, prediction: PredictionResult, allow_undefined: bool = False) -> MetricsReport:
    """Score a PredictionResult against the true labels."""
    return compute_metrics(
        y_true,
        prediction.labels.astype(float),
        prediction.probabilities,
        allow_undefined=allow_undefined,
    )


def reports_to_frame(reports: dict[str, MetricsReport]) -> pd.DataFrame:
    """One row per model, ready for printing."""
    return pd.DataFrame({name: r.as_dict() for name, r in reports.items()}).T


def majority_baseline(
    y_train: np.ndarray | pd.Series, y_test: np.ndarray | pd.Series
) -> MetricsReport:
    """
    Predicts the training default rate for every test row.
    """
    prob = float(np.mean(y_train))
    probs = np.full(len(y_test), prob, dtype=float)
    preds = (probs > 0.5).astype(float)
    return compute_metrics(y_test, preds, probs, allow_undefined=True)


def summarize_coefficients(
    coef: np.ndarray, feature_names: list[str], top_k: int = 5
) -> dict[str, pd.Series]:
    coef_series = pd.Series(coef, index=feature_names)
    coef_sorted = coef_series.sort_values()
    return {
        "positive": coef_sorted.tail(top_k)[::-1],
        "negative": coef_sorted.head(top_k),
    }
