"""
CLI entrypoint for the HMEQ default experiments. Pick experiment via
--experiment: gradient_descent (hand-written trainer), library (scikit-learn
models) or all.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from hmeq_default import (
    HmeqError,
    TrainingConfig,
    load_hmeq_csv,
    make_train_test_split,
    run_gradient_descent,
    summarize_coefficients,
)
from hmeq_default.benchmarks import run_library_models
from hmeq_default.constants import (
    DEFAULT_CV_FOLDS,
    DEFAULT_ITERATIONS,
    DEFAULT_LEARNING_RATE,
    DEFAULT_RANDOM_STATE,
    DEFAULT_TEST_SIZE,
    DEFAULT_THRESHOLD,
    LABEL_COLUMN,
)
from hmeq_default.metrics import MetricsReport, majority_baseline, reports_to_frame


def print_metrics(label: str, report: MetricsReport):
    """Nicely format a MetricsReport."""
    cm = report.confusion
    print(
        f"[{label}] Acc {report.accuracy:.3f} | AUC {report.auc:.3f} | "
        f"Sens {report.sensitivity:.3f} | Spec {report.specificity:.3f}"
    )
    print(f"    Confusion counts TP={cm.tp} TN={cm.tn} FP={cm.fp} FN={cm.fn}")


def build_arg_parser():
    """CLI parser with knobs for the split, the GD trainer and the library models."""
    parser = argparse.ArgumentParser(
        description="Predict default on home-equity loan applications."
    )
    parser.add_argument("--csv-path", type=Path, default=Path("data/hmeq.csv"))
    parser.add_argument(
        "--experiment",
        choices=["gradient_descent", "library", "all"],
        default="all",
        help="gradient_descent: hand-written trainer; library: scikit-learn models.",
    )
    parser.add_argument("--test-size", type=float, default=DEFAULT_TEST_SIZE)
    parser.add_argument(
        "--lr", type=float, default=DEFAULT_LEARNING_RATE, help="Learning rate for GD."
    )
    parser.add_argument(
        "--iterations", type=int, default=DEFAULT_ITERATIONS, help="Number of GD steps."
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_THRESHOLD,
        help="Probability above which a row is classified as defaulted.",
    )
    parser.add_argument("--cv-folds", type=int, default=DEFAULT_CV_FOLDS)
    parser.add_argument("--random-state", type=int, default=DEFAULT_RANDOM_STATE)
    parser.add_argument(
        "--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )
    return parser


def run_gd(args: argparse.Namespace, train_df, test_df):
    """Hand-written gradient-descent logistic regression on the numeric fields."""
    config = TrainingConfig(
        learning_rate=args.lr,
        iterations=args.iterations,
        threshold=args.threshold,
    )
    result = run_gradient_descent(train_df, test_df, config)

    baseline = majority_baseline(train_df[LABEL_COLUMN], test_df[LABEL_COLUMN])
    print_metrics("Majority baseline", baseline)
    print_metrics("GD logistic (train)", result.train_report)
    print_metrics("GD logistic (test)", result.test_report)
    print(
        f"    GD steps: {result.training.iterations}, "
        f"loss {result.training.loss_history[0]:.4f} -> {result.training.final_loss:.4f}"
    )

    top = summarize_coefficients(result.training.weights[1:], result.feature_names)
    print("\nTop positive features (custom GD):")
    print(top["positive"])
    print("\nTop negative features (custom GD):")
    print(top["negative"])
    print(f"\nIntercept (standardized space): {result.training.weights[0]:.4f}")
    return result.test_report


def run_library(args: argparse.Namespace, train_df, test_df):
    """scikit-learn models with imputation and dummy-encoded categoricals."""
    reports = run_library_models(
        train_df,
        test_df,
        threshold=args.threshold,
        random_state=args.random_state,
        cv_folds=args.cv_folds,
    )
    for name, report in reports.items():
        print_metrics(name, report)
    return reports


def main(args: argparse.Namespace | None = None) -> int:
    """Dispatch to the selected experiment."""
    args = args or build_arg_parser().parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        df = load_hmeq_csv(args.csv_path)
        train_df, test_df = make_train_test_split(
            df, test_size=args.test_size, random_state=args.random_state
        )
        print(f"Train size: {len(train_df)}, Test size: {len(test_df)}")

        reports = {}
        if args.experiment in ("gradient_descent", "all"):
            reports["gd_logistic"] = run_gd(args, train_df, test_df)
        if args.experiment in ("library", "all"):
            reports.update(run_library(args, train_df, test_df))
    except HmeqError as exc:
        print(f"{type(exc).__name__}: {exc.message}", file=sys.stderr)
        for key, value in exc.details.items():
            print(f"    {key}: {value}", file=sys.stderr)
        return 1

    print("\nSummary (test set):")
    print(reports_to_frame(reports).round(3))
    return 0


if __name__ == "__main__":
    sys.exit(main())
