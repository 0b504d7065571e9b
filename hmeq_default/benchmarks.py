"""
Library models compared against the hand-written trainer: scikit-learn
logistic regression, L1 (Lasso) logistic regression tuned by cross-validation,
a decision tree, a random forest and gradient-boosted trees.

Unlike the gradient-descent core, these pipelines impute missing values and
one-hot encode the categorical fields. All of them are scored with the
shared metrics in :mod:`hmeq_default.metrics`.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.ensemble import GradientBoostingClassifier, RandomForestClassifier
from sklearn.impute import SimpleImputer
from sklearn.linear_model import LogisticRegression, LogisticRegressionCV
from sklearn.model_selection import StratifiedKFold
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder, StandardScaler
from sklearn.tree import DecisionTreeClassifier

from .constants import (
    CATEGORICAL_FEATURES,
    DEFAULT_CV_FOLDS,
    DEFAULT_RANDOM_STATE,
    DEFAULT_THRESHOLD,
    LABEL_COLUMN,
    NUMERIC_FEATURES,
)
from .data_prep import Label, label_to_float
from .errors import DataError
from .logreg import predict_class
from .metrics import MetricsReport, compute_metrics

logger = logging.getLogger(__name__)


def build_preprocessor(
    numeric: Sequence[str] = NUMERIC_FEATURES,
    categorical: Sequence[str] = CATEGORICAL_FEATURES,
) -> ColumnTransformer:
    """Median-impute and scale numeric columns, mode-impute and one-hot the rest."""
    num_pipe = Pipeline(
        [("impute", SimpleImputer(strategy="median")), ("scale", StandardScaler())]
    )
    cat_pipe = Pipeline(
        [
            ("impute", SimpleImputer(strategy="most_frequent")),
            ("onehot", OneHotEncoder(handle_unknown="ignore")),
        ]
    )
    return ColumnTransformer(
        [("num", num_pipe, list(numeric)), ("cat", cat_pipe, list(categorical))],
        remainder="drop",
    )


def library_models(
    random_state: int | None = DEFAULT_RANDOM_STATE,
    cv_folds: int = DEFAULT_CV_FOLDS,
    numeric: Sequence[str] = NUMERIC_FEATURES,
    categorical: Sequence[str] = CATEGORICAL_FEATURES,
) -> dict[str, Pipeline]:
    """Unfitted pipelines keyed by model name."""
    cv = StratifiedKFold(n_splits=cv_folds, shuffle=True, random_state=random_state)
    classifiers = {
        "logistic": LogisticRegression(max_iter=5000),
        "lasso_logistic": LogisticRegressionCV(
            Cs=10,
            cv=cv,
            penalty="l1",
            solver="saga",
            scoring="roc_auc",
            max_iter=5000,
            random_state=random_state,
        ),
        "decision_tree": DecisionTreeClassifier(
            max_depth=5, min_samples_leaf=20, random_state=random_state
        ),
        "random_forest": RandomForestClassifier(
            n_estimators=300, min_samples_leaf=2, n_jobs=-1, random_state=random_state
        ),
        "gradient_boosting": GradientBoostingClassifier(random_state=random_state),
    }
    return {
        name: Pipeline([("pre", build_preprocessor(numeric, categorical)), ("clf", clf)])
        for name, clf in classifiers.items()
    }


def _labels(df: pd.DataFrame, label_column: str) -> np.ndarray:
    if df[label_column].isna().any():
        raise DataError(
            "Label column has missing values",
            details={"column": label_column, "missing": int(df[label_column].isna().sum())},
        )
    return np.array([label_to_float(Label.parse(v)) for v in df[label_column]], dtype=float)


def run_library_models(
    train_df: pd.DataFrame,
    test_df: pd.DataFrame,
    threshold: float = DEFAULT_THRESHOLD,
    random_state: int | None = DEFAULT_RANDOM_STATE,
    cv_folds: int = DEFAULT_CV_FOLDS,
    models: dict[str, Pipeline] | None = None,
    label_column: str = LABEL_COLUMN,
) -> dict[str, MetricsReport]:
    """Fit each library pipeline on the training rows and score it on the test rows."""
    y_train = _labels(train_df, label_column)
    y_test = _labels(test_df, label_column)
    X_train = train_df.drop(columns=[label_column])
    X_test = test_df.drop(columns=[label_column])

    if models is None:
        models = library_models(random_state=random_state, cv_folds=cv_folds)

    reports: dict[str, MetricsReport] = {}
    for name, model in models.items():
        model.fit(X_train, y_train)
        probs = model.predict_proba(X_test)[:, 1]
        preds = predict_class(probs, threshold).astype(float)
        reports[name] = compute_metrics(y_test, preds, probs, allow_undefined=True)
        logger.info("%s: test AUC %.3f", name, reports[name].auc)

        if name == "lasso_logistic":
            clf = model.named_steps["clf"]
            kept = int(np.count_nonzero(clf.coef_[0]))
            best_c = float(np.ravel(clf.C_)[0])
            logger.info("lasso_logistic: C=%.4g keeps %d coefficients", best_c, kept)
    return reports
