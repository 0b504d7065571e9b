"""
Predicting default on home-equity loan applications.

This package contains the numeric design-matrix builder, a standard scaler
fitted on training data only, a plain gradient-descent logistic regression,
shared evaluation metrics and the scikit-learn models it is compared with.
"""

from .constants import CATEGORICAL_FEATURES, LABEL_COLUMN, NUMERIC_FEATURES
from .data_prep import (
    DesignMatrix,
    Label,
    build_design_matrix,
    label_to_float,
    load_hmeq_csv,
    make_train_test_split,
)
from .errors import DataError, HmeqError, NumericalError, ShapeError
from .logreg import (
    LogisticRegressionGD,
    PredictionResult,
    TrainingResult,
    predict,
    predict_class,
    predict_proba,
    train,
)
from .metrics import MetricsReport, evaluate, summarize_coefficients
from .pipeline import TrainingConfig, run_gradient_descent
from .scaling import ScalingParameters, fit_scaler, transform

__all__ = [
    "CATEGORICAL_FEATURES",
    "LABEL_COLUMN",
    "NUMERIC_FEATURES",
    "DesignMatrix",
    "Label",
    "build_design_matrix",
    "label_to_float",
    "load_hmeq_csv",
    "make_train_test_split",
    "DataError",
    "HmeqError",
    "NumericalError",
    "ShapeError",
    "LogisticRegressionGD",
    "PredictionResult",
    "TrainingResult",
    "predict",
    "predict_class",
    "predict_proba",
    "train",
    "MetricsReport",
    "evaluate",
    "summarize_coefficients",
    "TrainingConfig",
    "run_gradient_descent",
    "ScalingParameters",
    "fit_scaler",
    "transform",
]
