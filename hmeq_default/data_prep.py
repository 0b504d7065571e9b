"""
Data preparation: load the HMEQ table, split it and turn it into the numeric
design matrix consumed by the gradient-descent core.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from .constants import (
    BIAS_COLUMN,
    DEFAULT_RANDOM_STATE,
    DEFAULT_TEST_SIZE,
    LABEL_COLUMN,
    NUMERIC_FEATURES,
)
from .errors import DataError

logger = logging.getLogger(__name__)


class Label(enum.Enum):
    """Loan outcome. DEFAULTED is the positive class."""

    REPAID = 0
    DEFAULTED = 1

    @classmethod
    def parse(cls, value) -> "Label":
        """Read a raw cell (0/1, "0"/"1", bool or Label) into a Label."""
        if isinstance(value, Label):
            return value
        if isinstance(value, (bool, np.bool_)):
            return cls.DEFAULTED if value else cls.REPAID
        if isinstance(value, str):
            value = value.strip()
            if value in ("0", "1"):
                return cls(int(value))
        elif isinstance(value, (int, float, np.integer, np.floating)):
            if value == 0:
                return cls.REPAID
            if value == 1:
                return cls.DEFAULTED
        raise DataError(
            "Label value is not one of the two outcome classes",
            details={"value": repr(value)},
        )


def label_to_float(label: Label) -> float:
    """The only way a Label becomes a number: REPAID -> 0.0, DEFAULTED -> 1.0."""
    if label is Label.DEFAULTED:
        return 1.0
    if label is Label.REPAID:
        return 0.0
    raise TypeError(f"Expected a Label, got {type(label).__name__}")


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, dtype=float)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class DesignMatrix:
    """
    Numeric feature table with a leading bias column and the parallel labels.

    ``values[:, 0]`` is the constant 1.0 bias column; ``columns`` names every
    column in order, starting with ``"bias"``.
    """

    values: np.ndarray
    columns: tuple[str, ...]
    labels: np.ndarray
    dropped_rows: int = 0
    index: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "values", _readonly(self.values))
        object.__setattr__(self, "labels", _readonly(self.labels))
        object.__setattr__(self, "columns", tuple(self.columns))

    @property
    def n_rows(self) -> int:
        return self.values.shape[0]

    @property
    def feature_names(self) -> list[str]:
        return list(self.columns[1:])

    def with_values(self, values: np.ndarray) -> "DesignMatrix":
        """Same rows and labels, new column values (used by the scaler)."""
        return DesignMatrix(
            values=values,
            columns=self.columns,
            labels=self.labels,
            dropped_rows=self.dropped_rows,
            index=self.index,
        )


def load_hmeq_csv(
    csv_path: Path,
    numeric_fields: Sequence[str] = NUMERIC_FEATURES,
    label_column: str = LABEL_COLUMN,
) -> pd.DataFrame:
    """Read the raw CSV and check that the columns the core needs are present."""
    df = pd.read_csv(csv_path)
    required = [label_column, *numeric_fields]
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise DataError(
            f"CSV {csv_path} is missing required columns",
            details={"missing_columns": missing},
        )
    logger.info("Loaded %d rows, %d columns from %s", len(df), df.shape[1], csv_path)
    return df


def _coerce_numeric(df: pd.DataFrame, fields: Sequence[str]) -> pd.DataFrame:
    """Numeric view of ``fields``; refuses to guess at non-numeric text."""
    out = {}
    for name in fields:
        col = df[name]
        if pd.api.types.is_bool_dtype(col) or pd.api.types.is_numeric_dtype(col):
            out[name] = col.astype(float)
            continue
        converted = pd.to_numeric(col, errors="coerce")
        bad = col.notna() & converted.isna()
        if bad.any():
            raise DataError(
                f"Field {name!r} holds non-numeric values",
                details={"field": name, "examples": col[bad].head(3).tolist()},
            )
        out[name] = converted.astype(float)
    return pd.DataFrame(out, index=df.index)


def build_design_matrix(
    df: pd.DataFrame,
    numeric_fields: Sequence[str] = NUMERIC_FEATURES,
    label_column: str = LABEL_COLUMN,
) -> DesignMatrix:
    """
    Build the (bias + numeric features) matrix and the 0/1 label vector.

    Rows with a missing numeric field or a missing label are dropped, never
    filled in. Feature columns are sorted by name so every call on the same
    schema produces the same column order. Categorical columns are ignored.
    """
    features = sorted(name for name in numeric_fields if name != label_column)
    if not features:
        raise DataError("No numeric feature columns requested")

    missing = [col for col in (label_column, *features) if col not in df.columns]
    if missing:
        raise DataError(
            "Dataset is missing required columns",
            details={"missing_columns": missing},
        )

    numeric = _coerce_numeric(df, features)
    complete = numeric.notna().all(axis=1) & df[label_column].notna()
    dropped = int((~complete).sum())

    numeric = numeric.loc[complete]
    raw_labels = df.loc[complete, label_column]
    if numeric.empty:
        raise DataError(
            "No complete rows left after dropping missing values",
            details={"input_rows": len(df), "dropped_rows": dropped},
        )

    labels = np.array([label_to_float(Label.parse(v)) for v in raw_labels], dtype=float)
    values = np.hstack([np.ones((len(numeric), 1)), numeric.to_numpy(dtype=float)])

    logger.info(
        "Design matrix: %d rows x %d columns (%d incomplete rows dropped)",
        values.shape[0],
        values.shape[1],
        dropped,
    )
    return DesignMatrix(
        values=values,
        columns=(BIAS_COLUMN, *features),
        labels=labels,
        dropped_rows=dropped,
        index=tuple(numeric.index),
    )


def make_train_test_split(
    df: pd.DataFrame,
    test_size: float = DEFAULT_TEST_SIZE,
    random_state: int | None = DEFAULT_RANDOM_STATE,
    label_column: str = LABEL_COLUMN,
    stratify: bool = True,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Split raw rows into train/test, stratified on the label by default.

    Rows with a missing label are dropped first.
    """
    unlabeled = df[label_column].isna()
    if unlabeled.any():
        logger.info("Dropping %d rows with a missing %s label", int(unlabeled.sum()), label_column)
        df = df.loc[~unlabeled]
    if df.empty:
        raise DataError(
            "No labeled rows to split",
            details={"column": label_column, "missing": int(unlabeled.sum())},
        )

    stratify_target = df[label_column] if stratify else None
    train_df, test_df = train_test_split(
        df, test_size=test_size, random_state=random_state, stratify=stratify_target
    )

    logger.info("Split %d rows into %d train / %d test", len(df), len(train_df), len(test_df))
    return train_df, test_df
