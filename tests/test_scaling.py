"""
Tests for fitting and applying the standard scaler.
"""

import numpy as np
import pytest

from hmeq_default.data_prep import DesignMatrix, build_design_matrix
from hmeq_default.errors import DataError, ShapeError
from hmeq_default.scaling import ScalingParameters, fit_scaler, transform


@pytest.fixture
def design(hmeq_df):
    return build_design_matrix(hmeq_df)


class TestFitScaler:
    def test_sample_statistics(self, design):
        params = fit_scaler(design)

        np.testing.assert_allclose(params.mean, design.values[:, 1:].mean(axis=0))
        np.testing.assert_allclose(params.std, design.values[:, 1:].std(axis=0, ddof=1))
        assert params.columns == tuple(design.feature_names)

    def test_one_entry_per_feature(self, design):
        params = fit_scaler(design)

        assert len(params.mean) == len(params.std) == design.values.shape[1] - 1

    def test_zero_variance_column_raises(self):
        design = DesignMatrix(
            values=np.array([[1.0, 3.0, 1.0], [1.0, 3.0, 2.0], [1.0, 3.0, 4.0]]),
            columns=("bias", "flat", "x"),
            labels=np.array([0.0, 1.0, 0.0]),
        )

        with pytest.raises(DataError) as exc_info:
            fit_scaler(design)
        assert exc_info.value.details["columns"] == ["flat"]

    def test_single_row_raises(self):
        design = DesignMatrix(
            values=np.array([[1.0, 2.0]]), columns=("bias", "x"), labels=np.array([1.0])
        )

        with pytest.raises(DataError):
            fit_scaler(design)

    def test_missing_bias_column(self):
        design = DesignMatrix(
            values=np.array([[2.0, 1.0], [3.0, 5.0]]),
            columns=("x", "y"),
            labels=np.array([0.0, 1.0]),
        )

        with pytest.raises(ShapeError):
            fit_scaler(design)


class TestTransform:
    def test_training_matrix_is_standardized(self, design):
        scaled = transform(design, fit_scaler(design))
        features = scaled.values[:, 1:]

        np.testing.assert_allclose(features.mean(axis=0), 0.0, atol=1e-10)
        np.testing.assert_allclose(features.std(axis=0, ddof=1), 1.0, atol=1e-10)

    def test_bias_passes_through(self, design):
        scaled = transform(design, fit_scaler(design))

        assert np.all(scaled.values[:, 0] == 1.0)

    def test_repeated_calls_agree(self, design):
        params = fit_scaler(design)

        first = transform(design, params)
        second = transform(design, params)

        np.testing.assert_array_equal(first.values, second.values)
        np.testing.assert_array_equal(first.labels, design.labels)

    def test_input_matrix_untouched(self, design):
        before = design.values.copy()

        transform(design, fit_scaler(design))

        np.testing.assert_array_equal(design.values, before)

    def test_params_unchanged_by_test_split(self, hmeq_df):
        train = build_design_matrix(hmeq_df.iloc[:300])
        test = build_design_matrix(hmeq_df.iloc[300:])
        params = fit_scaler(train)
        mean_before, std_before = params.mean.copy(), params.std.copy()

        scaled_test = transform(test, params)

        np.testing.assert_array_equal(params.mean, mean_before)
        np.testing.assert_array_equal(params.std, std_before)
        assert not params.mean.flags.writeable
        # test data is scaled with training statistics, not its own
        assert np.abs(scaled_test.values[:, 1:].mean(axis=0)).max() > 1e-6

    def test_column_mismatch_raises(self, design):
        params = ScalingParameters(mean=[0.0], std=[1.0], columns=("other",))

        with pytest.raises(ShapeError):
            transform(design, params)

    def test_inconsistent_params_raise(self):
        with pytest.raises(ShapeError):
            ScalingParameters(mean=[0.0, 1.0], std=[1.0], columns=("a", "b"))
