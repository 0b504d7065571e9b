"""
Tests for the scikit-learn comparison models.
"""

import numpy as np
import pytest

from hmeq_default.benchmarks import build_preprocessor, library_models, run_library_models
from hmeq_default.data_prep import make_train_test_split
from hmeq_default.errors import DataError


class TestLibraryModels:
    def test_model_names(self):
        models = library_models(cv_folds=3)

        assert set(models) == {
            "logistic",
            "lasso_logistic",
            "decision_tree",
            "random_forest",
            "gradient_boosting",
        }

    def test_lasso_uses_l1_penalty(self):
        clf = library_models(cv_folds=3)["lasso_logistic"].named_steps["clf"]

        assert clf.penalty == "l1"
        assert clf.solver == "saga"

    def test_preprocessor_handles_missing_and_categoricals(self, hmeq_df):
        pre = build_preprocessor()

        out = pre.fit_transform(hmeq_df.drop(columns=["BAD"]))

        assert out.shape[0] == len(hmeq_df)
        assert not np.isnan(np.asarray(out.todense() if hasattr(out, "todense") else out)).any()

    def test_run_all_models(self, hmeq_df):
        train_df, test_df = make_train_test_split(hmeq_df, test_size=0.3, random_state=1)

        reports = run_library_models(train_df, test_df, cv_folds=3)

        assert len(reports) == 5
        for report in reports.values():
            assert 0.0 <= report.auc <= 1.0
            assert report.confusion.total == len(test_df)
        assert reports["logistic"].auc > 0.7

    def test_missing_label_raises(self, hmeq_df):
        hmeq_df.loc[0, "BAD"] = np.nan
        models = {"logistic": library_models()["logistic"]}

        with pytest.raises(DataError):
            run_library_models(hmeq_df, hmeq_df, models=models)
