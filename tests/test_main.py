"""
Tests for the command-line entry point.
"""

from main import build_arg_parser, main


class TestMain:
    def test_gradient_descent_experiment(self, hmeq_df, tmp_path, capsys):
        path = tmp_path / "hmeq.csv"
        hmeq_df.to_csv(path, index=False)
        args = build_arg_parser().parse_args(
            [
                "--csv-path",
                str(path),
                "--experiment",
                "gradient_descent",
                "--lr",
                "0.1",
                "--iterations",
                "200",
            ]
        )

        assert main(args) == 0

        out = capsys.readouterr().out
        assert "GD logistic (test)" in out
        assert "Summary (test set):" in out

    def test_default_hyperparameters(self):
        args = build_arg_parser().parse_args([])

        assert args.lr == 0.001
        assert args.iterations == 100
        assert args.threshold == 0.5

    def test_data_error_is_reported(self, hmeq_df, tmp_path, capsys):
        path = tmp_path / "hmeq.csv"
        hmeq_df.drop(columns=["CLAGE"]).to_csv(path, index=False)
        args = build_arg_parser().parse_args(["--csv-path", str(path)])

        assert main(args) == 1

        err = capsys.readouterr().err
        assert "DataError" in err
        assert "CLAGE" in err

    def test_missing_label_rows_are_skipped(self, hmeq_df, tmp_path, capsys):
        hmeq_df.loc[5, "BAD"] = float("nan")
        path = tmp_path / "hmeq.csv"
        hmeq_df.to_csv(path, index=False)
        args = build_arg_parser().parse_args(
            ["--csv-path", str(path), "--experiment", "gradient_descent"]
        )

        assert main(args) == 0

        out = capsys.readouterr().out
        assert "Train size: " in out
        assert "GD logistic (test)" in out
