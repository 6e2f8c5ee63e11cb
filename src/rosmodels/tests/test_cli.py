"""Tests for `rosmodels.cli` module."""

import numpy as np
import pytest
from click.testing import CliRunner

from rosmodels import cli
from rosmodels.cli import APP_SCRIPT, main
from rosmodels.data import simulate_ros_data


@pytest.fixture
def runner():
    return CliRunner()


def test_stats_defaults(runner):
    result = runner.invoke(main, ["stats"])
    assert result.exit_code == 0
    assert result.output.startswith("Mean: 5\nMode: 0\n")
    assert "Probability of exceeding upper ROS value (15.0): 4.979%" in result.output


def test_stats_options(runner):
    result = runner.invoke(main, ["stats", "--mean", "15", "--shape", "50"])
    assert result.exit_code == 0
    assert "Mean: 15\nMode: 14.7\n" in result.output


def test_stats_out_of_range(runner):
    result = runner.invoke(main, ["stats", "--mean", "20"])
    assert result.exit_code != 0


def test_stats_override(runner):
    result = runner.invoke(main, ["stats", "--set", "threshold=10"])
    assert result.exit_code == 0
    assert "(10.0)" in result.output


def test_plot(runner, tmp_path):
    output = tmp_path / "density.png"
    result = runner.invoke(main, ["plot", "--mean", "7", "--output", str(output)])
    assert result.exit_code == 0
    assert output.stat().st_size > 0


def test_config(runner):
    result = runner.invoke(main, ["config"])
    assert result.exit_code == 0
    assert "threshold" in result.output


def test_hierarchical_requires_group_column(runner, tmp_path):
    path = tmp_path / "ros.csv"
    simulate_ros_data(num_observations=10).to_csv(path, index=False)
    result = runner.invoke(main, ["fit", str(path), "--model", "hierarchical"])
    assert result.exit_code != 0
    assert "--group-column" in result.output


@pytest.mark.slow
@pytest.mark.integration
def test_fit(runner, tmp_path):
    path = tmp_path / "ros.csv"
    simulate_ros_data(num_observations=50, seed=4).to_csv(path, index=False)
    plot_output = tmp_path / "posterior.pdf"
    result = runner.invoke(
        main,
        [
            "fit",
            str(path),
            "--num-warmup",
            "30",
            "--num-samples",
            "30",
            "--plot-output",
            str(plot_output),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "wind_effect" in result.output
    assert plot_output.exists()
    assert not plot_output.with_name("posterior.pdf.png").exists()


def test_fit_plot_output_writes_single_file(runner, tmp_path, monkeypatch):
    rng = np.random.default_rng(0)
    draws = {
        "intercept": rng.normal(size=40),
        "wind_effect": rng.normal(0.5, 0.1, size=40),
        "rh_effect": rng.normal(-0.5, 0.1, size=40),
        "shape": rng.gamma(10.0, 0.5, size=40),
    }
    monkeypatch.setattr(cli, "run_mcmc_inference", lambda *args: (None, draws))
    path = tmp_path / "ros.csv"
    simulate_ros_data(num_observations=10).to_csv(path, index=False)
    plot_output = tmp_path / "posterior.png"

    result = runner.invoke(
        main, ["fit", str(path), "--plot-output", str(plot_output)]
    )

    assert result.exit_code == 0, result.output
    assert plot_output.stat().st_size > 0
    assert sorted(p.name for p in tmp_path.iterdir()) == [
        "posterior.png",
        "ros.csv",
    ]


@pytest.mark.skipif(
    not APP_SCRIPT.exists(), reason="requires the app/ directory of a checkout"
)
def test_app_default_script_outside_checkout(runner, monkeypatch):
    commands = []
    monkeypatch.setattr(
        cli.subprocess, "run", lambda command, check: commands.append(command)
    )
    with runner.isolated_filesystem():
        result = runner.invoke(main, ["app"])

    assert result.exit_code == 0, result.output
    assert commands[0][-1] == str(APP_SCRIPT)
    assert APP_SCRIPT.is_absolute()


def test_app_missing_script(runner, tmp_path):
    result = runner.invoke(main, ["app", "--script", str(tmp_path / "missing.py")])
    assert result.exit_code != 0
