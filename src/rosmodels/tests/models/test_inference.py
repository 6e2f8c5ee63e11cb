"""Tests for `rosmodels.models.inference` module."""

import numpy as np
import pytest

from rosmodels.explorer.gamma import compute_tail_probability
from rosmodels.models.inference import (
    InferenceConfig,
    posterior_exceedance,
    posterior_mean_ros,
    run_mcmc_inference,
    summarize_posterior,
)
from rosmodels.models.regression import ros_hierarchical_model, ros_regression_model


@pytest.fixture
def regression_draws():
    rng = np.random.default_rng(0)
    return {
        "intercept": rng.normal(0.0, 0.1, size=50),
        "wind_effect": rng.normal(0.5, 0.1, size=50),
        "rh_effect": rng.normal(-0.5, 0.1, size=50),
        "shape": rng.gamma(20.0, 0.2, size=50),
    }


@pytest.fixture
def hierarchical_draws(grouped_ros_model_data):
    rng = np.random.default_rng(1)
    return {
        "intercept_mean": rng.normal(0.0, 0.1, size=30),
        "intercept_scale": np.abs(rng.normal(0.5, 0.1, size=30)),
        "fire_offset": rng.normal(
            0.0, 1.0, size=(30, grouped_ros_model_data.num_groups)
        ),
        "wind_effect": rng.normal(0.5, 0.1, size=30),
        "rh_effect": rng.normal(-0.5, 0.1, size=30),
        "shape": rng.gamma(20.0, 0.2, size=30),
    }


def test_inference_config_defaults(monkeypatch):
    monkeypatch.delenv("ROSMODELS_PROGRESS_BAR", raising=False)
    config = InferenceConfig()
    assert config.kernel == "nuts"
    assert config.progress_bar is False
    monkeypatch.setenv("ROSMODELS_PROGRESS_BAR", "true")
    assert InferenceConfig().progress_bar is True


def test_unsupported_kernel(ros_model_data):
    with pytest.raises(ValueError, match="Unsupported MCMC kernel"):
        run_mcmc_inference(
            ros_regression_model, ros_model_data, InferenceConfig(kernel="gibbs")
        )


def test_summarize_posterior(hierarchical_draws):
    summary = summarize_posterior(hierarchical_draws)
    assert list(summary.columns) == ["mean", "sd", "5%", "50%", "95%"]
    assert "fire_offset[0]" in summary.index
    assert "intercept_mean" in summary.index
    assert summary.loc["shape", "mean"] == pytest.approx(
        hierarchical_draws["shape"].mean()
    )
    assert (summary["5%"] <= summary["95%"]).all()


def test_posterior_mean_ros(regression_draws, ros_model_data):
    center_wind = ros_model_data.wind_scaling.center
    center_rh = ros_model_data.rh_scaling.center
    mean_ros = posterior_mean_ros(
        regression_draws, ros_model_data, center_wind, center_rh
    )
    assert mean_ros.shape == (50,)
    assert np.all((mean_ros > 0) & (mean_ros < 15.0))
    np.testing.assert_allclose(
        mean_ros, 15.0 / (1.0 + np.exp(-regression_draws["intercept"]))
    )


def test_posterior_mean_ros_by_fire(hierarchical_draws, grouped_ros_model_data):
    fire = grouped_ros_model_data.group_labels[1]
    population = posterior_mean_ros(
        hierarchical_draws, grouped_ros_model_data, 20.0, 50.0
    )
    by_fire = posterior_mean_ros(
        hierarchical_draws, grouped_ros_model_data, 20.0, 50.0, fire=fire
    )
    assert by_fire.shape == population.shape
    assert not np.allclose(by_fire, population)
    with pytest.raises(ValueError, match="Unknown fire"):
        posterior_mean_ros(
            hierarchical_draws, grouped_ros_model_data, 20.0, 50.0, fire="nope"
        )


def test_fire_requires_hierarchical_fit(regression_draws, ros_model_data):
    with pytest.raises(ValueError, match="hierarchical"):
        posterior_mean_ros(
            regression_draws, ros_model_data, 20.0, 50.0, fire="fire_00"
        )


def test_posterior_exceedance(regression_draws, ros_model_data):
    tails = posterior_exceedance(regression_draws, ros_model_data, 30.0, 20.0)
    assert tails.shape == (50,)
    assert np.all((tails >= 0) & (tails <= 1))

    mean_ros = posterior_mean_ros(regression_draws, ros_model_data, 30.0, 20.0)
    shape = float(regression_draws["shape"][0])
    assert tails[0] == pytest.approx(
        compute_tail_probability(shape, shape / float(mean_ros[0]), 15.0)
    )

    lower = posterior_exceedance(
        regression_draws, ros_model_data, 30.0, 20.0, threshold=10.0
    )
    assert np.all(lower >= tails)


@pytest.mark.slow
@pytest.mark.integration
def test_regression_recovers_wind_effect():
    from rosmodels.data import prepare_model_data, simulate_ros_data

    frame = simulate_ros_data(
        num_observations=200, wind_effect=1.0, rh_effect=-0.5, shape=8.0, seed=3
    )
    data = prepare_model_data(frame)
    mcmc, draws = run_mcmc_inference(
        ros_regression_model,
        data,
        InferenceConfig(num_warmup=150, num_samples=150, seed=0),
    )
    assert set(draws) == {"intercept", "wind_effect", "rh_effect", "shape"}
    assert draws["wind_effect"].shape == (150,)
    assert draws["wind_effect"].mean() > 0
    assert draws["rh_effect"].mean() < 0


@pytest.mark.slow
@pytest.mark.integration
def test_hierarchical_sampling(grouped_ros_model_data):
    _, draws = run_mcmc_inference(
        ros_hierarchical_model,
        grouped_ros_model_data,
        InferenceConfig(num_warmup=50, num_samples=50, seed=1),
    )
    assert draws["fire_offset"].shape == (50, grouped_ros_model_data.num_groups)
    summary = summarize_posterior(draws)
    assert len(summary) == 5 + grouped_ros_model_data.num_groups


def test_posterior_exceedance_integer_covariates(regression_draws, ros_model_data):
    from_ints = posterior_exceedance(regression_draws, ros_model_data, 20, 30)
    from_floats = posterior_exceedance(regression_draws, ros_model_data, 20.0, 30.0)
    np.testing.assert_allclose(from_ints, from_floats)
    np.testing.assert_allclose(
        posterior_exceedance(
            regression_draws, ros_model_data, 20, 30, threshold=15
        ),
        from_floats,
    )
