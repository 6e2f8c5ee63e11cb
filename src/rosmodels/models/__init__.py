from rosmodels.models.inference import (
    InferenceConfig,
    posterior_exceedance,
    posterior_mean_ros,
    run_mcmc_inference,
    summarize_posterior,
)
from rosmodels.models.regression import (
    MODELS,
    bounded_mean_ros,
    get_model,
    ros_hierarchical_model,
    ros_regression_model,
)

__all__ = [
    "InferenceConfig",
    "MODELS",
    "bounded_mean_ros",
    "get_model",
    "posterior_exceedance",
    "posterior_mean_ros",
    "ros_hierarchical_model",
    "ros_regression_model",
    "run_mcmc_inference",
    "summarize_posterior",
]
