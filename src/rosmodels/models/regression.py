"""
Bayesian models relating fire rate of spread to weather covariates.

Observed ROS values follow a Gamma distribution parameterized by its shape
and a rate matched to the mean, ``Gamma(shape, shape / mean_ros)``. The mean
ROS is bounded above by ``ros_max``:

    mean_ros = ros_max * sigmoid(intercept + wind_effect * wind + rh_effect * rh)

with wind speed and relative humidity standardized. The hierarchical variant
replaces the intercept with one intercept per fire drawn around a shared mean.
"""

from typing import Callable, Dict

import pyro
import pyro.distributions as dist
import torch
from beartype import beartype

from rosmodels.data import ROSModelData

__all__ = [
    "MODELS",
    "bounded_mean_ros",
    "get_model",
    "ros_hierarchical_model",
    "ros_regression_model",
]

COEFFICIENT_PRIOR_SCALE = 2.0


def bounded_mean_ros(
    ros_max: float,
    intercept: torch.Tensor,
    wind_effect: torch.Tensor,
    rh_effect: torch.Tensor,
    wind_speed: torch.Tensor,
    relative_humidity: torch.Tensor,
) -> torch.Tensor:
    return ros_max * torch.sigmoid(
        intercept + wind_effect * wind_speed + rh_effect * relative_humidity
    )


def _coefficients():
    wind_effect = pyro.sample(
        "wind_effect", dist.Normal(0.0, COEFFICIENT_PRIOR_SCALE)
    )
    rh_effect = pyro.sample("rh_effect", dist.Normal(0.0, COEFFICIENT_PRIOR_SCALE))
    shape = pyro.sample("shape", dist.Gamma(2.0, 0.1))
    return wind_effect, rh_effect, shape


def _observe(data: ROSModelData, mean_ros: torch.Tensor, shape: torch.Tensor):
    with pyro.plate("observations", data.num_observations):
        return pyro.sample(
            "ros",
            dist.Gamma(shape, shape / mean_ros),
            obs=data.ros,
        )


def ros_regression_model(data: ROSModelData) -> torch.Tensor:
    """
    Gamma regression of ROS on wind speed and relative humidity.

    Latent sites: ``intercept``, ``wind_effect``, ``rh_effect``, ``shape``.
    """
    intercept = pyro.sample("intercept", dist.Normal(0.0, COEFFICIENT_PRIOR_SCALE))
    wind_effect, rh_effect, shape = _coefficients()
    mean_ros = bounded_mean_ros(
        data.ros_max,
        intercept,
        wind_effect,
        rh_effect,
        data.wind_speed,
        data.relative_humidity,
    )
    return _observe(data, mean_ros, shape)


def ros_hierarchical_model(data: ROSModelData) -> torch.Tensor:
    """
    Gamma regression with one intercept per fire.

    Fire intercepts use a non-centered parameterization,
    ``intercept_mean + intercept_scale * fire_offset``.

    Latent sites: ``intercept_mean``, ``intercept_scale``, ``fire_offset``,
    ``wind_effect``, ``rh_effect``, ``shape``.
    """
    if data.group_index is None:
        raise ValueError("the hierarchical model requires a fire group column")

    intercept_mean = pyro.sample(
        "intercept_mean", dist.Normal(0.0, COEFFICIENT_PRIOR_SCALE)
    )
    intercept_scale = pyro.sample("intercept_scale", dist.HalfNormal(1.0))
    with pyro.plate("fires", data.num_groups):
        fire_offset = pyro.sample("fire_offset", dist.Normal(0.0, 1.0))
    wind_effect, rh_effect, shape = _coefficients()

    intercept = intercept_mean + intercept_scale * fire_offset[data.group_index]
    mean_ros = bounded_mean_ros(
        data.ros_max,
        intercept,
        wind_effect,
        rh_effect,
        data.wind_speed,
        data.relative_humidity,
    )
    return _observe(data, mean_ros, shape)


MODELS: Dict[str, Callable[[ROSModelData], torch.Tensor]] = {
    "regression": ros_regression_model,
    "hierarchical": ros_hierarchical_model,
}


@beartype
def get_model(name: str) -> Callable[[ROSModelData], torch.Tensor]:
    """
    Look up a model function by name.

    Examples:
        >>> get_model("regression").__name__
        'ros_regression_model'
    """
    try:
        return MODELS[name]
    except KeyError:
        raise ValueError(
            f"Unknown model: {name}. Available models: {sorted(MODELS)}"
        ) from None
