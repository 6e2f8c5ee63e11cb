"""
Posterior sampling and posterior summaries for the ROS models.

Sampling is delegated to Pyro's MCMC with a NUTS or HMC kernel. Posterior
draws are returned as numpy arrays keyed by latent site name and can be
mapped back onto the explorer's Gamma quantities, e.g. the probability that
ROS exceeds the maximum mean ROS at given weather conditions.
"""

import os
from numbers import Real
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import pyro
from beartype import beartype
from pyro.infer import HMC, MCMC, NUTS
from scipy.special import expit

from rosmodels.data import ROSModelData
from rosmodels.explorer.gamma import compute_rate, compute_tail_probability
from rosmodels.logging import configure_logging
from rosmodels.utils import str_to_bool

__all__ = [
    "InferenceConfig",
    "posterior_exceedance",
    "posterior_mean_ros",
    "run_mcmc_inference",
    "summarize_posterior",
]

logger = configure_logging(__name__)


@dataclass
class InferenceConfig:
    """
    Configuration for MCMC inference.

    The progress bar defaults to the ``ROSMODELS_PROGRESS_BAR`` environment
    variable.
    """

    num_warmup: int = 500  # Number of warmup steps
    num_samples: int = 1000  # Number of posterior samples per chain
    num_chains: int = 1
    kernel: str = "nuts"  # "nuts" or "hmc"
    target_accept_prob: float = 0.8  # Target acceptance probability for NUTS
    seed: Optional[int] = 0
    progress_bar: bool = field(
        default_factory=lambda: str_to_bool(
            os.getenv("ROSMODELS_PROGRESS_BAR", "False")
        )
    )


@beartype
def run_mcmc_inference(
    model: Callable,
    data: ROSModelData,
    config: Optional[InferenceConfig] = None,
) -> Tuple[MCMC, Dict[str, np.ndarray]]:
    """
    Run MCMC inference with a model.

    Args:
        model: Pyro model function taking the model data.
        data: Model inputs.
        config: Inference configuration.

    Returns:
        Tuple of (MCMC object, posterior draws as numpy arrays)
    """
    if config is None:
        config = InferenceConfig()

    if config.seed is not None:
        pyro.set_rng_seed(config.seed)

    if config.kernel.lower() == "nuts":
        kernel = NUTS(model, target_accept_prob=config.target_accept_prob)
    elif config.kernel.lower() == "hmc":
        kernel = HMC(model)
    else:
        raise ValueError(f"Unsupported MCMC kernel: {config.kernel}")

    logger.info(
        f"running {config.kernel.upper()} with {config.num_chains} chain(s), "
        f"{config.num_warmup} warmup and {config.num_samples} samples"
    )
    mcmc = MCMC(
        kernel,
        num_samples=config.num_samples,
        warmup_steps=config.num_warmup,
        num_chains=config.num_chains,
        disable_progbar=not config.progress_bar,
    )
    mcmc.run(data)

    draws = {
        name: samples.detach().cpu().numpy()
        for name, samples in mcmc.get_samples().items()
    }
    return mcmc, draws


@beartype
def summarize_posterior(
    draws: Dict[str, np.ndarray],
    probabilities: Sequence[float] = (0.05, 0.5, 0.95),
) -> pd.DataFrame:
    """
    Summarize posterior draws by parameter.

    Vector-valued sites are expanded into one row per element, named
    ``site[i]``.

    Args:
        draws: Posterior draws keyed by site name, draws along the first axis.
        probabilities: Quantiles to report.

    Returns:
        pd.DataFrame: Mean, standard deviation and quantiles per parameter.
    """
    rows = {}
    for name, values in draws.items():
        values = np.asarray(values, dtype=float)
        flat = values.reshape(values.shape[0], -1)
        for index in range(flat.shape[1]):
            label = name if values.ndim == 1 else f"{name}[{index}]"
            column = flat[:, index]
            row = {"mean": column.mean(), "sd": column.std(ddof=1) if len(column) > 1 else 0.0}
            for probability, quantile in zip(
                probabilities, np.quantile(column, probabilities)
            ):
                row[f"{100 * probability:g}%"] = quantile
            rows[label] = row
    return pd.DataFrame.from_dict(rows, orient="index")


def _intercept_draws(
    draws: Dict[str, np.ndarray],
    data: ROSModelData,
    fire: Optional[str],
) -> np.ndarray:
    if "intercept" in draws:
        if fire is not None:
            raise ValueError("fire-specific predictions need a hierarchical fit")
        return draws["intercept"]
    if fire is None:
        return draws["intercept_mean"]
    if fire not in data.group_labels:
        raise ValueError(
            f"Unknown fire: {fire}. Available fires: {list(data.group_labels)}"
        )
    index = data.group_labels.index(fire)
    return draws["intercept_mean"] + draws["intercept_scale"] * draws[
        "fire_offset"
    ][:, index]


@beartype
def posterior_mean_ros(
    draws: Dict[str, np.ndarray],
    data: ROSModelData,
    wind_speed: Real,
    relative_humidity: Real,
    fire: Optional[str] = None,
) -> np.ndarray:
    """
    Posterior draws of the mean ROS at new weather conditions.

    Args:
        draws: Posterior draws from ``run_mcmc_inference``.
        data: Model inputs the draws were fitted on.
        wind_speed: Wind speed on the original scale.
        relative_humidity: Relative humidity on the original scale.
        fire: Fire label for a hierarchical fit; the population-level
            intercept is used when omitted.

    Returns:
        np.ndarray: One mean ROS value per posterior draw.
    """
    intercept = _intercept_draws(draws, data, fire)
    eta = (
        intercept
        + draws["wind_effect"] * data.wind_scaling.apply(wind_speed)
        + draws["rh_effect"] * data.rh_scaling.apply(relative_humidity)
    )
    return data.ros_max * expit(eta)


@beartype
def posterior_exceedance(
    draws: Dict[str, np.ndarray],
    data: ROSModelData,
    wind_speed: Real,
    relative_humidity: Real,
    threshold: Optional[Real] = None,
    fire: Optional[str] = None,
) -> np.ndarray:
    """
    Posterior draws of the probability that a ROS value exceeds a threshold.

    Each draw defines a Gamma distribution with the draw's shape and mean ROS;
    its tail probability above ``threshold`` (``ros_max`` by default) is
    computed as in the explorer.

    Returns:
        np.ndarray: One exceedance probability per posterior draw.
    """
    if threshold is None:
        threshold = data.ros_max
    mean_ros = posterior_mean_ros(
        draws, data, wind_speed, relative_humidity, fire=fire
    )
    shapes = np.asarray(draws["shape"], dtype=float)
    return np.array(
        [
            compute_tail_probability(
                float(shape), compute_rate(float(mean), float(shape)), threshold
            )
            for mean, shape in zip(mean_ros, shapes)
        ]
    )
