from numbers import Real
from typing import Optional

import numpy as np
import pyro
import pyro.distributions as dist
import torch
from beartype import beartype

from rosmodels.explorer.gamma import compute_rate
from rosmodels.logging import configure_logging

__all__ = ["simulate_ros"]

logger = configure_logging(__name__)


@beartype
def simulate_ros(
    mean: Real,
    shape: Real,
    num_samples: int = 1000,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Draw ROS values from the Gamma distribution with the given mean and shape.

    Args:
        mean: Mean ROS value.
        shape: Gamma shape.
        num_samples: Number of values to draw.
        seed: Seed passed to ``pyro.set_rng_seed`` before sampling.

    Returns:
        np.ndarray: The simulated ROS values.
    """
    if num_samples < 1:
        raise ValueError(f"num_samples must be positive, got {num_samples}")
    rate = compute_rate(mean, shape)
    if seed is not None:
        pyro.set_rng_seed(seed)
    gamma = dist.Gamma(
        torch.tensor(float(shape), dtype=torch.float64),
        torch.tensor(rate, dtype=torch.float64),
    )
    samples = gamma.sample((num_samples,)).numpy()
    logger.debug(
        f"simulated {num_samples} ROS values, sample mean {samples.mean():.3f}"
    )
    return samples
