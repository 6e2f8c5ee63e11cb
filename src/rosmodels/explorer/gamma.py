"""
Derived quantities of a moment-matched Gamma distribution of ROS values.

A Gamma(shape, rate) distribution with a given mean has ``rate = shape / mean``.
Every function here evaluates the distribution through ``gamma_distribution``,
which is the only place the (shape, rate) pair is translated into the
(shape, scale) parameterization used by scipy.
"""

import math
from numbers import Real
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from beartype import beartype
from scipy import stats

from rosmodels.logging import configure_logging

__all__ = [
    "GammaParameterError",
    "GammaSummary",
    "compute_central_interval",
    "compute_density_curve",
    "compute_domain",
    "compute_mode",
    "compute_rate",
    "compute_tail_probability",
    "derive_quantities",
    "gamma_distribution",
]

logger = configure_logging(__name__)

DOMAIN_QUANTILE = 0.99
CENTRAL_INTERVAL = (0.05, 0.95)


class GammaParameterError(ValueError):
    """Raised when a Gamma distribution is requested with invalid parameters."""


def _require_positive(**values: Real) -> None:
    for name, value in values.items():
        if not (math.isfinite(value) and value > 0):
            raise GammaParameterError(
                f"{name} must be positive and finite, got {value}"
            )


@beartype
def gamma_distribution(shape: Real, rate: Real):
    """Frozen scipy Gamma distribution for the given shape and rate."""
    _require_positive(shape=shape, rate=rate)
    return stats.gamma(a=shape, scale=1.0 / rate)


@beartype
def compute_rate(mean: Real, shape: Real) -> float:
    """
    Rate of the Gamma distribution with the given mean and shape.

    Examples:
        >>> compute_rate(5.0, 1.0)
        0.2
    """
    _require_positive(mean=mean, shape=shape)
    return float(shape) / float(mean)


@beartype
def compute_domain(shape: Real, rate: Real, threshold: Real) -> float:
    """
    Upper bound of the plotted domain.

    The domain covers the 99th percentile of the distribution and extends
    at least one unit past the threshold.
    """
    _require_positive(threshold=threshold)
    upper_quantile = float(gamma_distribution(shape, rate).ppf(DOMAIN_QUANTILE))
    return max(threshold + 1.0, upper_quantile)


@beartype
def compute_density_curve(
    shape: Real,
    rate: Real,
    x_max: Real,
    n: int = 1000,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Evaluate the Gamma density on ``n`` evenly spaced points of ``[0, x_max]``.

    Args:
        shape: Gamma shape.
        rate: Gamma rate.
        x_max: Right end of the domain, included in the curve.
        n: Number of points.

    Returns:
        Tuple[np.ndarray, np.ndarray]: The x values and the density at each.
    """
    _require_positive(x_max=x_max)
    if n < 2:
        raise ValueError(f"a density curve needs at least 2 points, got {n}")
    x = np.linspace(0.0, x_max, n)
    density = gamma_distribution(shape, rate).pdf(x)
    return x, density


@beartype
def compute_mode(shape: Real, rate: Real) -> float:
    """
    Mode of the Gamma distribution.

    For ``shape <= 1`` the density decreases monotonically and the mode is
    reported as 0.

    Examples:
        >>> compute_mode(1.0, 0.2)
        0.0
        >>> compute_mode(3.0, 0.5)
        4.0
    """
    _require_positive(shape=shape, rate=rate)
    if shape > 1:
        return (float(shape) - 1.0) / rate
    return 0.0


@beartype
def compute_central_interval(shape: Real, rate: Real) -> Tuple[float, float]:
    """5th and 95th percentiles of the Gamma distribution."""
    lower, upper = gamma_distribution(shape, rate).ppf(CENTRAL_INTERVAL)
    return float(lower), float(upper)


@beartype
def compute_tail_probability(shape: Real, rate: Real, threshold: Real) -> float:
    """
    Probability mass above ``threshold``, i.e. ``1 - CDF(threshold)``.

    The survival function is used directly so that very small tail
    probabilities are not lost to cancellation.
    """
    _require_positive(threshold=threshold)
    return float(gamma_distribution(shape, rate).sf(threshold))


@dataclass(frozen=True, eq=False)
class GammaSummary:
    """
    All quantities derived from a (mean, shape) pair.

    Attributes:
        mean: Mean of the distribution.
        shape: Gamma shape.
        threshold: ROS value against which exceedance is measured.
        rate: Gamma rate, ``shape / mean``.
        x_max: Right end of the plotted domain.
        x: Points at which the density is evaluated.
        density: Density at each point of ``x``.
        mode: Mode of the distribution.
        central_interval: 5th and 95th percentiles.
        tail_probability: Probability of exceeding ``threshold``.
    """

    mean: float
    shape: float
    threshold: float
    rate: float
    x_max: float
    x: np.ndarray
    density: np.ndarray
    mode: float
    central_interval: Tuple[float, float]
    tail_probability: float


@beartype
def derive_quantities(
    mean: Real,
    shape: Real,
    threshold: Real,
    num_points: int = 1000,
) -> GammaSummary:
    """
    Compute every derived quantity for the given parameters in one pass.

    Args:
        mean: Mean ROS value.
        shape: Gamma shape.
        threshold: ROS value against which exceedance is measured.
        num_points: Number of points on the density curve.

    Returns:
        GammaSummary: The derived quantities.

    Raises:
        GammaParameterError: If mean, shape or threshold is not positive.
    """
    mean, shape, threshold = float(mean), float(shape), float(threshold)
    rate = compute_rate(mean, shape)
    x_max = compute_domain(shape, rate, threshold)
    x, density = compute_density_curve(shape, rate, x_max, n=num_points)
    summary = GammaSummary(
        mean=mean,
        shape=shape,
        threshold=threshold,
        rate=rate,
        x_max=x_max,
        x=x,
        density=density,
        mode=compute_mode(shape, rate),
        central_interval=compute_central_interval(shape, rate),
        tail_probability=compute_tail_probability(shape, rate, threshold),
    )
    logger.debug(
        f"derived Gamma(shape={shape}, rate={rate:.4f}): "
        f"x_max={x_max:.3f}, tail={summary.tail_probability:.5f}"
    )
    return summary
