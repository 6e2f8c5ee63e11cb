"""
Parameter store and configuration for the Gamma exceedance explorer.

The explorer exposes two user-controlled parameters, the mean ROS value and
the Gamma shape, and one fixed threshold: the maximum mean ROS value of the
published reference model. Configuration is structured with hydra-zen so that
individual values can be overridden from a dotlist, e.g.
``load_explorer_config(["threshold=12", "shape.maximum=80"])``.
"""

import math
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Sequence

from beartype import beartype
from hydra_zen import builds, instantiate
from omegaconf import OmegaConf

from rosmodels.logging import configure_logging

__all__ = [
    "ExplorerConf",
    "ExplorerConfig",
    "MEAN_SLIDER",
    "ParameterRangeError",
    "Parameters",
    "ParameterStore",
    "ROS_MAX",
    "SHAPE_SLIDER",
    "SliderSpec",
    "load_explorer_config",
]

logger = configure_logging(__name__)

# Maximum value for mean ROS used in the published JAGS model.
ROS_MAX = 15.0


class ParameterRangeError(ValueError):
    """Raised when a parameter write falls outside its declared range."""


@dataclass(frozen=True)
class SliderSpec:
    """
    A bounded numeric input with a fixed step granularity.

    Attributes:
        label: Text shown next to the input.
        minimum: Smallest admissible value, strictly positive.
        maximum: Largest admissible value.
        step: Granularity of the input.
        default: Initial value.
    """

    label: str
    minimum: float
    maximum: float
    step: float
    default: float

    def __post_init__(self):
        if not self.minimum > 0:
            raise ParameterRangeError(
                f"{self.label!r} minimum must be positive, got {self.minimum}"
            )
        if not self.minimum < self.maximum:
            raise ParameterRangeError(
                f"{self.label!r} minimum {self.minimum} must be less than "
                f"maximum {self.maximum}"
            )
        if not self.step > 0:
            raise ParameterRangeError(
                f"{self.label!r} step must be positive, got {self.step}"
            )
        if not self.contains(self.default):
            raise ParameterRangeError(
                f"{self.label!r} default {self.default} is outside "
                f"[{self.minimum}, {self.maximum}]"
            )

    def contains(self, value: float) -> bool:
        return math.isfinite(value) and self.minimum <= value <= self.maximum

    def clamp(self, value: float) -> float:
        return min(max(value, self.minimum), self.maximum)

    def snap(self, value: float) -> float:
        """
        Clamp a value into range and round it to the nearest step.

        Examples:
            >>> spec = SliderSpec("x", minimum=1.0, maximum=15.0, step=0.1, default=5.0)
            >>> spec.snap(4.96)
            5.0
            >>> spec.snap(100.0)
            15.0
        """
        steps = round((self.clamp(value) - self.minimum) / self.step)
        return self.clamp(round(self.minimum + steps * self.step, 10))


MEAN_SLIDER = dict(
    label="Mean ROS value:",
    minimum=1.0,
    maximum=ROS_MAX,
    step=0.1,
    default=5.0,
)
SHAPE_SLIDER = dict(
    label="Gamma shape value:",
    minimum=1.0,
    maximum=50.0,
    step=0.1,
    default=1.0,
)
NUM_POINTS = 1000


@dataclass(frozen=True)
class ExplorerConfig:
    """
    Configuration of the Gamma exceedance explorer.

    Attributes:
        threshold: Fixed ROS value against which exceedance is measured.
        mean: Input specification for the mean ROS value.
        shape: Input specification for the Gamma shape.
        num_points: Number of points on the plotted density curve.
    """

    threshold: float = ROS_MAX
    mean: SliderSpec = field(default_factory=lambda: SliderSpec(**MEAN_SLIDER))
    shape: SliderSpec = field(default_factory=lambda: SliderSpec(**SHAPE_SLIDER))
    num_points: int = NUM_POINTS

    def __post_init__(self):
        if not (math.isfinite(self.threshold) and self.threshold > 0):
            raise ParameterRangeError(
                f"threshold must be positive and finite, got {self.threshold}"
            )
        if self.num_points < 2:
            raise ParameterRangeError(
                f"num_points must be at least 2, got {self.num_points}"
            )


ExplorerConf = builds(
    ExplorerConfig,
    threshold=ROS_MAX,
    mean=builds(SliderSpec, **MEAN_SLIDER),
    shape=builds(SliderSpec, **SHAPE_SLIDER),
    num_points=NUM_POINTS,
)


@beartype
def load_explorer_config(
    overrides: Optional[Sequence[str]] = None,
) -> ExplorerConfig:
    """
    Build an ExplorerConfig from the structured defaults and dotlist overrides.

    Args:
        overrides: Dotlist entries such as ``"threshold=12"``.

    Returns:
        ExplorerConfig: The instantiated configuration.
    """
    cfg = OmegaConf.structured(ExplorerConf)
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(list(overrides)))
        logger.debug(f"explorer configuration overrides: {list(overrides)}")
    return instantiate(cfg)


class Parameters(NamedTuple):
    mean: float
    shape: float


class ParameterStore:
    """
    Holds the current mean and shape together with the fixed threshold.

    Writes are checked against the configured ranges; values arriving from an
    input layer are expected to already be clamped to them.
    """

    @beartype
    def __init__(self, config: Optional[ExplorerConfig] = None):
        self.config = config if config is not None else ExplorerConfig()
        self._mean = float(self.config.mean.default)
        self._shape = float(self.config.shape.default)

    @property
    def mean(self) -> float:
        return self._mean

    @property
    def shape(self) -> float:
        return self._shape

    @property
    def threshold(self) -> float:
        return float(self.config.threshold)

    def set_mean(self, value: float) -> None:
        self._mean = self._checked(self.config.mean, value)

    def set_shape(self, value: float) -> None:
        self._shape = self._checked(self.config.shape, value)

    def snapshot(self) -> Parameters:
        return Parameters(mean=self._mean, shape=self._shape)

    def restore(self, parameters: Parameters) -> None:
        self._mean, self._shape = parameters

    @staticmethod
    def _checked(spec: SliderSpec, value: float) -> float:
        value = float(value)
        if not spec.contains(value):
            raise ParameterRangeError(
                f"{spec.label!r} value {value} is outside "
                f"[{spec.minimum}, {spec.maximum}]"
            )
        return value

    def __repr__(self) -> str:
        return (
            f"ParameterStore(mean={self._mean}, shape={self._shape}, "
            f"threshold={self.threshold})"
        )
