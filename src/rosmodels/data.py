"""
Loading and preparing fire rate-of-spread observations for model fitting.

Observations are tabular: one row per fire observation with the observed ROS
and the weather covariates wind speed and relative humidity, optionally with
a column identifying the fire for hierarchical models.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd
import torch
from beartype import beartype
from returns.result import Failure, Result, Success
from scipy.special import expit

from rosmodels.explorer.parameters import ROS_MAX
from rosmodels.logging import configure_logging

__all__ = [
    "COVARIATE_COLUMNS",
    "REQUIRED_COLUMNS",
    "ROSDataError",
    "ROSModelData",
    "Standardization",
    "load_ros_data",
    "prepare_model_data",
    "simulate_ros_data",
    "validate_ros_data",
]

logger = configure_logging(__name__)

COVARIATE_COLUMNS = ("wind_speed", "relative_humidity")
REQUIRED_COLUMNS = ("ros",) + COVARIATE_COLUMNS


class ROSDataError(ValueError):
    """Raised when ROS observations are unusable for model fitting."""


@dataclass(frozen=True)
class Standardization:
    """Centering and scaling applied to a covariate."""

    center: float
    scale: float

    @classmethod
    def fit(cls, values: np.ndarray) -> "Standardization":
        scale = float(np.std(values))
        return cls(center=float(np.mean(values)), scale=scale if scale > 0 else 1.0)

    def apply(self, values):
        return (np.asarray(values, dtype=float) - self.center) / self.scale


@dataclass(frozen=True, eq=False)
class ROSModelData:
    """
    Model inputs built from a table of ROS observations.

    Attributes:
        ros: Observed ROS values.
        wind_speed: Standardized wind speed.
        relative_humidity: Standardized relative humidity.
        wind_scaling: Standardization applied to wind speed.
        rh_scaling: Standardization applied to relative humidity.
        group_index: Integer code of the fire of each observation.
        group_labels: Fire label of each integer code.
        ros_max: Upper bound on the mean ROS.
    """

    ros: torch.Tensor
    wind_speed: torch.Tensor
    relative_humidity: torch.Tensor
    wind_scaling: Standardization
    rh_scaling: Standardization
    group_index: Optional[torch.Tensor] = None
    group_labels: Tuple[str, ...] = ()
    ros_max: float = ROS_MAX

    @property
    def num_observations(self) -> int:
        return int(self.ros.shape[0])

    @property
    def num_groups(self) -> int:
        return len(self.group_labels)

    def as_dict(self) -> Dict[str, Any]:
        data = {
            "ros": self.ros,
            "wind_speed": self.wind_speed,
            "relative_humidity": self.relative_humidity,
            "ros_max": self.ros_max,
            "num_observations": self.num_observations,
        }
        if self.group_index is not None:
            data["group_index"] = self.group_index
            data["num_groups"] = self.num_groups
        return data


@beartype
def load_ros_data(file_path: Path | str) -> Result[pd.DataFrame, Exception]:
    """
    Load ROS observations from a CSV file.

    Args:
        file_path: Path to the CSV file.

    Returns:
        Result[pd.DataFrame, Exception]: The loaded table or the exception
        raised while reading it.
    """
    try:
        frame = pd.read_csv(file_path)
    except Exception as e:
        logger.error(f"failed to read ROS data from {file_path}: {e}")
        return Failure(e)
    logger.info(f"loaded {len(frame)} ROS observations from {file_path}")
    return Success(frame)


@beartype
def validate_ros_data(
    frame: pd.DataFrame,
    group_column: Optional[str] = None,
) -> pd.DataFrame:
    """
    Check that a table of observations can be used for model fitting.

    Args:
        frame: Table of observations.
        group_column: Column identifying the fire, if any.

    Returns:
        pd.DataFrame: The required columns of the table.

    Raises:
        ROSDataError: If columns are missing, values are missing or
            non-numeric, or any ROS value is not positive.
    """
    columns = list(REQUIRED_COLUMNS)
    if group_column is not None:
        columns.append(group_column)
    missing = [column for column in columns if column not in frame.columns]
    if missing:
        raise ROSDataError(f"missing required columns: {missing}")
    if frame.empty:
        raise ROSDataError("no observations")

    subset = frame[columns]
    if subset.isna().any().any():
        counts = subset.isna().sum()
        raise ROSDataError(
            f"missing values in columns: {counts[counts > 0].to_dict()}"
        )
    for column in REQUIRED_COLUMNS:
        if not pd.api.types.is_numeric_dtype(subset[column]):
            raise ROSDataError(f"column {column!r} is not numeric")
        if not np.isfinite(subset[column].to_numpy(dtype=float)).all():
            raise ROSDataError(f"column {column!r} has non-finite values")
    if (subset["ros"] <= 0).any():
        raise ROSDataError("ROS values must be positive")
    return subset


@beartype
def prepare_model_data(
    frame: pd.DataFrame,
    group_column: Optional[str] = None,
    ros_max: float = ROS_MAX,
) -> ROSModelData:
    """
    Build model inputs from a table of ROS observations.

    Wind speed and relative humidity are standardized to zero mean and unit
    variance; the applied transformations are kept so new covariate values
    can be mapped onto the same scale.

    Args:
        frame: Table of observations.
        group_column: Column identifying the fire, if any.
        ros_max: Upper bound on the mean ROS.

    Returns:
        ROSModelData: Tensors ready to be passed to a model.
    """
    subset = validate_ros_data(frame, group_column=group_column)
    wind = subset["wind_speed"].to_numpy(dtype=float)
    rh = subset["relative_humidity"].to_numpy(dtype=float)
    wind_scaling = Standardization.fit(wind)
    rh_scaling = Standardization.fit(rh)

    group_index = None
    group_labels: Tuple[str, ...] = ()
    if group_column is not None:
        codes, uniques = pd.factorize(subset[group_column], sort=True)
        group_index = torch.as_tensor(codes, dtype=torch.long)
        group_labels = tuple(str(label) for label in uniques)

    data = ROSModelData(
        ros=torch.as_tensor(subset["ros"].to_numpy(dtype=float), dtype=torch.float32),
        wind_speed=torch.as_tensor(wind_scaling.apply(wind), dtype=torch.float32),
        relative_humidity=torch.as_tensor(rh_scaling.apply(rh), dtype=torch.float32),
        wind_scaling=wind_scaling,
        rh_scaling=rh_scaling,
        group_index=group_index,
        group_labels=group_labels,
        ros_max=ros_max,
    )
    logger.info(
        f"prepared {data.num_observations} observations"
        + (f" from {data.num_groups} fires" if group_column else "")
    )
    return data


@beartype
def simulate_ros_data(
    num_observations: int = 100,
    num_groups: int = 0,
    intercept: float = -0.5,
    wind_effect: float = 0.8,
    rh_effect: float = -0.6,
    shape: float = 4.0,
    group_scale: float = 0.5,
    ros_max: float = ROS_MAX,
    seed: int = 0,
) -> pd.DataFrame:
    """
    Simulate ROS observations from the bounded Gamma regression model.

    Covariates are drawn uniformly (wind speed in [0, 40], relative humidity
    in [10, 90]); the mean ROS of each observation is
    ``ros_max * expit(intercept + wind_effect * z_wind + rh_effect * z_rh)``
    on standardized covariates, plus a per-fire intercept offset when
    ``num_groups > 0``.

    Returns:
        pd.DataFrame: Columns ``ros``, ``wind_speed``, ``relative_humidity``
        and, when grouped, ``fire``.
    """
    if num_observations < 1:
        raise ValueError(f"num_observations must be positive, got {num_observations}")
    rng = np.random.default_rng(seed)
    wind = rng.uniform(0.0, 40.0, size=num_observations)
    rh = rng.uniform(10.0, 90.0, size=num_observations)
    eta = (
        intercept
        + wind_effect * Standardization.fit(wind).apply(wind)
        + rh_effect * Standardization.fit(rh).apply(rh)
    )

    frame = pd.DataFrame({"wind_speed": wind, "relative_humidity": rh})
    if num_groups > 0:
        groups = rng.integers(0, num_groups, size=num_observations)
        offsets = rng.normal(0.0, group_scale, size=num_groups)
        eta = eta + offsets[groups]
        frame["fire"] = [f"fire_{group:02d}" for group in groups]

    mean_ros = ros_max * expit(eta)
    frame.insert(0, "ros", rng.gamma(shape, mean_ros / shape))
    return frame
