"""
rosmodels

Bayesian models relating fire rate of spread (ROS) to weather covariates and
an interactive explorer of Gamma-distributed ROS values.
"""

from importlib import metadata

import rosmodels.data
import rosmodels.explorer
import rosmodels.logging
import rosmodels.models
import rosmodels.plots
import rosmodels.utils


try:
    __version__ = metadata.version(__package__)
except metadata.PackageNotFoundError:
    __version__ = "unknown"

del metadata

__all__ = [
    "data",
    "explorer",
    "logging",
    "models",
    "plots",
    "utils",
]
