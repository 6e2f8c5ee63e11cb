"""Interactive explorer of Gamma-distributed ROS values."""

from rosmodels.explorer.controller import (
    ControllerState,
    ExplorerController,
    Rendering,
)
from rosmodels.explorer.gamma import (
    GammaParameterError,
    GammaSummary,
    compute_central_interval,
    compute_density_curve,
    compute_domain,
    compute_mode,
    compute_rate,
    compute_tail_probability,
    derive_quantities,
)
from rosmodels.explorer.parameters import (
    ROS_MAX,
    ExplorerConfig,
    ParameterRangeError,
    ParameterStore,
    SliderSpec,
    load_explorer_config,
)
from rosmodels.explorer.render import (
    DensityPlotSpec,
    ReferenceLine,
    build_plot_spec,
    density_chart,
    format_statistics,
    plot_density,
)
from rosmodels.explorer.simulate import simulate_ros

__all__ = [
    "ControllerState",
    "DensityPlotSpec",
    "ExplorerConfig",
    "ExplorerController",
    "GammaParameterError",
    "GammaSummary",
    "ParameterRangeError",
    "ParameterStore",
    "ROS_MAX",
    "ReferenceLine",
    "Rendering",
    "SliderSpec",
    "build_plot_spec",
    "compute_central_interval",
    "compute_density_curve",
    "compute_domain",
    "compute_mode",
    "compute_rate",
    "compute_tail_probability",
    "density_chart",
    "derive_quantities",
    "format_statistics",
    "load_explorer_config",
    "plot_density",
    "simulate_ros",
]
