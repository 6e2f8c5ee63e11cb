"""
Plot descriptions and the statistics text block for the Gamma explorer.

``build_plot_spec`` and ``format_statistics`` only produce descriptions; the
matplotlib and altair backends below turn a ``DensityPlotSpec`` into a figure
or chart without consulting the calculator again.
"""

from dataclasses import dataclass
from numbers import Real
from typing import Optional, Tuple

import altair as alt
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from beartype import beartype
from matplotlib.axes import Axes
from matplotlib.figure import FigureBase

from rosmodels.explorer.gamma import GammaSummary
from rosmodels.logging import configure_logging

__all__ = [
    "DensityPlotSpec",
    "ReferenceLine",
    "build_plot_spec",
    "density_chart",
    "format_rounded",
    "format_statistics",
    "plot_density",
]

logger = configure_logging(__name__)

THRESHOLD_LABEL = "Max mean ROS"
CURVE_COLOR = "steelblue"
THRESHOLD_COLOR = "darkred"
MEAN_COLOR = "darkblue"


@dataclass(frozen=True)
class ReferenceLine:
    x: float
    label: str
    label_y: float
    color: str
    dashed: bool = False


@dataclass(frozen=True, eq=False)
class DensityPlotSpec:
    """
    Description of the density plot.

    Attributes:
        x: Points of the density curve.
        density: Density at each point.
        x_max: Right end of the x axis.
        reference_lines: Vertical markers drawn over the curve.
        x_label: Title of the x axis.
        y_label: Title of the y axis.
        fill_alpha: Opacity of the area under the curve.
    """

    x: np.ndarray
    density: np.ndarray
    x_max: float
    reference_lines: Tuple[ReferenceLine, ...]
    x_label: str = "Value"
    y_label: str = "Density"
    fill_alpha: float = 0.3


@beartype
def format_rounded(value: Real, digits: int = 3) -> str:
    """
    Round to ``digits`` decimals and drop trailing zeros.

    Examples:
        >>> format_rounded(5.0)
        '5'
        >>> format_rounded(4.978706836786394)
        '4.979'
        >>> format_rounded(0.25)
        '0.25'
        >>> format_rounded(-0.0001)
        '0'
    """
    rounded = round(float(value), digits)
    if rounded == 0:
        rounded = 0.0
    text = f"{rounded:.{digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@beartype
def build_plot_spec(summary: GammaSummary) -> DensityPlotSpec:
    """
    Describe the density plot for a set of derived quantities.

    The threshold marker is labelled at 80% and the mean marker at 90% of
    the peak density.
    """
    peak = float(np.max(summary.density))
    threshold_line = ReferenceLine(
        x=summary.threshold,
        label=THRESHOLD_LABEL,
        label_y=0.8 * peak,
        color=THRESHOLD_COLOR,
    )
    mean_line = ReferenceLine(
        x=summary.mean,
        label=f"Mean = {format_rounded(summary.mean, 2)}",
        label_y=0.9 * peak,
        color=MEAN_COLOR,
        dashed=True,
    )
    return DensityPlotSpec(
        x=summary.x,
        density=summary.density,
        x_max=summary.x_max,
        reference_lines=(threshold_line, mean_line),
    )


@beartype
def format_statistics(summary: GammaSummary) -> str:
    """
    Render the statistics block shown beneath the plot.

    Returns:
        str: Mean, mode, central 90% interval and exceedance probability on
        four lines.
    """
    lower, upper = summary.central_interval
    return "\n".join(
        [
            f"Mean: {format_rounded(summary.mean)}",
            f"Mode: {format_rounded(summary.mode)}",
            "Central 90% interval: "
            f"[{format_rounded(lower)}, {format_rounded(upper)}]",
            "Probability of exceeding upper ROS value "
            f"({summary.threshold:.1f}): "
            f"{format_rounded(100.0 * summary.tail_probability)}%",
        ]
    )


@beartype
def plot_density(
    spec: DensityPlotSpec,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (8.0, 4.0),
) -> FigureBase:
    """
    Draw a density plot description with matplotlib.

    Args:
        spec: The plot description.
        ax: Axes to draw on. A new figure is created when omitted.
        figsize: Size of the new figure.

    Returns:
        FigureBase: The figure holding the plot.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    ax.fill_between(spec.x, spec.density, color=CURVE_COLOR, alpha=spec.fill_alpha)
    ax.plot(spec.x, spec.density, color=CURVE_COLOR, linewidth=1.2)
    for line in spec.reference_lines:
        ax.axvline(
            line.x,
            color=line.color,
            linestyle="--" if line.dashed else "-",
            linewidth=1,
        )
        ax.annotate(
            line.label,
            xy=(line.x, line.label_y),
            xytext=(4, 0),
            textcoords="offset points",
            ha="left",
            color=line.color,
        )
    ax.set_xlim(0, spec.x_max)
    ax.set_ylim(bottom=0)
    ax.set_xlabel(spec.x_label)
    ax.set_ylabel(spec.y_label)
    ax.spines[["top", "right"]].set_visible(False)
    return fig


@beartype
def density_chart(spec: DensityPlotSpec, height: int = 400) -> alt.LayerChart:
    """Draw a density plot description as a layered altair chart."""
    curve = pd.DataFrame({"x": spec.x, "density": spec.density})
    x_scale = alt.Scale(domain=[0, spec.x_max], nice=False)

    area = (
        alt.Chart(curve)
        .mark_area(
            color=CURVE_COLOR,
            opacity=spec.fill_alpha,
            line={"color": CURVE_COLOR, "strokeWidth": 2},
        )
        .encode(
            x=alt.X("x:Q", title=spec.x_label, scale=x_scale),
            y=alt.Y("density:Q", title=spec.y_label),
        )
    )

    layers = [area]
    for line in spec.reference_lines:
        marker = pd.DataFrame(
            {"x": [line.x], "y": [line.label_y], "label": [line.label]}
        )
        rule = (
            alt.Chart(marker)
            .mark_rule(
                color=line.color,
                strokeWidth=2,
                strokeDash=[6, 4] if line.dashed else [],
            )
            .encode(x="x:Q")
        )
        text = (
            alt.Chart(marker)
            .mark_text(align="left", dx=5, color=line.color)
            .encode(x="x:Q", y="y:Q", text="label:N")
        )
        layers.extend([rule, text])

    return alt.layer(*layers).properties(height=height)
