from os import PathLike
from typing import Dict, List, Optional

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
from beartype import beartype
from matplotlib.figure import FigureBase

from rosmodels.logging import configure_logging

__all__ = ["plot_posterior_draws"]

logger = configure_logging(__name__)


@beartype
def tex_or_plain(
    tex_str: str,
    plain_str: str,
) -> str:
    """
    Returns the TeX-formatted string if text.usetex is True,
    otherwise returns the plain string.
    """
    return tex_str if matplotlib.rcParams["text.usetex"] else plain_str


DEFAULT_PARAMETER_LABEL_MAPPINGS = {
    "intercept": tex_or_plain(r"$\beta_0$", "β₀"),
    "intercept_mean": tex_or_plain(r"$\mu_{\beta_0}$", "μ(β₀)"),
    "intercept_scale": tex_or_plain(r"$\sigma_{\beta_0}$", "σ(β₀)"),
    "wind_effect": tex_or_plain(r"$\beta_{wind}$", "β wind"),
    "rh_effect": tex_or_plain(r"$\beta_{RH}$", "β RH"),
    "shape": tex_or_plain(r"$\kappa$", "shape"),
}


@beartype
def plot_posterior_draws(
    posterior_samples: Dict[str, np.ndarray],
    parameter_names: List[str]
    | Dict[str, str] = DEFAULT_PARAMETER_LABEL_MAPPINGS,
    save_plot: bool = False,
    posterior_plot: PathLike | str = "posterior_draws.pdf",
    default_fontsize: int = 9,
    bins: int = 40,
) -> FigureBase:
    """
    Plot a histogram of the posterior draws of each scalar parameter.

    Each panel marks the posterior mean with a solid line and the central
    90% interval with dashed lines.

    Args:
        posterior_samples: Posterior draws keyed by site name.
        parameter_names: Parameters to plot, optionally mapped to axis labels.
        save_plot: Whether to save the figure to ``posterior_plot``.
        posterior_plot: Output path; a ``.png`` copy is written alongside.
        default_fontsize: Font size of the axis labels.
        bins: Number of histogram bins.

    Returns:
        FigureBase: The figure.
    """
    if isinstance(parameter_names, list):
        parameter_names = {param: param for param in parameter_names}

    parameters = [
        parameter
        for parameter in parameter_names.keys()
        if parameter in posterior_samples.keys()
        and np.asarray(posterior_samples[parameter]).ndim == 1
    ]
    if not parameters:
        raise ValueError(
            "none of the requested parameters are scalar sites in the "
            f"posterior samples: {list(parameter_names)}"
        )

    fig, axes = plt.subplots(len(parameters), 1, squeeze=False)
    fig.set_size_inches(6, 2 * len(parameters))

    dark_orange = "#ff6a14"
    light_orange = "#ffb343"
    for ax, parameter in zip(axes[:, 0], parameters):
        values = np.asarray(posterior_samples[parameter], dtype=float)
        sns.histplot(
            values,
            bins=bins,
            color=light_orange,
            edgecolor=None,
            stat="density",
            ax=ax,
        )
        lower, upper = np.quantile(values, [0.05, 0.95])
        ax.axvline(values.mean(), color=dark_orange, linewidth=1.5)
        for bound in (lower, upper):
            ax.axvline(bound, color=dark_orange, linestyle="--", linewidth=1)
        ax.set_xlabel(parameter_names[parameter], fontsize=default_fontsize)
        ax.set_ylabel("")
        ax.tick_params(axis="both", which="major", labelsize=default_fontsize - 2)
        logger.debug(
            f"{parameter}: mean {values.mean():.3f}, "
            f"90% interval [{lower:.3f}, {upper:.3f}]"
        )

    fig.tight_layout()
    if save_plot:
        for ext in ["", ".png"]:
            fig.savefig(
                f"{posterior_plot}{ext}",
                facecolor=fig.get_facecolor(),
                bbox_inches="tight",
                edgecolor="none",
                dpi=300,
            )

    return fig
