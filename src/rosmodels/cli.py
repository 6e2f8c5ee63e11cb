"""Command line interface for rosmodels."""

import subprocess
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import rich_click as click
from omegaconf import OmegaConf
from rich.console import Console
from rich.table import Table

from rosmodels import __version__
from rosmodels.data import load_ros_data, prepare_model_data
from rosmodels.explorer.controller import ExplorerController
from rosmodels.explorer.parameters import ExplorerConf, load_explorer_config
from rosmodels.explorer.render import plot_density
from rosmodels.logging import configure_logging
from rosmodels.models.inference import (
    InferenceConfig,
    run_mcmc_inference,
    summarize_posterior,
)
from rosmodels.models.regression import MODELS, get_model
from rosmodels.plots import plot_posterior_draws
from rosmodels.utils import print_config_tree

click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.USE_MARKDOWN = True

logger = configure_logging(__name__)

DEFAULT_CONFIG = load_explorer_config()

# src/rosmodels/cli.py -> repository root
APP_SCRIPT = Path(__file__).resolve().parents[2] / "app" / "app.py"


def _explorer(mean: float, shape: float, overrides) -> ExplorerController:
    config = load_explorer_config(overrides)
    controller = ExplorerController(config)
    controller.update(mean=mean, shape=shape)
    return controller


explorer_options = [
    click.option(
        "--mean",
        type=click.FloatRange(DEFAULT_CONFIG.mean.minimum, DEFAULT_CONFIG.mean.maximum),
        default=DEFAULT_CONFIG.mean.default,
        show_default=True,
        help="Mean ROS value.",
    ),
    click.option(
        "--shape",
        type=click.FloatRange(
            DEFAULT_CONFIG.shape.minimum, DEFAULT_CONFIG.shape.maximum
        ),
        default=DEFAULT_CONFIG.shape.default,
        show_default=True,
        help="Gamma shape value.",
    ),
    click.option(
        "--set",
        "overrides",
        multiple=True,
        help="Explorer configuration override, e.g. `threshold=12`.",
    ),
]


def add_explorer_options(command):
    for option in reversed(explorer_options):
        command = option(command)
    return command


@click.group()
@click.version_option(version=__version__)
def main():
    """
    Bayesian models of fire rate of spread (ROS).

    Explore Gamma-distributed ROS values against the maximum mean ROS and fit
    regression models of ROS on wind speed and relative humidity.
    """


@main.command()
@add_explorer_options
def stats(mean, shape, overrides):
    """Print the distribution statistics for a mean and shape."""
    click.echo(_explorer(mean, shape, overrides).rendering.text)


@main.command()
@add_explorer_options
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("gamma_density.png"),
    show_default=True,
    help="Output image path.",
)
def plot(mean, shape, overrides, output):
    """Save the density plot for a mean and shape."""
    rendering = _explorer(mean, shape, overrides).rendering
    fig = plot_density(rendering.plot)
    fig.savefig(output, bbox_inches="tight", dpi=150)
    plt.close(fig)
    logger.info(f"saved density plot to {output}")


@main.command()
def config():
    """Show the default explorer configuration."""
    print_config_tree(
        OmegaConf.to_container(OmegaConf.structured(ExplorerConf)),
        name="explorer",
    )


@main.command()
@click.argument("data_path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--model",
    type=click.Choice(sorted(MODELS)),
    default="regression",
    show_default=True,
)
@click.option(
    "--group-column",
    default=None,
    help="Column identifying the fire; required by the hierarchical model.",
)
@click.option("--num-warmup", type=click.IntRange(min=1), default=500, show_default=True)
@click.option("--num-samples", type=click.IntRange(min=1), default=1000, show_default=True)
@click.option("--num-chains", type=click.IntRange(min=1), default=1, show_default=True)
@click.option("--seed", type=int, default=0, show_default=True)
@click.option(
    "--plot-output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Save histograms of the posterior draws to this path.",
)
def fit(
    data_path,
    model,
    group_column,
    num_warmup,
    num_samples,
    num_chains,
    seed,
    plot_output,
):
    """Fit a ROS model to observations in DATA_PATH (CSV)."""
    if model == "hierarchical" and group_column is None:
        raise click.UsageError("--group-column is required for the hierarchical model")

    frame = load_ros_data(data_path).unwrap()
    data = prepare_model_data(frame, group_column=group_column)
    _, draws = run_mcmc_inference(
        get_model(model),
        data,
        InferenceConfig(
            num_warmup=num_warmup,
            num_samples=num_samples,
            num_chains=num_chains,
            seed=seed,
        ),
    )

    summary = summarize_posterior(draws)
    table = Table(title=f"Posterior summary ({model})")
    table.add_column("parameter", style="cyan")
    for column in summary.columns:
        table.add_column(column, justify="right")
    for parameter, row in summary.iterrows():
        table.add_row(parameter, *[f"{value:.3f}" for value in row])
    Console().print(table)

    if plot_output is not None:
        fig = plot_posterior_draws(draws)
        fig.savefig(plot_output, bbox_inches="tight", dpi=300)
        plt.close(fig)
        logger.info(f"saved posterior draws plot to {plot_output}")


@main.command()
@click.option(
    "--script",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=APP_SCRIPT,
    show_default=True,
    help=(
        "Streamlit script of the explorer. The default is the `app/app.py` "
        "of the source checkout; pass the path explicitly when rosmodels is "
        "installed from a wheel."
    ),
)
def app(script):
    """Launch the interactive Gamma explorer."""
    logger.info(f"starting streamlit with {script}")
    subprocess.run(
        [sys.executable, "-m", "streamlit", "run", str(script)], check=True
    )


if __name__ == "__main__":
    main()
