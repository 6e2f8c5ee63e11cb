import altair as alt
import pandas as pd
import streamlit as st
from utils.altair_theme import ros_theme

from rosmodels.explorer import (
    ExplorerController,
    density_chart,
    load_explorer_config,
    simulate_ros,
)
from rosmodels.logging import configure_logging


logger = configure_logging("rosmodels.app")

# Simple app to explore the distribution of ROS values drawn from a Gamma
# distribution with specified mean and shape parameters, in particular how
# likely it is to draw ROS values that exceed the maximum value for mean ROS
# used in the published JAGS model.

st.set_page_config(
    page_title="Simulating ROS values from a Gamma distribution",
    layout="wide",
    initial_sidebar_state="expanded",
)

alt.theme.register("ros_theme", enable=True)(ros_theme)

# one controller per browser session
if "controller" not in st.session_state:
    st.session_state.controller = ExplorerController(load_explorer_config())
controller: ExplorerController = st.session_state.controller
config = controller.store.config

st.title("Simulating ROS values from a Gamma distribution")

with st.sidebar:
    mean = st.slider(
        config.mean.label,
        min_value=config.mean.minimum,
        max_value=config.mean.maximum,
        value=controller.store.mean,
        step=config.mean.step,
    )
    shape = st.slider(
        config.shape.label,
        min_value=config.shape.minimum,
        max_value=config.shape.maximum,
        value=controller.store.shape,
        step=config.shape.step,
    )
    show_sample = st.checkbox("Overlay simulated ROS values", value=False)
    sample_size = st.number_input(
        "Number of simulated values",
        min_value=100,
        max_value=100_000,
        value=1000,
        step=100,
        disabled=not show_sample,
    )

try:
    controller.update(mean=config.mean.snap(mean), shape=config.shape.snap(shape))
except ValueError as e:
    st.error(f"Could not update the distribution: {e}")

rendering = controller.rendering

with st.container(border=True):
    st.subheader("Distribution of ROS values simulated from Gamma distribution")
    chart = density_chart(rendering.plot)
    if show_sample:
        sample = pd.DataFrame(
            {
                "x": simulate_ros(
                    controller.store.mean,
                    controller.store.shape,
                    num_samples=int(sample_size),
                )
            }
        )
        histogram = (
            alt.Chart(sample[sample["x"] <= rendering.plot.x_max])
            .transform_bin("bin", field="x", bin=alt.Bin(maxbins=60))
            .transform_aggregate(count="count()", groupby=["bin", "bin_end"])
            .transform_calculate(
                density=f"datum.count / ({len(sample)} * (datum.bin_end - datum.bin))"
            )
            .mark_bar(color="gray", opacity=0.3)
            .encode(x="bin:Q", x2="bin_end:Q", y="density:Q")
        )
        chart = alt.layer(histogram, chart)
    st.altair_chart(chart, use_container_width=True)

with st.container(border=True):
    st.subheader("Distribution Statistics")
    st.code(rendering.text, language=None)
