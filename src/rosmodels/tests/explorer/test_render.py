"""Tests for `rosmodels.explorer.render` module."""

import altair as alt
import matplotlib.pyplot as plt
import numpy as np
import pytest

from rosmodels.explorer.gamma import derive_quantities
from rosmodels.explorer.render import (
    DensityPlotSpec,
    build_plot_spec,
    density_chart,
    format_rounded,
    format_statistics,
    plot_density,
)


@pytest.fixture
def exponential_summary():
    return derive_quantities(5.0, 1.0, 15.0)


@pytest.fixture
def concentrated_summary():
    return derive_quantities(12.34, 20.0, 15.0)


@pytest.mark.parametrize(
    "value, digits, expected",
    [
        (5.0, 3, "5"),
        (0.0, 3, "0"),
        (14.97866136, 3, "14.979"),
        (0.2564664719, 3, "0.256"),
        (12.346, 2, "12.35"),
        (1.1, 3, "1.1"),
        (100.0, 3, "100"),
        (-0.0004, 3, "0"),
        (5, 3, "5"),
    ],
)
def test_format_rounded(value, digits, expected):
    assert format_rounded(value, digits) == expected


class TestFormatStatistics:
    def test_exponential_text(self, exponential_summary):
        assert format_statistics(exponential_summary) == (
            "Mean: 5\n"
            "Mode: 0\n"
            "Central 90% interval: [0.256, 14.979]\n"
            "Probability of exceeding upper ROS value (15.0): 4.979%"
        )

    def test_line_order(self, concentrated_summary):
        lines = format_statistics(concentrated_summary).split("\n")
        assert len(lines) == 4
        assert lines[0] == "Mean: 12.34"
        assert lines[1].startswith("Mode: ")
        assert lines[2].startswith("Central 90% interval: [")
        assert lines[3].startswith(
            "Probability of exceeding upper ROS value (15.0): "
        )
        assert lines[3].endswith("%")

    def test_mode_rounded(self, concentrated_summary):
        mode = concentrated_summary.mode
        lines = format_statistics(concentrated_summary).split("\n")
        assert float(lines[1].removeprefix("Mode: ")) == pytest.approx(mode, abs=5e-4)

    def test_threshold_label_follows_threshold(self):
        summary = derive_quantities(5.0, 1.0, 12.0)
        assert "(12.0): " in format_statistics(summary)

    def test_text_is_idempotent(self):
        assert format_statistics(derive_quantities(3.3, 7.7, 15.0)) == format_statistics(
            derive_quantities(3.3, 7.7, 15.0)
        )


class TestBuildPlotSpec:
    def test_reference_lines(self, concentrated_summary):
        spec = build_plot_spec(concentrated_summary)
        threshold_line, mean_line = spec.reference_lines
        peak = concentrated_summary.density.max()

        assert threshold_line.x == 15.0
        assert threshold_line.label == "Max mean ROS"
        assert not threshold_line.dashed
        assert threshold_line.label_y == pytest.approx(0.8 * peak)

        assert mean_line.x == 12.34
        assert mean_line.label == "Mean = 12.34"
        assert mean_line.dashed
        assert mean_line.label_y == pytest.approx(0.9 * peak)

    def test_mean_label_rounded_to_two_decimals(self):
        spec = build_plot_spec(derive_quantities(7.0, 2.0, 15.0))
        assert spec.reference_lines[1].label == "Mean = 7"

    def test_curve_and_axes(self, exponential_summary):
        spec = build_plot_spec(exponential_summary)
        assert isinstance(spec, DensityPlotSpec)
        np.testing.assert_array_equal(spec.x, exponential_summary.x)
        np.testing.assert_array_equal(spec.density, exponential_summary.density)
        assert spec.x_max == exponential_summary.x_max
        assert (spec.x_label, spec.y_label) == ("Value", "Density")


class TestBackends:
    def test_plot_density(self, exponential_summary):
        spec = build_plot_spec(exponential_summary)
        fig = plot_density(spec)
        ax = fig.axes[0]
        assert ax.get_xlabel() == "Value"
        assert ax.get_ylabel() == "Density"
        assert ax.get_xlim() == pytest.approx((0, spec.x_max))
        texts = [text.get_text() for text in ax.texts]
        assert texts == ["Max mean ROS", "Mean = 5"]
        plt.close(fig)

    def test_plot_density_on_existing_axes(self, exponential_summary):
        fig, ax = plt.subplots()
        assert plot_density(build_plot_spec(exponential_summary), ax=ax) is fig
        plt.close(fig)

    def test_density_chart(self, exponential_summary):
        chart = density_chart(build_plot_spec(exponential_summary))
        assert isinstance(chart, alt.LayerChart)
        # curve plus a rule and a label per reference line
        assert len(chart.layer) == 5
        chart_dict = chart.to_dict()
        assert chart_dict["height"] == 400
