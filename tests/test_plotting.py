"""Test plot rendering."""

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest
from matplotlib.figure import Figure

from varprofile.crosstab import cross_tabulate, cross_tabulate_joint
from varprofile.exceptions import InsufficientDataError, InvalidParameterError, TypeMismatchError
from varprofile.plotting import plot_boxplot, plot_cross_tab, plot_density_histogram, plot_ranking
from varprofile.ranking import var_rank_info


@pytest.fixture(autouse=True)
def close_figures():
    """Close all figures after each test."""
    yield
    plt.close("all")


class TestPlotCrossTab:
    """Test suite for cross plots."""

    def test_figure_without_output(self, heart_data):
        """Test that a figure is returned and nothing is written."""
        result = cross_tabulate(heart_data, "gender", "has_heart_disease")

        fig = plot_cross_tab(result)

        assert isinstance(fig, Figure)
        assert len(fig.axes) == 2

    def test_writes_pdf(self, heart_data, tmp_path):
        """Test that the output directory is created and the plot is written."""
        result = cross_tabulate(heart_data, "age", "has_heart_disease")
        output_dir = tmp_path / "plots" / "cross"

        plot_cross_tab(result, output_dir)

        assert (output_dir / "age_cross_plot.pdf").stat().st_size > 0

    def test_writes_png(self, toy_rows, tmp_path):
        """Test the png format and file names of joint variables."""
        result = cross_tabulate_joint(toy_rows, ["var_1", "var_2"], "target")

        plot_cross_tab(result, tmp_path, file_format="png")

        assert (tmp_path / "var_1_var_2_cross_plot.png").exists()

    def test_invalid_format(self, toy_rows, tmp_path):
        """Test that unknown file formats are rejected."""
        result = cross_tabulate(toy_rows, "var_1", "target")

        with pytest.raises(InvalidParameterError):
            plot_cross_tab(result, tmp_path, file_format="svg")


class TestTargetProfilePlots:
    """Test suite for boxplots and density histograms."""

    def test_boxplot(self, heart_data, tmp_path):
        """Test a boxplot per target value."""
        fig = plot_boxplot(heart_data, "max_heart_rate", "has_heart_disease", tmp_path)

        assert isinstance(fig, Figure)
        assert (tmp_path / "max_heart_rate_boxplot.pdf").exists()

    def test_density_histogram(self, heart_data, tmp_path):
        """Test overlaid density histograms."""
        plot_density_histogram(heart_data, "age", "has_heart_disease", n_bins=10, output_dir=tmp_path)

        assert (tmp_path / "age_histdens.pdf").exists()

    def test_non_numeric_variable(self, heart_data):
        """Test that categorical variables cannot be plotted as distributions."""
        with pytest.raises(TypeMismatchError):
            plot_boxplot(heart_data, "gender", "has_heart_disease")
        with pytest.raises(TypeMismatchError):
            plot_density_histogram(heart_data, "gender", "has_heart_disease")

    def test_invalid_histogram_bins(self, heart_data):
        """Test that histograms need at least one bin."""
        with pytest.raises(InvalidParameterError):
            plot_density_histogram(heart_data, "age", "has_heart_disease", n_bins=0)

    def test_infinite_values_are_skipped(self, tmp_path):
        """Test that infinite values are left out of distribution plots."""
        df = pd.DataFrame(
            {
                "x": [1.0, 2.0, np.inf, 3.0, 4.0, -np.inf, 5.0, np.nan],
                "t": ["yes", "no", "yes", "no", "yes", "no", "yes", "no"],
            }
        )

        plot_density_histogram(df, "x", "t", n_bins=5, output_dir=tmp_path)
        plot_boxplot(df, "x", "t", output_dir=tmp_path)

        assert (tmp_path / "x_histdens.pdf").exists()
        assert (tmp_path / "x_boxplot.pdf").exists()

    def test_no_finite_values(self):
        """Test that a variable without finite values cannot be plotted."""
        df = pd.DataFrame({"x": [np.inf, np.nan, -np.inf], "t": [0, 1, 0]})

        with pytest.raises(InsufficientDataError):
            plot_density_histogram(df, "x", "t")


class TestPlotRanking:
    """Test suite for ranking plots."""

    def test_writes_ranking(self, heart_data, tmp_path):
        """Test the ranking bar chart."""
        results = var_rank_info(heart_data, "has_heart_disease")

        fig = plot_ranking(results, tmp_path)

        assert isinstance(fig, Figure)
        assert (tmp_path / "variable_ranking.pdf").exists()

    def test_empty_results(self):
        """Test that an empty ranking cannot be plotted."""
        with pytest.raises(InsufficientDataError):
            plot_ranking([])
