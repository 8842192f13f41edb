"""Plots of variables against a target.

Figures are returned to the caller. When an output directory is given the
figure is written there (the directory is created if needed) and closed.
"""

import re

import matplotlib.pyplot as plt
import numpy as np
from upath import UPath

from varprofile.config import PLOT_FORMATS
from varprofile.crosstab import CrossTabResult
from varprofile.dataset import get_column, sorted_values, to_frame, variable_type
from varprofile.exceptions import InsufficientDataError, InvalidParameterError, TypeMismatchError
from varprofile.logger import LogGroup, get_logger
from varprofile.ranking import RankingResult, ranking_frame
from varprofile.types import VariableType

logger = get_logger()


def _file_stem(name) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", str(name)).strip("_") or "variable"


def _save_figure(fig, output_dir, stem: str, file_format: str) -> UPath:
    """Write the figure into the output directory and close it."""
    if file_format not in PLOT_FORMATS:
        plt.close(fig)
        raise InvalidParameterError(f"file_format must be one of {PLOT_FORMATS}, got {file_format!r}.")

    output_dir = UPath(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    save_path = output_dir / f"{stem}.{file_format}"
    with save_path.open("wb") as file:
        fig.savefig(file, format=file_format, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"Plot saved: {save_path}")
    return save_path


def _finish(fig, output_dir, stem: str, file_format: str):
    if output_dir is not None:
        _save_figure(fig, output_dir, stem, file_format)
    return fig


def plot_cross_tab(result: CrossTabResult, output_dir=None, file_format: str = "pdf"):
    """Paired plot of target percentages and counts per category."""
    logger.set_log_group(LogGroup.PLOTTING, result.variable)
    table = result.to_frame()
    categories = [str(c) for c in table.index]
    x = np.arange(len(categories))
    totals = table["count"].to_numpy(dtype=float)

    fig, (ax_pct, ax_cnt) = plt.subplots(1, 2, figsize=(11.69, 4.5))

    # (A) stacked percentages, positive class labelled
    bottom = np.zeros(len(x))
    for value in result.target_values:
        share = result.target_counts[value].to_numpy(dtype=float) / totals * 100
        bars = ax_pct.bar(x, share, bottom=bottom, label=str(value))
        if value == result.positive_class:
            ax_pct.bar_label(bars, labels=[f"{s:.1f}" for s in share], label_type="center", fontsize=8)
        bottom += share
    ax_pct.set_ylabel("Percentage (%)")
    ax_pct.set_ylim(0, 100)
    ax_pct.set_title(f"{result.target} (%)")

    # (B) grouped counts
    width = 0.8 / len(result.target_values)
    for k, value in enumerate(result.target_values):
        ax_cnt.bar(x + (k - (len(result.target_values) - 1) / 2) * width, result.target_counts[value], width)
    ax_cnt.set_ylabel("Count")
    ax_cnt.set_title(f"{result.target} (count)")

    for ax in (ax_pct, ax_cnt):
        ax.set_xticks(x, categories, rotation=45, ha="right")
        ax.set_xlabel(result.variable)
    fig.legend(*ax_pct.get_legend_handles_labels(), title=result.target, loc="upper right")
    fig.suptitle(result.variable)
    fig.tight_layout()

    return _finish(fig, output_dir, f"{_file_stem(result.variable)}_cross_plot", file_format)


def _samples_by_target(data, variable: str, target: str):
    frame = to_frame(data)
    series = get_column(frame, variable)
    target_series = get_column(frame, target)
    if variable_type(series) != VariableType.NUMERIC:
        raise TypeMismatchError(f"Variable '{variable}' must be numeric for this plot.")
    values = series.astype(float)
    finite = values[np.isfinite(values)]
    if finite.empty:
        raise InsufficientDataError(f"Variable '{variable}' has no finite values.")

    groups = sorted_values(target_series[finite.index].dropna().unique())
    samples = [finite[target_series[finite.index] == group].to_numpy() for group in groups]
    return groups, samples


def plot_boxplot(data, variable: str, target: str, output_dir=None, file_format: str = "pdf"):
    """Boxplot of a numeric variable per target value."""
    logger.set_log_group(LogGroup.PLOTTING, variable)
    groups, samples = _samples_by_target(data, variable, target)

    fig, ax = plt.subplots(figsize=(6, 4.5))
    ax.boxplot(samples)
    ax.set_xticks(np.arange(1, len(groups) + 1), [str(g) for g in groups])
    ax.set_xlabel(target)
    ax.set_ylabel(variable)
    ax.grid(True, axis="y")
    fig.tight_layout()

    return _finish(fig, output_dir, f"{_file_stem(variable)}_boxplot", file_format)


def plot_density_histogram(
    data, variable: str, target: str, n_bins: int = 20, output_dir=None, file_format: str = "pdf"
):
    """Overlaid density histograms of a numeric variable per target value."""
    if n_bins < 1:
        raise InvalidParameterError(f"n_bins must be positive, got {n_bins}.")
    logger.set_log_group(LogGroup.PLOTTING, variable)
    groups, samples = _samples_by_target(data, variable, target)

    edges = np.histogram_bin_edges(np.concatenate(samples), bins=n_bins)
    fig, ax = plt.subplots(figsize=(6, 4.5))
    for group, sample in zip(groups, samples):
        if sample.size:
            ax.hist(sample, bins=edges, density=True, alpha=0.5, label=str(group))
    ax.set_xlabel(variable)
    ax.set_ylabel("Density")
    ax.legend(title=target)
    fig.tight_layout()

    return _finish(fig, output_dir, f"{_file_stem(variable)}_histdens", file_format)


def plot_ranking(results: list[RankingResult], output_dir=None, file_format: str = "pdf"):
    """Horizontal bar chart of gain ratios, best variable on top."""
    if not results:
        raise InsufficientDataError("No ranking results to plot.")
    logger.set_log_group(LogGroup.PLOTTING)
    table = ranking_frame(results).iloc[::-1]

    fig, ax = plt.subplots(figsize=(6, max(2.5, 0.35 * len(table) + 1)))
    ax.barh(table["var"].astype(str), table["gr"], color="royalblue")
    ax.set_xlabel("Gain ratio")
    ax.set_xlim(0, 1)
    ax.set_title("Variable ranking")
    ax.grid(True, axis="x")
    fig.tight_layout()

    return _finish(fig, output_dir, "variable_ranking", file_format)
