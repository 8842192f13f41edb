"""Variable profiler."""

import pandas as pd
from attrs import Factory, define, field, validators
from upath import UPath

from varprofile.config import ProfilingConfig
from varprofile.correlation import PruningResult, correlation_table, prune_correlated
from varprofile.crosstab import CrossTabResult, cross_tabulate
from varprofile.dataset import get_column, to_frame
from varprofile.exceptions import InvalidParameterError
from varprofile.logger import LogGroup, get_logger
from varprofile.plotting import plot_boxplot, plot_cross_tab, plot_density_histogram, plot_ranking
from varprofile.profiling import data_status, freq
from varprofile.ranking import RankingResult, var_rank_info
from varprofile.types import PlotType

logger = get_logger()


@define
class VarProfiler:
    """Profile the variables of a dataset against one target.

    Results are computed on demand and not cached. Plots are written to
    ``output_dir`` when it is set.
    """

    data: pd.DataFrame = field(converter=to_frame, validator=[validators.instance_of(pd.DataFrame)])
    """Dataset, one row per observation."""

    target: str = field(validator=[validators.instance_of(str)])
    """Name of the target column."""

    config: ProfilingConfig = field(
        default=Factory(ProfilingConfig),
        validator=[validators.instance_of(ProfilingConfig)],
    )
    """Profiling configuration."""

    output_dir: UPath | None = field(
        default=None,
        converter=lambda x: None if x is None else UPath(x),
    )
    """Directory for rendered plots. Nothing is written if None."""

    def __attrs_post_init__(self):
        get_column(self.data, self.target)

    @property
    def feature_columns(self) -> list[str]:
        """All columns except the target."""
        return [c for c in self.data.columns if c != self.target]

    def _variables(self, variables) -> list[str]:
        if variables is None:
            return self.feature_columns
        if isinstance(variables, str):
            return [variables]
        return list(variables)

    def status(self) -> pd.DataFrame:
        """Data status of all columns."""
        logger.set_log_group(LogGroup.DATA_STATUS)
        logger.info(f"Data status: {len(self.data)} rows, {len(self.data.columns)} columns")
        return data_status(self.data)

    def freq(self, variable: str) -> pd.DataFrame:
        """Frequency table of one variable."""
        return freq(self.data, variable)

    def cross_plot(self, variables=None, auto_binning: bool | None = None, n_bins: int | None = None):
        """Cross-tabulate variables against the target and render the cross plots."""
        auto_binning = self.config.auto_binning if auto_binning is None else auto_binning
        n_bins = self.config.n_bins if n_bins is None else n_bins

        results: dict[str, CrossTabResult] = cross_tabulate(
            self.data,
            self._variables(variables),
            self.target,
            auto_binning=auto_binning,
            n_bins=n_bins,
            positive_class=self.config.positive_class,
        )
        if self.output_dir is not None:
            for result in results.values():
                plot_cross_tab(result, self.output_dir, self.config.plot_format)
        return results

    def plotar(self, variables=None, plot_type: str = "boxplot") -> dict:
        """Boxplots or density histograms of numeric variables per target value."""
        try:
            plot_type = PlotType(plot_type)
        except ValueError as e:
            raise InvalidParameterError(f"plot_type must be one of {[t.value for t in PlotType]}.") from e

        figures = {}
        for variable in self._variables(variables):
            if plot_type == PlotType.BOXPLOT:
                figures[variable] = plot_boxplot(
                    self.data, variable, self.target, self.output_dir, self.config.plot_format
                )
            else:
                figures[variable] = plot_density_histogram(
                    self.data,
                    variable,
                    self.target,
                    n_bins=self.config.histogram_bins,
                    output_dir=self.output_dir,
                    file_format=self.config.plot_format,
                )
        return figures

    def rank(self, exclude=None) -> list[RankingResult]:
        """Rank all variables by gain ratio."""
        return var_rank_info(self.data, self.target, exclude=exclude, n_bins=self.config.rank_n_bins)

    def plot_rank(self, exclude=None):
        """Rank all variables and render the ranking bar chart."""
        return plot_ranking(self.rank(exclude=exclude), self.output_dir, self.config.plot_format)

    def correlation(self) -> pd.DataFrame:
        """Correlation of the numeric variables with the target."""
        return correlation_table(
            self.data,
            self.target,
            method=self.config.correlation_method,
            positive_class=self.config.positive_class,
        )

    def prune(self) -> PruningResult:
        """Remove correlated variables, keeping the most informative of each group."""
        return prune_correlated(
            self.data,
            self.target,
            threshold=self.config.correlation_threshold,
            method=self.config.correlation_method,
            n_bins=self.config.rank_n_bins,
        )
