"""Profiling configuration."""

from attrs import define, field, validators

CORRELATION_METHODS = ["pearson", "spearman", "kendall"]
PLOT_FORMATS = ["pdf", "png"]


def _is_bin_count(instance, attribute, value):
    """Bin counts must be integers of at least two, booleans excluded."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"'{attribute.name}' must be an int, got {value!r}")
    if value < 2:
        raise ValueError(f"'{attribute.name}' must be >= 2, got {value}")


@define(frozen=True)
class ProfilingConfig:
    """Configuration for variable profiling.

    Attributes:
        n_bins: Number of equal frequency bins used when numeric variables are
            auto-binned for cross plots (must be >= 2). Default: 10.
        auto_binning: Whether numeric variables are binned automatically before
            cross-tabulation. Default: True.
        positive_class: Target value whose rate is reported. None selects the
            less frequent target value. Default: None.
        rank_n_bins: Number of bins for discretizing numeric variables before
            ranking. None uses the cube root of the row count. Default: None.
        correlation_method: Correlation coefficient used for correlation tables
            and correlation groups. Default: "spearman".
        correlation_threshold: Absolute correlation (range: 0.0-1.0) above which
            two variables are grouped as redundant. Default: 0.8.
        histogram_bins: Number of histogram bins in density plots (must be > 0).
            Default: 20.
        plot_format: File format of rendered plots, "pdf" or "png". Default: "pdf".
    """

    n_bins: int = field(default=10, validator=[_is_bin_count])
    """Number of bins for cross plots (default: 10)."""

    auto_binning: bool = field(default=True, validator=[validators.instance_of(bool)])
    """Automatic equal frequency binning of numeric variables (default: True)."""

    positive_class: str | int | None = field(
        default=None,
        validator=validators.optional(validators.instance_of((str, int))),
    )
    """Positive target value (default: less frequent value)."""

    rank_n_bins: int | None = field(default=None, validator=validators.optional(_is_bin_count))
    """Number of bins used before ranking (default: cube root rule)."""

    correlation_method: str = field(default="spearman", validator=[validators.in_(CORRELATION_METHODS)])
    """Correlation method (default: spearman)."""

    correlation_threshold: float = field(
        default=0.8,
        validator=[validators.instance_of(float), validators.ge(0.0), validators.le(1.0)],
    )
    """Threshold for correlation groups (default: 0.8)."""

    histogram_bins: int = field(default=20, validator=[validators.instance_of(int), validators.gt(0)])
    """Number of histogram bins (default: 20)."""

    plot_format: str = field(default="pdf", validator=[validators.in_(PLOT_FORMATS)])
    """Plot file format (default: pdf)."""
