"""Equal frequency binning of numeric variables."""

import math
import numbers

import numpy as np
import pandas as pd
from attrs import define, field

from varprofile.dataset import MISSING_LABEL
from varprofile.exceptions import InsufficientDataError, InvalidParameterError, TypeMismatchError
from varprofile.logger import LogGroup, get_logger

logger = get_logger()


@define(frozen=True)
class BinnedVariable:
    """Numeric variable mapped to ordered, contiguous bins.

    Bin ``k`` covers the half-open interval ``(edges[k], edges[k + 1]]``; the first
    lower and the last upper edge are infinite. Missing values map to the
    ``MISSING_LABEL`` category, which is ordered after all bins.
    """

    name: str | None
    """Variable name, if known."""

    boundaries: tuple[float, ...]
    """Ascending interior bin boundaries."""

    labels: tuple[str, ...]
    """Bin labels in ascending order, without the missing label."""

    n_bins_requested: int
    """Number of bins requested by the caller."""

    values: pd.Categorical = field(eq=False, repr=False)
    """Ordered categorical aligned with the input values."""

    @property
    def n_bins(self) -> int:
        """Number of effective bins."""
        return len(self.boundaries) + 1

    @property
    def edges(self) -> tuple[float, ...]:
        """All bin edges including the infinite outer ones."""
        return (-math.inf, *self.boundaries, math.inf)

    @property
    def categories(self) -> list[str]:
        """Categories in order, including the missing label when present."""
        return list(self.values.categories)

    def counts(self) -> pd.Series:
        """Number of rows per category, in category order."""
        counts = pd.Series(self.values).value_counts(sort=False)
        return counts.reindex(self.categories, fill_value=0)


def _format_bound(value: float, precision: int) -> str:
    if value == -math.inf:
        return "-Inf"
    if value == math.inf:
        return "Inf"
    return f"{value:.{precision}g}"


def interval_labels(boundaries) -> tuple[str, ...]:
    """Create ``(lower, upper]`` labels, unique at the lowest sufficient precision."""
    edges = [-math.inf, *boundaries, math.inf]
    for precision in range(6, 18):
        bounds = [_format_bound(edge, precision) for edge in edges]
        if len(set(bounds)) == len(bounds):
            break
    return tuple(f"({lower}, {upper}]" for lower, upper in zip(bounds[:-1], bounds[1:]))


def _as_numeric(values) -> np.ndarray:
    """Convert values to a float array, missing entries become NaN."""
    if isinstance(values, pd.Series):
        series = values
    elif isinstance(values, np.ndarray):
        series = pd.Series(values)
    else:
        series = pd.Series(list(values), dtype=object)

    if pd.api.types.is_bool_dtype(series) or isinstance(series.dtype, pd.CategoricalDtype):
        raise TypeMismatchError(f"Equal frequency binning requires numeric values, got dtype {series.dtype}.")

    if not pd.api.types.is_numeric_dtype(series):
        present = series.dropna()
        invalid = [v for v in present if isinstance(v, bool) or not isinstance(v, numbers.Real)]
        if invalid:
            raise TypeMismatchError(f"Equal frequency binning requires numeric values, got {invalid[:3]}.")

    return series.astype(float).to_numpy()


def validate_n_bins(n_bins) -> int:
    """Check that a bin count is an integer of at least two."""
    if isinstance(n_bins, bool) or not isinstance(n_bins, numbers.Integral) or n_bins < 2:
        raise InvalidParameterError(f"n_bins must be an integer >= 2, got {n_bins!r}.")
    return int(n_bins)


def equal_freq(values, n_bins: int, name: str | None = None) -> BinnedVariable:
    """Split numeric values into bins holding roughly the same number of rows.

    Boundaries are taken from the sorted non-missing values at the quantile
    positions ``i / n_bins`` for ``i = 1 .. n_bins - 1``. Boundaries that coincide,
    or that equal the maximum, are dropped, so heavy ties or a low cardinality
    yield fewer bins than requested.

    Args:
        values: Numeric values, missing entries may be None or NaN.
        n_bins: Requested number of bins, at least 2.
        name: Optional variable name; defaults to the name of a passed Series.

    Returns:
        The binned variable aligned with ``values``.

    Raises:
        InvalidParameterError: If ``n_bins`` is not an integer >= 2.
        TypeMismatchError: If the values are not numeric.
        InsufficientDataError: If there are no non-missing values.
    """
    n_bins = validate_n_bins(n_bins)

    if name is None and isinstance(values, pd.Series):
        name = values.name
    logger.set_log_group(LogGroup.BINNING, name)

    numeric = _as_numeric(values)
    missing = np.isnan(numeric)
    present = np.sort(numeric[~missing])
    n_present = present.size
    if n_present == 0:
        raise InsufficientDataError(f"Variable '{name}' has no non-missing values to bin.")

    # cut position i is the number of values up to and including boundary i
    positions = np.floor(np.arange(1, n_bins) * n_present / n_bins + 0.5).astype(int)
    positions = np.clip(positions, 1, n_present)
    candidates = np.unique(present[positions - 1])
    boundaries = candidates[(candidates < present[-1]) & (candidates > -math.inf)]

    labels = interval_labels(boundaries)
    categories = list(labels)
    codes = np.full(numeric.size, len(labels), dtype=int)
    codes[~missing] = np.searchsorted(boundaries, numeric[~missing], side="left")
    if missing.any():
        categories.append(MISSING_LABEL)

    binned = BinnedVariable(
        name=name,
        boundaries=tuple(float(b) for b in boundaries),
        labels=labels,
        n_bins_requested=n_bins,
        values=pd.Categorical.from_codes(codes, categories=categories, ordered=True),
    )

    if binned.n_bins < n_bins:
        logger.warning(
            f"Variable '{name}': {n_bins} bins requested, {binned.n_bins} effective bins "
            "due to ties or low cardinality."
        )
    logger.debug(f"Variable '{name}' binned into {binned.n_bins} bins, {int(missing.sum())} missing values.")

    return binned
