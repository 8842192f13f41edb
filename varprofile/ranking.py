"""Information theory ranking of variables.

All entropies are Shannon entropies over observed category frequencies, in
bits. Numeric variables are discretized with equal frequency bins first.
Missing values form a category of their own.

    en = H(X)
    mi = H(T) + H(X) - H(X, T)
    ig = H(T) - H(T | X)
    gr = ig / en  (0 if en == 0)
"""

import numpy as np
import pandas as pd
from attrs import define

from varprofile.binning import equal_freq, validate_n_bins
from varprofile.dataset import MISSING_LABEL, get_column, to_frame, variable_type
from varprofile.exceptions import InsufficientDataError, TypeMismatchError
from varprofile.logger import LogGroup, get_logger
from varprofile.types import VariableType

logger = get_logger()

RANKING_COLUMNS = ["var", "en", "mi", "ig", "gr"]


@define(frozen=True)
class RankingResult:
    """Information theory metrics of one variable against the target."""

    var: str
    """Variable name."""

    en: float
    """Entropy of the variable."""

    mi: float
    """Mutual information between variable and target."""

    ig: float
    """Information gain."""

    gr: float
    """Gain ratio."""


def _as_labels(values) -> np.ndarray:
    series = values if isinstance(values, pd.Series) else pd.Series(list(values), dtype=object)
    return series.astype(object).where(series.notna(), MISSING_LABEL).to_numpy(dtype=object)


def _entropy_from_counts(counts) -> float:
    counts = np.asarray(counts, dtype=float)
    counts = counts[counts > 0]
    if counts.size == 0:
        return 0.0
    probabilities = counts / counts.sum()
    return float(max(-(probabilities * np.log2(probabilities)).sum(), 0.0))


def _contingency(a, b) -> pd.DataFrame:
    frame = pd.DataFrame({"a": _as_labels(a), "b": _as_labels(b)})
    return frame.groupby(["a", "b"], sort=False).size().unstack(fill_value=0)


def entropy(values) -> float:
    """Shannon entropy of a discrete variable in bits."""
    labels = _as_labels(values)
    return _entropy_from_counts(pd.Series(labels).value_counts().to_numpy())


def joint_entropy(a, b) -> float:
    """Entropy of the joint distribution of two discrete variables in bits."""
    return _entropy_from_counts(_contingency(a, b).to_numpy().ravel())


def conditional_entropy(target, given) -> float:
    """Entropy of ``target`` remaining once ``given`` is known, in bits."""
    table = _contingency(given, target).to_numpy()
    n_rows = table.sum()
    if n_rows == 0:
        return 0.0
    return float(sum(row.sum() / n_rows * _entropy_from_counts(row) for row in table))


def default_n_bins(n_rows: int) -> int:
    """Cube root rule for the number of bins used before ranking."""
    return max(2, round(n_rows ** (1 / 3)))


def _discrete_labels(series: pd.Series, name, n_bins: int, discretize: bool) -> np.ndarray:
    if variable_type(series) != VariableType.NUMERIC or series.notna().sum() == 0:
        return _as_labels(series)
    if not discretize:
        raise TypeMismatchError(f"Variable '{name}' is continuous; enable discretize to rank it.")
    return np.asarray(equal_freq(series, n_bins, name=name).values, dtype=object)


def var_rank_info(
    data,
    target_variable_name: str,
    exclude=None,
    n_bins: int | None = None,
    discretize: bool = True,
) -> list[RankingResult]:
    """Rank all variables by their information about the target.

    Args:
        data: DataFrame or sequence of row mappings.
        target_variable_name: Name of the target variable.
        exclude: Variable names left out of the ranking.
        n_bins: Number of equal frequency bins for numeric variables. Defaults to
            the cube root of the number of rows.
        discretize: Discretize numeric variables. If False, numeric variables
            raise a TypeMismatchError.

    Returns:
        One RankingResult per candidate variable, sorted by descending gain ratio.
        Ties keep the column order.

    Raises:
        KeyError: If the target or an excluded variable does not exist.
        InsufficientDataError: If there are fewer than 2 rows or the target has
            fewer than 2 distinct values.
        TypeMismatchError: If a numeric variable is passed with ``discretize=False``.
    """
    frame = to_frame(data)
    target = get_column(frame, target_variable_name)
    logger.set_log_group(LogGroup.RANKING)

    if len(frame) < 2:
        raise InsufficientDataError(f"Ranking needs at least 2 rows, got {len(frame)}.")
    if target.nunique(dropna=True) < 2:
        raise InsufficientDataError(f"Target '{target_variable_name}' needs at least 2 distinct values.")

    exclude = list(exclude or [])
    for name in exclude:
        get_column(frame, name)

    n_bins = default_n_bins(len(frame)) if n_bins is None else validate_n_bins(n_bins)
    candidates = [name for name in frame.columns if name != target_variable_name and name not in exclude]
    logger.info(f"Ranking {len(candidates)} variables against '{target_variable_name}', {n_bins} bins")

    target_labels = _as_labels(target)
    h_target = entropy(target_labels)

    results = []
    for name in candidates:
        labels = _discrete_labels(frame[name], name, n_bins, discretize)
        en = entropy(labels)
        mi = max(h_target + en - joint_entropy(labels, target_labels), 0.0)
        ig = max(h_target - conditional_entropy(target_labels, labels), 0.0)
        gr = min(ig / en, 1.0) if en > 0 else 0.0
        results.append(RankingResult(var=name, en=en, mi=mi, ig=ig, gr=gr))

    # stable, so equal gain ratios keep the column order
    results.sort(key=lambda result: result.gr, reverse=True)
    logger.set_log_group(LogGroup.RANKING)
    if results:
        logger.info(f"Top variable: {results[0].var} (gr={results[0].gr:.4f})")

    return results


def ranking_frame(results: list[RankingResult]) -> pd.DataFrame:
    """Table with columns var, en, mi, ig, gr in ranking order."""
    return pd.DataFrame(
        [[r.var, r.en, r.mi, r.ig, r.gr] for r in results],
        columns=RANKING_COLUMNS,
    )
