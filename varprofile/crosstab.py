"""Cross-tabulation of variables against a binary target."""

from collections.abc import Sequence

import numpy as np
import pandas as pd
from attrs import define, field
from joblib import Parallel, delayed

from varprofile.binning import equal_freq, validate_n_bins
from varprofile.dataset import binary_target, category_labels, get_column, to_frame, variable_type
from varprofile.exceptions import InvalidParameterError, TypeMismatchError
from varprofile.logger import LogGroup, get_logger
from varprofile.types import VariableType

logger = get_logger()

JOINT_SEPARATOR = " | "


@define(frozen=True)
class CrossTabResult:
    """Per-category breakdown of a binary target.

    The category order is meaningful: for binned variables it follows the bins
    from low to high, so trends in the target rate can be read off directly.
    """

    variable: str
    """Name of the input variable (joined names for joint tabulations)."""

    target: str
    """Name of the target variable."""

    positive_class: object
    """Target value whose rate is reported."""

    target_values: tuple
    """Both target values in sorted order."""

    categories: tuple
    """Categories in display order."""

    binned: bool
    """Whether the input variable was binned before tabulation."""

    target_counts: pd.DataFrame = field(eq=False, repr=False)
    """Row counts per category (index) and target value (columns)."""

    @property
    def counts(self) -> pd.Series:
        """Total rows per category."""
        return self.target_counts.sum(axis=1).rename("count")

    @property
    def rates(self) -> pd.Series:
        """Percentage of rows with the positive class per category."""
        return (self.target_counts[self.positive_class] / self.counts * 100).rename("rate")

    @property
    def total(self) -> int:
        """Total number of rows."""
        return int(self.target_counts.to_numpy().sum())

    def rate(self, category) -> float:
        """Target rate of a single category."""
        return float(self.rates[category])

    def to_frame(self) -> pd.DataFrame:
        """Table with columns count, count_<target value> and rate."""
        table = self.target_counts.copy()
        table.columns = [f"count_{value}" for value in table.columns]
        table.insert(0, "count", self.counts)
        table["rate"] = self.rates
        table.index.name = self.variable
        return table


def _variable_labels(frame: pd.DataFrame, name: str, auto_binning: bool, n_bins: int) -> tuple[np.ndarray, list, bool]:
    """Labels, category order and binning flag of an input variable."""
    series = get_column(frame, name)
    if variable_type(series) == VariableType.NUMERIC:
        if not auto_binning:
            raise TypeMismatchError(
                f"Variable '{name}' is numeric; enable auto_binning or convert it to a categorical variable."
            )
        binned = equal_freq(series, n_bins, name=name)
        return np.asarray(binned.values, dtype=object), binned.categories, True

    labels, order = category_labels(series)
    return labels.to_numpy(dtype=object), order, False


def _tabulate(labels, order, target: pd.Series, target_values: list) -> pd.DataFrame:
    frame = pd.DataFrame({"category": labels, "target": target.to_numpy(dtype=object)})
    counts = frame.groupby(["category", "target"], sort=False).size().unstack(fill_value=0)
    return counts.reindex(index=order, columns=target_values, fill_value=0).astype(int)


def _cross_tabulate_single(
    frame: pd.DataFrame,
    name: str,
    target_name: str,
    target: pd.Series,
    target_values: list,
    positive,
    auto_binning: bool,
    n_bins: int,
) -> CrossTabResult:
    if name == target_name:
        raise InvalidParameterError(f"Input variable '{name}' must differ from the target.")

    labels, order, binned = _variable_labels(frame, name, auto_binning, n_bins)
    result = CrossTabResult(
        variable=name,
        target=target_name,
        positive_class=positive,
        target_values=tuple(target_values),
        categories=tuple(order),
        binned=binned,
        target_counts=_tabulate(labels, order, target, target_values),
    )
    logger.info(f"{name}: {len(order)} categories, {result.total} rows")
    return result


def cross_tabulate(
    data,
    input_variable_name: str | Sequence[str],
    target_variable_name: str,
    auto_binning: bool = True,
    n_bins: int = 10,
    positive_class=None,
    n_jobs: int = 1,
) -> CrossTabResult | dict[str, CrossTabResult]:
    """Cross-tabulate one or several variables against a binary target.

    Args:
        data: DataFrame or sequence of row mappings.
        input_variable_name: Variable name, or a sequence of names that are
            tabulated independently of each other.
        target_variable_name: Name of the binary target.
        auto_binning: Bin numeric variables with ``equal_freq`` before tabulation.
        n_bins: Number of bins for numeric variables.
        positive_class: Target value whose rate is reported; defaults to the less
            frequent value.
        n_jobs: Number of joblib workers for several variables.

    Returns:
        A ``CrossTabResult`` for a single name, otherwise a dict of results keyed
        by variable name in input order.

    Raises:
        TypeMismatchError: If a numeric variable is passed with ``auto_binning=False``
            or the target is not binary.
        InvalidParameterError: If ``n_bins`` is invalid, the positive class is
            unknown or the target has missing values.
        InsufficientDataError: If the target has fewer than two distinct values.
    """
    n_bins = validate_n_bins(n_bins)
    frame = to_frame(data)
    target, target_values, positive = binary_target(frame, target_variable_name, positive_class)

    if isinstance(input_variable_name, str):
        logger.set_log_group(LogGroup.CROSS_TABULATION, input_variable_name)
        return _cross_tabulate_single(
            frame, input_variable_name, target_variable_name, target, target_values, positive, auto_binning, n_bins
        )

    names = list(input_variable_name)
    if not names:
        raise InvalidParameterError("At least one input variable is required.")

    logger.set_log_group(LogGroup.CROSS_TABULATION)
    logger.info(f"Cross-tabulating {len(names)} variables against '{target_variable_name}'")
    args = (target_variable_name, target, target_values, positive, auto_binning, n_bins)
    if n_jobs == 1:
        results = [_cross_tabulate_single(frame, name, *args) for name in names]
    else:
        results = Parallel(n_jobs=n_jobs)(delayed(_cross_tabulate_single)(frame, name, *args) for name in names)

    return dict(zip(names, results))


def cross_tabulate_joint(
    data,
    input_variable_names: Sequence[str],
    target_variable_name: str,
    auto_binning: bool = True,
    n_bins: int = 10,
    positive_class=None,
) -> CrossTabResult:
    """Cross-tabulate the combination of several variables against the target.

    Each observed combination of member categories becomes one category,
    labelled with the member labels joined by ``" | "``.
    """
    n_bins = validate_n_bins(n_bins)
    names = list(input_variable_names)
    if not names:
        raise InvalidParameterError("At least one input variable is required.")
    if len(set(names)) != len(names):
        raise InvalidParameterError(f"Duplicated input variables: {names}")

    joint_name = JOINT_SEPARATOR.join(names)
    frame = to_frame(data)
    target, target_values, positive = binary_target(frame, target_variable_name, positive_class)
    logger.set_log_group(LogGroup.CROSS_TABULATION, joint_name)

    members = []
    for name in names:
        if name == target_variable_name:
            raise InvalidParameterError(f"Input variable '{name}' must differ from the target.")
        members.append(_variable_labels(frame, name, auto_binning, n_bins))

    rows = list(zip(*(labels for labels, _, _ in members)))
    positions = [{category: i for i, category in enumerate(order)} for _, order, _ in members]
    observed = sorted(set(rows), key=lambda row: tuple(pos[value] for pos, value in zip(positions, row)))

    labels = np.array([JOINT_SEPARATOR.join(str(value) for value in row) for row in rows], dtype=object)
    order = [JOINT_SEPARATOR.join(str(value) for value in row) for row in observed]
    if len(set(order)) != len(order):
        raise InvalidParameterError(
            f"Joined category labels of {names} are ambiguous; member labels must not contain '{JOINT_SEPARATOR}'."
        )

    result = CrossTabResult(
        variable=joint_name,
        target=target_variable_name,
        positive_class=positive,
        target_values=tuple(target_values),
        categories=tuple(order),
        binned=any(binned for _, _, binned in members),
        target_counts=_tabulate(labels, order, target, target_values),
    )
    logger.info(f"{joint_name}: {len(order)} combined categories, {result.total} rows")
    return result
