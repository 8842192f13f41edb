"""Dataset helpers shared by the profiling engines."""

from collections.abc import Mapping

import pandas as pd

from varprofile.exceptions import InsufficientDataError, InvalidParameterError, TypeMismatchError
from varprofile.types import VariableType

MISSING_LABEL = "NA"
"""Category label for missing values."""


def to_frame(data) -> pd.DataFrame:
    """Convert the input into a DataFrame.

    Accepts a DataFrame (returned unchanged), a mapping of column name to values,
    or a sequence of row mappings sharing the same keys.
    """
    if isinstance(data, pd.DataFrame):
        return data
    if isinstance(data, Mapping):
        return pd.DataFrame(data)

    rows = list(data)
    if not rows:
        return pd.DataFrame()
    if not all(isinstance(row, Mapping) for row in rows):
        raise InvalidParameterError("Rows must be mappings from variable name to value.")

    schema = list(rows[0].keys())
    for position, row in enumerate(rows):
        if set(row.keys()) != set(schema):
            raise InvalidParameterError(f"Row {position} does not share the variable schema {schema}.")
    return pd.DataFrame.from_records(rows, columns=schema)


def get_column(frame: pd.DataFrame, name: str) -> pd.Series:
    """Get a column by name with a readable error."""
    if name not in frame.columns:
        raise KeyError(f"Variable '{name}' not found. Available variables: {list(frame.columns)}")
    return frame[name]


def variable_type(series: pd.Series) -> VariableType:
    """Infer the semantic type of a variable."""
    if pd.api.types.is_bool_dtype(series) or isinstance(series.dtype, pd.CategoricalDtype):
        return VariableType.CATEGORICAL
    if pd.api.types.is_numeric_dtype(series):
        return VariableType.NUMERIC
    return VariableType.CATEGORICAL


def sorted_values(values) -> list:
    """Sort values, falling back to string order for mixed types."""
    values = [v.item() if hasattr(v, "item") else v for v in values]
    try:
        return sorted(values)
    except TypeError:
        return sorted(values, key=str)


def category_labels(series: pd.Series) -> tuple[pd.Series, list]:
    """Map a categorical variable to labels and their display order.

    Ordered pandas categoricals keep their category order, everything else keeps
    first-seen order. Missing values become ``MISSING_LABEL``, ordered last.
    Categories without any rows are dropped.
    """
    present = series.dropna()
    if isinstance(series.dtype, pd.CategoricalDtype) and series.cat.ordered:
        observed = set(present.unique())
        order = [c for c in series.cat.categories if c in observed]
    else:
        order = list(pd.unique(present))

    labels = series.astype(object).where(series.notna(), MISSING_LABEL)
    if series.isna().any():
        order.append(MISSING_LABEL)
    return labels, order


def binary_target(frame: pd.DataFrame, target: str, positive_class=None) -> tuple[pd.Series, list, object]:
    """Validate a binary target column.

    Returns:
        The target column, its two values in sorted order and the positive class.
        Without an explicit positive class the less frequent value is used; on a
        tie the larger of both values.

    Raises:
        KeyError: If the target column does not exist.
        InvalidParameterError: If the target has missing values or the positive
            class is not a target value.
        InsufficientDataError: If the target has fewer than two distinct values.
        TypeMismatchError: If the target has more than two distinct values.
    """
    series = get_column(frame, target)
    if series.isna().any():
        raise InvalidParameterError(f"Target '{target}' contains missing values.")

    values = sorted_values(pd.unique(series))
    if len(values) < 2:
        raise InsufficientDataError(f"Target '{target}' needs two distinct values, found {values}.")
    if len(values) > 2:
        raise TypeMismatchError(f"Target '{target}' must be binary, found {len(values)} distinct values.")

    if positive_class is not None:
        if positive_class not in values:
            raise InvalidParameterError(f"Positive class {positive_class!r} is not a value of target '{target}'.")
        return series, values, values[values.index(positive_class)]

    counts = series.value_counts()
    low, high = values
    positive = low if counts[low] < counts[high] else high
    return series, values, positive
