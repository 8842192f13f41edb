"""Correlation with the target and removal of correlated variables."""

import networkx as nx
import numpy as np
import pandas as pd
from attrs import define

from varprofile.config import CORRELATION_METHODS
from varprofile.dataset import binary_target, get_column, to_frame, variable_type
from varprofile.exceptions import InsufficientDataError, InvalidParameterError, TypeMismatchError
from varprofile.logger import LogGroup, get_logger
from varprofile.ranking import var_rank_info
from varprofile.types import VariableType

logger = get_logger()


@define(frozen=True)
class PruningResult:
    """Variables kept and removed by correlation pruning."""

    kept: list[str]
    """Remaining variables in column order."""

    removed: list[str]
    """Variables removed as redundant."""

    groups: list[list[str]]
    """Groups of correlated variables."""


def _check_method(method: str) -> None:
    if method not in CORRELATION_METHODS:
        raise InvalidParameterError(f"Correlation method must be one of {CORRELATION_METHODS}, got {method!r}.")


def _numeric_columns(frame: pd.DataFrame, skip=()) -> list:
    return [c for c in frame.columns if c not in skip and variable_type(frame[c]) == VariableType.NUMERIC]


def correlation_table(data, target: str, method: str = "pearson", positive_class=None) -> pd.DataFrame:
    """Correlation of each numeric variable with the target.

    A non-numeric binary target is encoded as 1 for the positive class and 0
    otherwise. Rows are sorted by descending correlation.
    """
    _check_method(method)
    frame = to_frame(data)
    target_series = get_column(frame, target)
    logger.set_log_group(LogGroup.CORRELATION, target)

    if variable_type(target_series) == VariableType.NUMERIC:
        encoded = target_series.astype(float)
    else:
        target_series, _, positive = binary_target(frame, target, positive_class)
        encoded = (target_series == positive).astype(float)

    numeric = _numeric_columns(frame, skip=[target])
    if not numeric:
        raise InsufficientDataError("No numeric variables to correlate with the target.")

    correlations = frame[numeric].astype(float).corrwith(encoded, method=method)
    table = pd.DataFrame({"var": numeric, target: correlations.to_numpy()})
    return table.sort_values(target, ascending=False, kind="stable", na_position="last").reset_index(drop=True)


def _abs_correlation_matrix(values: pd.DataFrame, method: str) -> np.ndarray:
    # pairwise complete observations for every method
    matrix = values.astype(float).corr(method=method).to_numpy()
    return np.nan_to_num(np.abs(matrix))


def correlated_groups(data, variables=None, threshold: float = 0.8, method: str = "spearman") -> list[list[str]]:
    """Group numeric variables whose absolute correlation exceeds the threshold.

    Variables are nodes, correlations above the threshold are edges; every
    connected component of that graph is one group. Members are sorted, groups
    are ordered by size and members.
    """
    _check_method(method)
    if not 0.0 <= threshold <= 1.0:
        raise InvalidParameterError(f"threshold must lie in [0, 1], got {threshold}.")

    frame = to_frame(data)
    if variables is None:
        variables = _numeric_columns(frame)
    else:
        variables = list(variables)
        for name in variables:
            if variable_type(get_column(frame, name)) != VariableType.NUMERIC:
                raise TypeMismatchError(f"Variable '{name}' is not numeric.")

    logger.set_log_group(LogGroup.CORRELATION)
    if len(variables) < 2:
        return []

    matrix = _abs_correlation_matrix(frame[variables], method)

    g = nx.Graph()
    for i in range(len(variables)):
        for j in range(i + 1, len(variables)):
            if matrix[i, j] > threshold:
                g.add_edge(variables[i], variables[j])

    groups = [sorted(c) for c in nx.connected_components(g)]
    groups = sorted(groups, key=lambda group: (len(group), group))
    logger.info(f"Found {len(groups)} groups of correlated variables (threshold {threshold}, {method})")
    return groups


def prune_correlated(
    data,
    target: str,
    threshold: float = 0.8,
    method: str = "spearman",
    n_bins: int | None = None,
) -> PruningResult:
    """Keep the variable with the highest gain ratio from each correlated group."""
    frame = to_frame(data)
    get_column(frame, target)
    numeric = _numeric_columns(frame, skip=[target])
    groups = correlated_groups(frame, numeric, threshold=threshold, method=method)

    gain_ratio = {}
    if groups:
        members = [name for group in groups for name in group]
        ranking = var_rank_info(frame[[*members, target]], target, n_bins=n_bins)
        gain_ratio = {result.var: result.gr for result in ranking}

    removed = []
    for group in groups:
        # max keeps the first of equal gain ratios
        keep = max(group, key=lambda name: gain_ratio[name])
        removed.extend(name for name in group if name != keep)

    kept = [name for name in frame.columns if name != target and name not in removed]

    logger.set_log_group(LogGroup.CORRELATION)
    logger.info(f"Number of variables before correlation removal: {len(kept) + len(removed)}")
    logger.info(f"Number of variables after correlation removal: {len(kept)}")
    return PruningResult(kept=kept, removed=removed, groups=groups)
