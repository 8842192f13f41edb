"""varprofile - profiling of variables against a binary target."""

import sys

from varprofile.binning import BinnedVariable, equal_freq  # noqa: F401
from varprofile.config import ProfilingConfig  # noqa: F401
from varprofile.correlation import correlated_groups, correlation_table, prune_correlated  # noqa: F401
from varprofile.crosstab import CrossTabResult, cross_tabulate, cross_tabulate_joint  # noqa: F401
from varprofile.exceptions import (  # noqa: F401
    InsufficientDataError,
    InvalidParameterError,
    TypeMismatchError,
    VarProfileError,
)
from varprofile.profiler import VarProfiler  # noqa: F401
from varprofile.profiling import data_status, freq  # noqa: F401
from varprofile.ranking import RankingResult, ranking_frame, var_rank_info  # noqa: F401

if not sys.version_info >= (3, 12):
    raise ValueError("Minimum required Python version is 3.12")
