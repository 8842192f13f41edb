"""Data status and frequency tables."""

import numpy as np
import pandas as pd

from varprofile.dataset import MISSING_LABEL, get_column, to_frame, variable_type
from varprofile.exceptions import InsufficientDataError
from varprofile.logger import LogGroup, get_logger
from varprofile.types import VariableType

logger = get_logger()

STATUS_COLUMNS = ["variable", "q_zeros", "p_zeros", "q_na", "p_na", "q_inf", "p_inf", "type", "unique"]


def _percent(quantity: int, total: int) -> float:
    return round(100 * quantity / total, 2) if total else 0.0


def data_status(data) -> pd.DataFrame:
    """Zeros, missing values, infinite values and unique values per column."""
    frame = to_frame(data)
    n_rows = len(frame)
    logger.set_log_group(LogGroup.DATA_STATUS)

    rows = []
    for name in frame.columns:
        series = frame[name]
        q_na = int(series.isna().sum())
        if variable_type(series) == VariableType.NUMERIC:
            q_zeros = int((series == 0).sum())
            q_inf = int(np.isinf(series.astype(float)).sum())
        else:
            q_zeros = q_inf = 0
        rows.append(
            {
                "variable": name,
                "q_zeros": q_zeros,
                "p_zeros": _percent(q_zeros, n_rows),
                "q_na": q_na,
                "p_na": _percent(q_na, n_rows),
                "q_inf": q_inf,
                "p_inf": _percent(q_inf, n_rows),
                "type": str(series.dtype),
                "unique": int(series.nunique()),
            }
        )

    status = pd.DataFrame(rows, columns=STATUS_COLUMNS)
    with_na = status.loc[status["q_na"] > 0, "variable"].tolist()
    if with_na:
        logger.info(f"Variables with missing values: {with_na}")
    return status


def freq(data, variable: str) -> pd.DataFrame:
    """Frequency table of one variable, sorted by descending frequency.

    Missing values are counted as "NA". Equal frequencies keep first-seen order.
    """
    frame = to_frame(data)
    series = get_column(frame, variable)
    if series.empty:
        raise InsufficientDataError(f"Variable '{variable}' has no rows.")

    labels = series.astype(object).where(series.notna(), MISSING_LABEL)
    counts = labels.value_counts(sort=False).sort_values(ascending=False, kind="stable")
    shares = counts.to_numpy() / len(labels) * 100

    return pd.DataFrame(
        {
            "category": counts.index.to_list(),
            "frequency": counts.to_numpy(),
            "percentage": np.round(shares, 2),
            "cumulative_perc": np.round(np.cumsum(shares), 2),
        }
    )
