import os

import numpy as np
import pandas as pd
import pytest


def pytest_configure(config):
    """Called after command line options have been parsed and all plugins loaded.

    Set environment variables for all tests.
    """
    os.environ["RUNNING_IN_TESTSUITE"] = "1"
    # Use non-interactive matplotlib backend to prevent GUI-related issues
    os.environ["MPLBACKEND"] = "Agg"


@pytest.fixture
def toy_rows():
    """Four rows where neither variable alone separates the target, but both together do."""
    return [
        {"var_1": "a", "var_2": "x", "target": "red"},
        {"var_1": "a", "var_2": "y", "target": "blue"},
        {"var_1": "b", "var_2": "x", "target": "blue"},
        {"var_1": "b", "var_2": "y", "target": "red"},
    ]


@pytest.fixture
def heart_data():
    """303 rows with two groups of 97 (25 positive) and 206 (114 positive) rows."""
    gender = ["female"] * 97 + ["male"] * 206
    target = ["yes"] * 25 + ["no"] * 72 + ["yes"] * 114 + ["no"] * 92
    rng = np.random.default_rng(0)
    return pd.DataFrame(
        {
            "gender": gender,
            "age": rng.integers(29, 78, size=303),
            "max_heart_rate": rng.normal(150, 20, size=303).round(0),
            "has_heart_disease": target,
        }
    )


@pytest.fixture
def mixed_data():
    """Numeric and categorical variables with missing values and a 0/1 target."""
    rng = np.random.default_rng(42)
    n_samples = 200
    x_num = rng.normal(size=n_samples)
    x_num[:5] = np.nan
    x_cat = rng.choice(["a", "b", "c"], size=n_samples).astype(object)
    x_cat[10:15] = None
    target = (rng.normal(size=n_samples) + np.nan_to_num(x_num) > 0).astype(int)
    return pd.DataFrame(
        {
            "x_num": x_num,
            "x_int": rng.integers(0, 4, size=n_samples),
            "x_cat": x_cat,
            "x_const": ["k"] * n_samples,
            "target": target,
        }
    )
