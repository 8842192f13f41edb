"""Test equal frequency binning."""

import logging

import numpy as np
import pandas as pd
import pytest

from varprofile.binning import equal_freq, interval_labels, validate_n_bins
from varprofile.dataset import MISSING_LABEL
from varprofile.exceptions import InsufficientDataError, InvalidParameterError, TypeMismatchError
from varprofile.logger import get_logger


class ListHandler(logging.Handler):
    """Collect log records."""

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        """Store the record."""
        self.records.append(record)


class TestEqualFreq:
    """Test suite for equal_freq."""

    @pytest.mark.parametrize("n_values,n_bins", [(10, 3), (100, 10), (303, 7), (7, 2), (50, 6)])
    def test_bin_sizes_balanced_for_distinct_values(self, n_values, n_bins):
        """Test that every bin holds n / n_bins rows up to one row."""
        values = np.random.default_rng(0).permutation(n_values).astype(float)

        binned = equal_freq(values, n_bins)
        counts = binned.counts()

        assert binned.n_bins == n_bins
        assert counts.sum() == n_values
        assert (np.abs(counts.to_numpy() - n_values / n_bins) <= 1).all()

    def test_labels_and_boundaries(self):
        """Test boundaries and labels for ten distinct values."""
        values = [5.0, 1.0, 3.0, 2.0, 4.0, 6.0, 8.0, 7.0, 9.0, 10.0]

        binned = equal_freq(values, 5)

        assert binned.boundaries == (2.0, 4.0, 6.0, 8.0)
        assert binned.labels == ("(-Inf, 2]", "(2, 4]", "(4, 6]", "(6, 8]", "(8, Inf]")
        assert binned.counts().tolist() == [2, 2, 2, 2, 2]

    def test_every_value_in_its_interval(self):
        """Test that each value lies in the half-open interval of its bin."""
        values = np.random.default_rng(1).normal(size=250)

        binned = equal_freq(values, 8)
        edges = binned.edges

        assert list(binned.boundaries) == sorted(binned.boundaries)
        for value, label in zip(values, binned.values):
            k = binned.labels.index(label)
            assert edges[k] < value <= edges[k + 1]

    def test_bins_ordered(self):
        """Test that the categorical is ordered by increasing lower bound."""
        binned = equal_freq(list(range(30)), 3)

        assert binned.values.ordered
        assert binned.categories == list(binned.labels)
        assert binned.values.codes[0] < binned.values.codes[-1]

    def test_low_cardinality_gives_fewer_bins(self):
        """Test that ties reduce the number of bins instead of failing."""
        values = [1, 1, 1, 1, 2, 2, 2, 3, 3, 3]

        binned = equal_freq(values, 5)

        assert binned.n_bins_requested == 5
        assert binned.n_bins == 3
        assert binned.boundaries == (1.0, 2.0)
        assert binned.counts().tolist() == [4, 3, 3]

    def test_low_cardinality_logs_warning(self):
        """Test that a reduced bin count is logged as a warning."""
        logger = get_logger()
        handler = ListHandler()
        logger.addHandler(handler)
        try:
            equal_freq([1, 1, 1, 2, 2, 2], 4)
        finally:
            logger.removeHandler(handler)

        assert any(record.levelno == logging.WARNING for record in handler.records)

    def test_constant_values_single_bin(self):
        """Test that a constant variable ends up in one unbounded bin."""
        binned = equal_freq([3, 3, 3], 4)

        assert binned.n_bins == 1
        assert binned.labels == ("(-Inf, Inf]",)
        assert binned.counts().tolist() == [3]

    def test_missing_values_get_own_category(self):
        """Test that missing values are excluded from boundaries and mapped to NA."""
        values = [1.0, None, 2.0, np.nan, 3.0, 4.0]

        binned = equal_freq(values, 2)

        assert binned.boundaries == (2.0,)
        assert binned.categories[-1] == MISSING_LABEL
        assert list(binned.values) == ["(-Inf, 2]", MISSING_LABEL, "(-Inf, 2]", MISSING_LABEL, "(2, Inf]", "(2, Inf]"]
        assert binned.counts().tolist() == [2, 2, 2]

    def test_no_missing_category_without_missing_values(self):
        """Test that the NA category only exists when needed."""
        binned = equal_freq([1, 2, 3, 4], 2)

        assert MISSING_LABEL not in binned.categories

    def test_series_name_and_positions(self):
        """Test that a Series keeps its name and values stay aligned by position."""
        series = pd.Series([10.0, 1.0, 5.0, 7.0], index=[3, 2, 1, 0], name="age")

        binned = equal_freq(series, 2)

        assert binned.name == "age"
        assert list(binned.values) == ["(5, Inf]", "(-Inf, 5]", "(-Inf, 5]", "(5, Inf]"]

    def test_idempotent(self):
        """Test that repeated calls give identical results."""
        values = np.random.default_rng(2).exponential(size=120)

        first = equal_freq(values, 6)
        second = equal_freq(values, 6)

        assert first == second
        assert list(first.values) == list(second.values)

    @pytest.mark.parametrize("n_bins", [1, 0, -3, 2.5, True, "3", None])
    def test_invalid_n_bins(self, n_bins):
        """Test that n_bins below two or of the wrong type is rejected."""
        with pytest.raises(InvalidParameterError):
            equal_freq([1, 2, 3, 4], n_bins)

    @pytest.mark.parametrize("values", [["a", "b", "c"], [True, False, True], [1, "2", 3]])
    def test_non_numeric_values(self, values):
        """Test that non-numeric values are rejected."""
        with pytest.raises(TypeMismatchError):
            equal_freq(values, 2)

    def test_boolean_series(self):
        """Test that a boolean Series is not treated as numeric."""
        with pytest.raises(TypeMismatchError):
            equal_freq(pd.Series([True, False, True]), 2)

    def test_all_missing(self):
        """Test that there must be at least one value to bin."""
        with pytest.raises(InsufficientDataError):
            equal_freq([None, np.nan], 2)


def test_validate_n_bins_accepts_numpy_integers():
    """Test numpy integers as bin counts."""
    assert validate_n_bins(np.int64(4)) == 4


def test_interval_labels_unique_for_close_boundaries():
    """Test that label precision grows until labels are unique."""
    labels = interval_labels([1000001.0, 1000002.0])

    assert len(set(labels)) == 3
    assert labels[1] == "(1000001, 1000002]"
