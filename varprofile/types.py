"""Variable types."""

from enum import Enum


class VariableType(str, Enum):
    """Semantic variable types."""

    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


class PlotType(str, Enum):
    """Target profile plot types."""

    BOXPLOT = "boxplot"
    HISTDENS = "histdens"
