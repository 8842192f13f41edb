"""Exceptions."""


class VarProfileError(Exception):
    """Base class for all varprofile errors."""


class InvalidParameterError(VarProfileError, ValueError):
    """A parameter was supplied outside of its valid range."""


class TypeMismatchError(VarProfileError, TypeError):
    """An operation received a variable of the wrong semantic type."""


class InsufficientDataError(VarProfileError, ValueError):
    """The data lacks enough rows or distinct values to compute a statistic."""
