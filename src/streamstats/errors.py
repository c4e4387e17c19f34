"""Error taxonomy shared by every estimator.

Errors are raised where they are detected and propagate to the caller.
Nothing here is transient, so nothing is retried, and an estimator that
raised is still in the state it had before the failing call.
"""
from __future__ import annotations


class StatisticsError(Exception):
    """Base class for all estimator errors."""


class InsufficientDataError(StatisticsError):
    """A statistic was requested before enough samples were seen."""

    def __init__(self, statistic: str, required: int, available: int) -> None:
        self.statistic = statistic
        self.required = required
        self.available = available
        super().__init__(
            f"{statistic} needs at least {required} sample(s), "
            f"got {available}"
        )


class InvalidInputError(StatisticsError, ValueError):
    """A sample or weight was rejected (NaN, infinite, out of range...)."""


class IncompatibleMergeError(StatisticsError):
    """Two estimators cannot be combined into an exact result."""
