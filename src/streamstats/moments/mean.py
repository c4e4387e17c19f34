"""Running arithmetic mean (Welford's incremental update).

Summing every sample and dividing at the end loses precision once the
running sum dwarfs the individual samples. Welford's recurrence keeps
the mean itself as state and nudges it toward each new sample:

    count += 1
    mean  += (x - mean) / count

The higher-order moment estimators in this package (Variance,
Skewness, Kurtosis) subclass Mean and hook into the same update: the
subclass receives ``delta = x - mean_before`` and ``delta / count``
and updates its own sums from the *old* lower-order state before
handing off to its parent.

References:
    Welford, "Note on a method for calculating corrected sums of
    squares and products", 1962.
"""
from __future__ import annotations

from streamstats.base import Estimator, check_finite
from streamstats.errors import InsufficientDataError
from streamstats.types import Number, State


class Mean(Estimator):
    """Running count and mean.

    State is ``{count, mean}`` with ``mean == 0`` while empty. Initial
    values are the integer 0 so that exact number types such as
    ``fractions.Fraction`` stay exact.
    """

    _stat_fields: tuple[str, ...] = ()

    def __init__(self) -> None:
        self._count = 0
        self._mean: Number = 0

    @property
    def count(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def validate(self, x: Number) -> None:
        check_finite(x)

    def update(self, x: Number) -> None:
        self.validate(x)
        delta = x - self._mean
        self._count += 1
        self._add_inner(delta, delta / self._count)

    def _add_inner(self, delta: Number, delta_n: Number) -> None:
        # count is already incremented when this runs
        self._mean += delta_n

    def merge(self, other: Mean) -> None:
        self._check_same_kind(other)
        n_a, n_b = self._count, other._count
        if n_b == 0:
            return
        self._merge_inner(other, other._mean - self._mean, n_a, n_b)

    def _merge_inner(self, other: Mean, delta: Number, n_a: int, n_b: int) -> None:
        total = n_a + n_b
        if n_a == 0:
            self._mean = other._mean
        else:
            self._mean = (n_a * self._mean + n_b * other._mean) / total
        self._count = total

    def _require(self, statistic: str, required: int) -> None:
        if self._count < required:
            raise InsufficientDataError(statistic, required, self._count)

    def mean(self) -> Number:
        """Arithmetic mean of all samples seen."""
        self._require("mean", 1)
        return self._mean

    def to_state(self) -> State:
        state: State = {"count": self._count, "mean": self._mean}
        for name in self._stat_fields:
            state[name] = getattr(self, "_" + name)
        return state

    @classmethod
    def from_state(cls, state: State) -> Mean:
        est = cls()
        est._count = state["count"]
        est._mean = state["mean"]
        for name in cls._stat_fields:
            setattr(est, "_" + name, state[name])
        return est
