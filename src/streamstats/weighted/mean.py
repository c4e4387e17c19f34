"""Running weighted mean.

Each sample carries a positive weight. The unit increment of Welford's
update becomes the sample's weight and the count becomes the running
weight sum W:

    W    += w
    mean += (x - mean) * w / W

With every weight equal to 1 this is exactly the unweighted Mean.
Zero, negative and non-finite weights are a caller error and raise
InvalidInputError; they are never skipped.
"""
from __future__ import annotations

from collections.abc import Iterable

from streamstats.base import Estimator, check_finite
from streamstats.errors import InsufficientDataError, InvalidInputError
from streamstats.types import Number, State


class WeightedMean(Estimator):
    """Running weighted mean.

    ``count`` is the number of samples, ``sum_weights`` their total
    weight.
    """

    _stat_fields: tuple[str, ...] = ()

    def __init__(self) -> None:
        self._count = 0
        self._sum_weights: Number = 0
        self._mean: Number = 0

    @property
    def count(self) -> int:
        return self._count

    @property
    def sum_weights(self) -> Number:
        return self._sum_weights

    def __len__(self) -> int:
        return self._count

    def validate(self, x: Number, weight: Number = 1) -> None:
        check_finite(x)
        check_finite(weight, "weight")
        if weight <= 0:
            raise InvalidInputError(f"weight must be positive, got {weight!r}")

    def update(self, x: Number, weight: Number = 1) -> None:
        self.validate(x, weight)
        self._count += 1
        self._sum_weights += weight
        delta = x - self._mean
        self._add_inner(weight, delta, delta * weight / self._sum_weights)

    def _add_inner(self, weight: Number, delta: Number, shift: Number) -> None:
        self._mean += shift

    def extend(self, values: Iterable[Number | tuple[Number, Number]]) -> None:
        """Add samples; each item is a bare value (weight 1) or ``(x, w)``."""
        for item in values:
            if isinstance(item, tuple):
                self.update(*item)
            else:
                self.update(item)

    def merge(self, other: WeightedMean) -> None:
        self._check_same_kind(other)
        if other._count == 0:
            return
        self._merge_inner(other, other._mean - self._mean)

    def _merge_inner(self, other: WeightedMean, delta: Number) -> None:
        w_a, w_b = self._sum_weights, other._sum_weights
        total = w_a + w_b
        if self._count == 0:
            self._mean = other._mean
        else:
            # shifting by the mean difference avoids forming W * mean
            self._mean += delta * w_b / total
        self._sum_weights = total
        self._count += other._count

    def _require(self, statistic: str, required: int) -> None:
        if self._count < required:
            raise InsufficientDataError(statistic, required, self._count)

    def mean(self) -> Number:
        """Weighted mean, sum(w * x) / sum(w)."""
        self._require("mean", 1)
        return self._mean

    def to_state(self) -> State:
        state: State = {
            "count": self._count,
            "sum_weights": self._sum_weights,
            "mean": self._mean,
        }
        for name in self._stat_fields:
            state[name] = getattr(self, "_" + name)
        return state

    @classmethod
    def from_state(cls, state: State) -> WeightedMean:
        est = cls()
        est._count = state["count"]
        est._sum_weights = state["sum_weights"]
        est._mean = state["mean"]
        for name in cls._stat_fields:
            setattr(est, "_" + name, state[name])
        return est
