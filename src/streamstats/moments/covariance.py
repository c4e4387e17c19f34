"""Running covariance of paired samples (x, y).

Same idea as Variance, applied to the co-moment:

    C2 += (x - mean_x_old) * (y - mean_y_new)

and, for a merge,

    C2 = C2_a + C2_b + dx * dy * n_a * n_b / n

where dx and dy are the differences of the partial means. Both
marginal variances are tracked too, which is enough for Pearson's
correlation coefficient.
"""
from __future__ import annotations

import math
from collections.abc import Iterable

from streamstats.base import Estimator, check_finite
from streamstats.errors import InsufficientDataError
from streamstats.types import Number, State

_FIELDS = ("count", "mean_x", "mean_y", "c2", "m2_x", "m2_y")


class Covariance(Estimator):
    """Running covariance and correlation of two paired streams."""

    def __init__(self) -> None:
        self._count = 0
        self._mean_x: Number = 0
        self._mean_y: Number = 0
        self._c2: Number = 0
        self._m2_x: Number = 0
        self._m2_y: Number = 0

    def __len__(self) -> int:
        return self._count

    def validate(self, x: Number, y: Number | None = None) -> None:
        """Check one pair, given as ``(x, y)`` or as two arguments."""
        if y is None:
            x, y = x  # type: ignore[misc]
        check_finite(x, "x")
        check_finite(y, "y")

    def update(self, x: Number, y: Number | None = None) -> None:
        """Add one pair. Accepts ``update(x, y)`` or ``update((x, y))``."""
        if y is None:
            x, y = x  # type: ignore[misc]
        self.validate(x, y)
        self._count += 1
        n = self._count
        dx = x - self._mean_x
        dy = y - self._mean_y
        self._mean_x += dx / n
        self._mean_y += dy / n
        self._c2 += dx * (y - self._mean_y)
        self._m2_x += dx * (x - self._mean_x)
        self._m2_y += dy * (y - self._mean_y)

    def extend(self, pairs: Iterable[tuple[Number, Number]]) -> None:
        for x, y in pairs:
            self.update(x, y)

    def merge(self, other: Covariance) -> None:
        self._check_same_kind(other)
        n_a, n_b = self._count, other._count
        if n_b == 0:
            return
        if n_a == 0:
            self._load(other.to_state())
            return
        n = n_a + n_b
        dx = other._mean_x - self._mean_x
        dy = other._mean_y - self._mean_y
        weight = n_a * n_b / n
        self._c2 += other._c2 + dx * dy * weight
        self._m2_x += other._m2_x + dx * dx * weight
        self._m2_y += other._m2_y + dy * dy * weight
        self._mean_x = (n_a * self._mean_x + n_b * other._mean_x) / n
        self._mean_y = (n_a * self._mean_y + n_b * other._mean_y) / n
        self._count = n

    def _require(self, statistic: str, required: int) -> None:
        if self._count < required:
            raise InsufficientDataError(statistic, required, self._count)

    def mean_x(self) -> Number:
        self._require("mean", 1)
        return self._mean_x

    def mean_y(self) -> Number:
        self._require("mean", 1)
        return self._mean_y

    def population_covariance(self) -> Number:
        self._require("covariance", 2)
        return self._c2 / self._count

    def sample_covariance(self) -> Number:
        """Unbiased covariance estimate, C2 / (n - 1)."""
        self._require("covariance", 2)
        return self._c2 / (self._count - 1)

    def sample_variance_x(self) -> Number:
        self._require("variance", 2)
        return self._m2_x / (self._count - 1)

    def sample_variance_y(self) -> Number:
        self._require("variance", 2)
        return self._m2_y / (self._count - 1)

    def pearson(self) -> float:
        """Pearson correlation coefficient.

        NaN when either stream has zero spread.
        """
        self._require("correlation", 2)
        if self._m2_x == 0 or self._m2_y == 0:
            return math.nan
        return self._c2 / math.sqrt(self._m2_x * self._m2_y)

    def to_state(self) -> State:
        return {name: getattr(self, "_" + name) for name in _FIELDS}

    def _load(self, state: State) -> None:
        for name in _FIELDS:
            setattr(self, "_" + name, state[name])

    @classmethod
    def from_state(cls, state: State) -> Covariance:
        est = cls()
        est._load(state)
        return est
