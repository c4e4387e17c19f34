"""Running variance: mean plus the second central moment M2.

M2 is the sum of squared deviations from the current mean, kept up to
date without revisiting samples:

    M2 += delta * delta_n * (n - 1)        (== (x - old_mean) * (x - new_mean))

Two partial estimators combine with Chan, Golub & LeVeque's parallel
formula, where ``delta`` is the difference of their means:

    M2 = M2_a + M2_b + delta^2 * n_a * n_b / n

References:
    Chan, Golub & LeVeque, "Updating formulae and a pairwise
    algorithm for computing sample variances", 1979.
"""
from __future__ import annotations

import math

from streamstats.moments.mean import Mean
from streamstats.types import Number


class Variance(Mean):
    """Running mean and variance.

    Both variance forms need at least two samples; a single sample has
    no spread to estimate and raises InsufficientDataError.
    """

    _stat_fields: tuple[str, ...] = ("m2",)

    def __init__(self) -> None:
        super().__init__()
        self._m2: Number = 0

    @property
    def m2(self) -> Number:
        """Sum of squared deviations from the mean."""
        return self._m2

    def _add_inner(self, delta: Number, delta_n: Number) -> None:
        n = self._count
        self._m2 += delta * delta_n * (n - 1)
        super()._add_inner(delta, delta_n)

    def _merge_inner(self, other: Variance, delta: Number, n_a: int, n_b: int) -> None:
        n = n_a + n_b
        self._m2 += other._m2 + delta * delta * n_a * n_b / n
        super()._merge_inner(other, delta, n_a, n_b)

    def population_variance(self) -> Number:
        """M2 / n, the variance of exactly the samples seen."""
        self._require("variance", 2)
        return self._m2 / self._count

    def sample_variance(self) -> Number:
        """M2 / (n - 1), the unbiased estimate of the population variance."""
        self._require("variance", 2)
        return self._m2 / (self._count - 1)

    def std_dev(self) -> float:
        """Square root of the sample variance."""
        return math.sqrt(self.sample_variance())

    def error(self) -> float:
        """Standard error of the mean, sqrt(sample_variance / n)."""
        return math.sqrt(self.sample_variance() / self._count)
