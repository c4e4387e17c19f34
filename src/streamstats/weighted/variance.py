"""Running weighted variance (West's algorithm).

Extends WeightedMean with the weighted sum of squared deviations:

    M2 += w * (x - mean_old) * (x - mean_new)

and merges like the unweighted case with weight sums in place of
counts:

    M2 = M2_a + M2_b + delta^2 * W_a * W_b / W

Instead of the raw sum of squared weights, which under- or overflows
for weights far from 1, the weight-weighted mean of the weights,
sum(w^2) / W, is kept and updated the same way as the sample mean.
It gives the effective sample size W / mean_weight and the unbiased
variance for reliability weights, M2 / (W - mean_weight), which
reduces to M2 / (n - 1) when every weight is 1.

References:
    West, "Updating mean and variance estimates: an improved method",
    1979.
    Kish, "Survey Sampling", 1965 (effective sample size).
"""
from __future__ import annotations

import math

from streamstats.types import Number
from streamstats.weighted.mean import WeightedMean


class WeightedVariance(WeightedMean):
    """Running weighted mean, variance and standard error."""

    _stat_fields: tuple[str, ...] = ("mean_weight", "m2")

    def __init__(self) -> None:
        super().__init__()
        self._mean_weight: Number = 0
        self._m2: Number = 0

    @property
    def mean_weight(self) -> Number:
        """sum(w^2) / W, the mean weight seen by a randomly drawn unit of weight."""
        return self._mean_weight

    @property
    def m2(self) -> Number:
        """Weighted sum of squared deviations from the mean."""
        return self._m2

    def _add_inner(self, weight: Number, delta: Number, shift: Number) -> None:
        # x - mean_new == delta - shift
        self._m2 += weight * delta * (delta - shift)
        self._mean_weight += (weight - self._mean_weight) * (weight / self._sum_weights)
        super()._add_inner(weight, delta, shift)

    def _merge_inner(self, other: WeightedVariance, delta: Number) -> None:
        w_a, w_b = self._sum_weights, other._sum_weights
        total = w_a + w_b
        self._m2 += other._m2 + delta * delta * w_a / total * w_b
        if self._count == 0:
            self._mean_weight = other._mean_weight
        else:
            self._mean_weight += (other._mean_weight - self._mean_weight) * (w_b / total)
        super()._merge_inner(other, delta)

    def population_variance(self) -> Number:
        """M2 / W."""
        self._require("variance", 2)
        return self._m2 / self._sum_weights

    def sample_variance(self) -> Number:
        """Unbiased variance for reliability weights."""
        self._require("variance", 2)
        return self._m2 / (self._sum_weights - self._mean_weight)

    def std_dev(self) -> float:
        return math.sqrt(self.sample_variance())

    def effective_sample_size(self) -> Number:
        """Kish's effective sample size, W^2 / sum(w^2)."""
        self._require("effective sample size", 1)
        return self._sum_weights / self._mean_weight

    def error(self) -> float:
        """Standard error of the weighted mean."""
        return math.sqrt(self.sample_variance() / self.effective_sample_size())
