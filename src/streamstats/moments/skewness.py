"""Running skewness: adds the third central moment M3.

Update, with ``delta_n = delta / n`` and M2 taken *before* this sample:

    M3 += delta * delta_n * (n - 1) * delta_n * (n - 2) - 3 * delta_n * M2

Merge, with ``delta = mean_b - mean_a`` and ``delta_n = delta / n``:

    M3 = M3_a + M3_b
         + delta * delta_n^2 * n_a * n_b * (n_a - n_b)
         + 3 * delta_n * (n_a * M2_b - n_b * M2_a)
"""
from __future__ import annotations

import math

from streamstats.moments.variance import Variance
from streamstats.types import Number


class Skewness(Variance):
    """Running mean, variance and skewness."""

    _stat_fields: tuple[str, ...] = ("m2", "m3")

    def __init__(self) -> None:
        super().__init__()
        self._m3: Number = 0

    @property
    def m3(self) -> Number:
        """Sum of cubed deviations from the mean."""
        return self._m3

    def _add_inner(self, delta: Number, delta_n: Number) -> None:
        n = self._count
        term = delta * delta_n * (n - 1)
        self._m3 += term * delta_n * (n - 2) - 3 * delta_n * self._m2
        super()._add_inner(delta, delta_n)

    def _merge_inner(self, other: Skewness, delta: Number, n_a: int, n_b: int) -> None:
        delta_n = delta / (n_a + n_b)
        self._m3 += (
            other._m3
            + delta * delta_n * delta_n * n_a * n_b * (n_a - n_b)
            + 3 * delta_n * (n_a * other._m2 - n_b * self._m2)
        )
        super()._merge_inner(other, delta, n_a, n_b)

    def skewness(self) -> float:
        """Population skewness, sqrt(n) * M3 / M2^1.5.

        Needs three samples. Returns NaN when every sample is identical
        (M2 == 0), where the ratio is undefined.
        """
        self._require("skewness", 3)
        if self._m2 == 0:
            return math.nan
        return math.sqrt(self._count) * self._m3 / self._m2 ** 1.5
