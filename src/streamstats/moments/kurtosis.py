"""Running kurtosis: the full fourth-order moment accumulator.

Holds ``{count, mean, M2, M3, M4}`` and answers mean, variance,
skewness and excess kurtosis in one pass. Update, with M2 and M3 taken
*before* this sample:

    term = delta * delta_n * (n - 1)
    M4  += term * delta_n^2 * (n^2 - 3n + 3)
           + 6 * delta_n^2 * M2
           - 4 * delta_n * M3

Merge, with ``delta = mean_b - mean_a`` and ``delta_n = delta / n``:

    M4 = M4_a + M4_b
         + delta * delta_n^3 * n_a * n_b * (n_a^2 - n_a * n_b + n_b^2)
         + 6 * delta_n^2 * (n_a^2 * M2_b + n_b^2 * M2_a)
         + 4 * delta_n * (n_a * M3_b - n_b * M3_a)

Precision: with very large counts, or samples far from zero with a
tiny spread, M3 and M4 lose significant digits long before the mean
does. That is a property of floating point, not something this class
tries to hide; feed Fraction samples when exact moments are required.

References:
    Pébay, "Formulas for robust, one-pass parallel computation of
    covariances and arbitrary-order statistical moments", 2008.
    Terriberry, "Computing higher-order moments online", 2007.
"""
from __future__ import annotations

import math

from streamstats.moments.skewness import Skewness
from streamstats.types import Number


class Kurtosis(Skewness):
    """Running mean, variance, skewness and excess kurtosis."""

    _stat_fields: tuple[str, ...] = ("m2", "m3", "m4")

    def __init__(self) -> None:
        super().__init__()
        self._m4: Number = 0

    @property
    def m4(self) -> Number:
        """Sum of fourth-power deviations from the mean."""
        return self._m4

    def _add_inner(self, delta: Number, delta_n: Number) -> None:
        n = self._count
        delta_n_sq = delta_n * delta_n
        term = delta * delta_n * (n - 1)
        self._m4 += (
            term * delta_n_sq * (n * n - 3 * n + 3)
            + 6 * delta_n_sq * self._m2
            - 4 * delta_n * self._m3
        )
        super()._add_inner(delta, delta_n)

    def _merge_inner(self, other: Kurtosis, delta: Number, n_a: int, n_b: int) -> None:
        delta_n = delta / (n_a + n_b)
        delta_n_sq = delta_n * delta_n
        self._m4 += (
            other._m4
            + delta * delta_n_sq * delta_n * n_a * n_b * (n_a * n_a - n_a * n_b + n_b * n_b)
            + 6 * delta_n_sq * (n_a * n_a * other._m2 + n_b * n_b * self._m2)
            + 4 * delta_n * (n_a * other._m3 - n_b * self._m3)
        )
        super()._merge_inner(other, delta, n_a, n_b)

    def kurtosis(self) -> Number:
        """Excess kurtosis, n * M4 / M2^2 - 3.

        Needs four samples. Returns NaN when every sample is identical
        (M2 == 0).
        """
        self._require("kurtosis", 4)
        if self._m2 == 0:
            return math.nan
        return self._count * self._m4 / (self._m2 * self._m2) - 3
