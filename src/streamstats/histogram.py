"""Fixed-boundary histogram.

N + 1 strictly increasing boundaries define N half-open bins
``[b_i, b_{i+1})``; the last boundary itself is outside the range.
Locating a sample is a binary search over the boundaries, so an update
costs O(log N) and memory is N counters regardless of stream length.

Unlike P², two histograms with the same boundaries merge exactly: the
counts simply add. That makes a histogram the right tool when
quantiles must be computed over partitioned data, at the cost of
resolution limited to the bin width.

Samples outside ``[b_0, b_N)`` follow the policy chosen at
construction: OutOfRange.RAISE rejects them with InvalidInputError,
OutOfRange.CLAMP counts them in the first or last bin.
"""
from __future__ import annotations

import array
import bisect
from collections.abc import Sequence
from enum import Enum

from streamstats.base import Estimator, check_finite
from streamstats.errors import (
    IncompatibleMergeError,
    InsufficientDataError,
    InvalidInputError,
)
from streamstats.types import Number, State


class OutOfRange(Enum):
    RAISE = "raise"
    CLAMP = "clamp"


class Histogram(Estimator):
    """Frequency counts over fixed bins.

    Parameters:
        boundaries: At least two finite, strictly increasing values.
        out_of_range: What to do with samples outside the boundaries.
    """

    def __init__(
        self,
        boundaries: Sequence[Number],
        out_of_range: OutOfRange = OutOfRange.RAISE,
    ) -> None:
        bounds = list(boundaries)
        if len(bounds) < 2:
            raise ValueError(f"Need at least 2 boundaries, got {len(bounds)}")
        for b in bounds:
            check_finite(b, "boundary")
        for lo, hi in zip(bounds, bounds[1:]):
            if not lo < hi:
                raise ValueError(
                    f"Boundaries must be strictly increasing, got {lo!r} "
                    f"followed by {hi!r}"
                )
        self._boundaries = bounds
        self._out_of_range = OutOfRange(out_of_range)
        self._counts = array.array("Q", bytes(8 * (len(bounds) - 1)))
        self._total = 0

    @classmethod
    def with_const_width(
        cls,
        start: Number,
        end: Number,
        bins: int,
        out_of_range: OutOfRange = OutOfRange.RAISE,
    ) -> Histogram:
        """Histogram of ``bins`` equal-width bins covering [start, end)."""
        if bins < 1:
            raise ValueError(f"bins must be positive, got {bins}")
        width = (end - start) / bins
        bounds = [start + i * width for i in range(bins)] + [end]
        return cls(bounds, out_of_range=out_of_range)

    @property
    def boundaries(self) -> tuple[Number, ...]:
        return tuple(self._boundaries)

    @property
    def out_of_range(self) -> OutOfRange:
        return self._out_of_range

    @property
    def num_bins(self) -> int:
        return len(self._counts)

    @property
    def count(self) -> int:
        """Total number of samples counted."""
        return self._total

    def __len__(self) -> int:
        return self._total

    def _find(self, x: Number) -> int:
        """Index of the bin holding x, applying the out-of-range policy."""
        bounds = self._boundaries
        if bounds[0] <= x < bounds[-1]:
            return bisect.bisect_right(bounds, x) - 1
        if self._out_of_range is OutOfRange.CLAMP:
            return 0 if x < bounds[0] else len(self._counts) - 1
        raise InvalidInputError(
            f"sample {x!r} outside histogram range "
            f"[{bounds[0]!r}, {bounds[-1]!r})"
        )

    def validate(self, x: Number) -> None:
        check_finite(x)
        self._find(x)

    def update(self, x: Number) -> None:
        check_finite(x)
        self._counts[self._find(x)] += 1
        self._total += 1

    def merge(self, other: Histogram) -> None:
        self._check_same_kind(other)
        if other._boundaries != self._boundaries:
            raise IncompatibleMergeError(
                "Cannot merge histograms with different boundaries"
            )
        if other._out_of_range is not self._out_of_range:
            raise IncompatibleMergeError(
                f"Cannot merge histograms with out-of-range policies "
                f"{self._out_of_range.value!r} and {other._out_of_range.value!r}"
            )
        for i, c in enumerate(other._counts):
            self._counts[i] += c
        self._total += other._total

    def counts(self) -> list[int]:
        """Per-bin counts, in boundary order."""
        return list(self._counts)

    def widths(self) -> list[Number]:
        b = self._boundaries
        return [hi - lo for lo, hi in zip(b, b[1:])]

    def centers(self) -> list[Number]:
        b = self._boundaries
        return [lo + (hi - lo) / 2 for lo, hi in zip(b, b[1:])]

    def normalized_counts(self) -> list[float]:
        """Per-bin densities; multiplied by the widths they sum to 1."""
        self._require_samples("normalized counts")
        return [c / (self._total * w) for c, w in zip(self._counts, self.widths())]

    def bin_variances(self) -> list[int]:
        """Variance estimate of each bin count.

        Counts are Poisson-distributed, so each bin's variance estimate
        is its count.
        """
        return list(self._counts)

    def _require_samples(self, statistic: str) -> None:
        if self._total == 0:
            raise InsufficientDataError(statistic, 1, 0)

    def cdf(self, x: Number) -> float:
        """Fraction of samples below x, interpolated within x's bin.

        Samples in a bin are assumed to be spread evenly across it.
        Returns 0.0 below the first boundary and 1.0 at or above the
        last one.
        """
        self._require_samples("cdf")
        check_finite(x)
        bounds = self._boundaries
        if x < bounds[0]:
            return 0.0
        if x >= bounds[-1]:
            return 1.0
        idx = bisect.bisect_right(bounds, x) - 1
        below = sum(self._counts[:idx])
        lo, hi = bounds[idx], bounds[idx + 1]
        within = self._counts[idx] * (x - lo) / (hi - lo)
        return (below + within) / self._total

    def quantile(self, p: float) -> Number:
        """Value below which a fraction p of the samples fall.

        Walks the cumulative counts to the bin where the target rank
        p * count is reached, then interpolates linearly inside it.
        """
        if not (0.0 <= p <= 1.0):
            raise ValueError(f"p must be in [0, 1], got {p}")
        self._require_samples("quantile")
        target = p * self._total
        cumulative = 0
        bounds = self._boundaries
        last = 0
        for i, c in enumerate(self._counts):
            if c == 0:
                continue
            last = i
            if cumulative + c >= target:
                lo, hi = bounds[i], bounds[i + 1]
                return lo + (hi - lo) * (target - cumulative) / c
            cumulative += c
        return bounds[last + 1]

    def to_state(self) -> State:
        return {
            "boundaries": list(self._boundaries),
            "counts": list(self._counts),
            "out_of_range": self._out_of_range.value,
        }

    @classmethod
    def from_state(cls, state: State) -> Histogram:
        est = cls(state["boundaries"], out_of_range=OutOfRange(state["out_of_range"]))
        counts = state["counts"]
        if len(counts) != est.num_bins:
            raise ValueError(
                f"Expected {est.num_bins} counts, got {len(counts)}"
            )
        for i, c in enumerate(counts):
            est._counts[i] = c
        est._total = sum(counts)
        return est
