"""Streaming quantile estimation with the P² algorithm.

Answers "what is the p-quantile of everything seen so far?" with five
numbers of state, however long the stream. Five markers track the
minimum, the p/2-, p- and (1+p)/2-quantiles, and the maximum. Each
marker has a height (its current value estimate), an actual position
(how many samples are at or below it) and a desired position (where
it would sit if the heights were exact).

Every sample shifts the actual positions of the markers above it and
advances every desired position by a fixed increment. When an interior
marker drifts a whole position away from where it should be, it moves
one step toward it and its height is re-estimated by fitting a
parabola through it and its two neighbours. If the parabola would push
the height past a neighbour, a straight line is used instead, which
keeps the heights non-decreasing.

Until five samples have arrived the samples themselves are kept; the
fifth one triggers the sort that seeds the markers.

There is no exact way to combine two P² states built from independent
samples, so merge() only succeeds when it can be done exactly (see
Quantile.merge) and raises IncompatibleMergeError otherwise.

References:
    Jain & Chlamtac, "The P² algorithm for dynamic calculation of
    quantiles and histograms without storing observations", 1985.
"""
from __future__ import annotations

import bisect

from streamstats.base import Estimator, check_finite
from streamstats.errors import IncompatibleMergeError, InsufficientDataError
from streamstats.types import Number, State

MARKERS = 5


class Quantile(Estimator):
    """P² estimator for a single quantile.

    Parameters:
        p: Target quantile, strictly between 0 and 1 (0.5 = median).
    """

    def __init__(self, p: float) -> None:
        if not (0.0 < p < 1.0):
            raise ValueError(f"p must be in (0, 1), got {p}")
        self._p = p
        self._count = 0
        # Buffered samples until there are MARKERS of them, then marker heights
        self._heights: list[Number] = []
        self._positions = [1, 2, 3, 4, 5]
        self._desired = [1.0, 1 + 2 * p, 1 + 4 * p, 3 + 2 * p, 5.0]
        self._increments = [0.0, p / 2, p, (1 + p) / 2, 1.0]

    @property
    def p(self) -> float:
        return self._p

    @property
    def heights(self) -> tuple[Number, ...]:
        """Marker heights (or the buffered samples before the fifth)."""
        return tuple(self._heights)

    @property
    def positions(self) -> tuple[int, ...]:
        return tuple(self._positions)

    def __len__(self) -> int:
        return self._count

    def validate(self, x: Number) -> None:
        check_finite(x)

    def update(self, x: Number) -> None:
        self.validate(x)
        self._insert(x)

    def _insert(self, x: Number) -> None:
        self._count += 1
        h = self._heights
        if self._count <= MARKERS:
            h.append(x)
            if self._count == MARKERS:
                h.sort()
            return

        # Find cell k with h[k] <= x < h[k+1], stretching the end markers
        if x < h[0]:
            h[0] = x
            k = 0
        elif x >= h[4]:
            h[4] = x
            k = 3
        else:
            k = bisect.bisect_right(h, x) - 1

        n = self._positions
        for i in range(k + 1, MARKERS):
            n[i] += 1
        for i in range(MARKERS):
            self._desired[i] += self._increments[i]

        for i in range(1, MARKERS - 1):
            d = self._desired[i] - n[i]
            if (d >= 1 and n[i + 1] - n[i] > 1) or (d <= -1 and n[i - 1] - n[i] < -1):
                step = 1 if d > 0 else -1
                candidate = self._parabolic(i, step)
                if h[i - 1] < candidate < h[i + 1]:
                    h[i] = candidate
                else:
                    h[i] = self._linear(i, step)
                n[i] += step

    def _parabolic(self, i: int, step: int) -> Number:
        h, n = self._heights, self._positions
        return h[i] + step / (n[i + 1] - n[i - 1]) * (
            (n[i] - n[i - 1] + step) * (h[i + 1] - h[i]) / (n[i + 1] - n[i])
            + (n[i + 1] - n[i] - step) * (h[i] - h[i - 1]) / (n[i] - n[i - 1])
        )

    def _linear(self, i: int, step: int) -> Number:
        h, n = self._heights, self._positions
        return h[i] + step * (h[i + step] - h[i]) / (n[i + step] - n[i])

    def quantile(self) -> Number:
        """Current estimate of the p-quantile (the middle marker)."""
        if self._count < MARKERS:
            raise InsufficientDataError("quantile", MARKERS, self._count)
        return self._heights[2]

    def merge(self, other: Quantile) -> None:
        """Combine with another estimator when the result is exact.

        Allowed cases: either side is empty, or either side is still
        buffering (fewer than five samples), in which case its buffered
        samples are replayed into the other side's markers. Two seeded
        marker sets cannot be combined and raise IncompatibleMergeError;
        both estimators are left unchanged.
        """
        self._check_same_kind(other)
        if other._p != self._p:
            raise IncompatibleMergeError(
                f"Cannot merge quantile estimators for different p: "
                f"{self._p} vs {other._p}"
            )
        if other._count < MARKERS:
            for x in list(other._heights):
                self._insert(x)
            return
        if self._count < MARKERS:
            merged = other.copy()
            for x in self._heights:
                merged._insert(x)
            self._load(merged.to_state())
            return
        raise IncompatibleMergeError(
            "P² marker states cannot be merged exactly; merge before "
            "either side has seen five samples or keep a Histogram instead"
        )

    def to_state(self) -> State:
        return {
            "p": self._p,
            "count": self._count,
            "heights": list(self._heights),
            "positions": list(self._positions),
            "desired": list(self._desired),
        }

    def _load(self, state: State) -> None:
        self._count = state["count"]
        self._heights = list(state["heights"])
        self._positions = list(state["positions"])
        self._desired = list(state["desired"])

    @classmethod
    def from_state(cls, state: State) -> Quantile:
        est = cls(state["p"])
        est._load(state)
        return est
