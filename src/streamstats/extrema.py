"""Running minimum and maximum.

The smallest estimators in the package: one optional value each.
``None`` means no sample has been seen. NaN has no place in a total
order, so NaN (and infinite) samples are rejected like everywhere else
instead of being silently skipped by a comparison.
"""
from __future__ import annotations

from abc import abstractmethod

from streamstats.base import Estimator, check_finite
from streamstats.errors import InsufficientDataError
from streamstats.types import Number, State


class _Extremum(Estimator):
    """Shared plumbing for Min and Max; subclasses pick the comparison."""

    _name = "extremum"

    def __init__(self) -> None:
        self._value: Number | None = None
        self._count = 0

    @staticmethod
    @abstractmethod
    def _better(candidate: Number, current: Number) -> bool:
        """True when ``candidate`` should replace ``current``."""

    @property
    def value(self) -> Number | None:
        """Current extremum, or None when empty."""
        return self._value

    def validate(self, x: Number) -> None:
        check_finite(x)

    def update(self, x: Number) -> None:
        self.validate(x)
        if self._value is None or self._better(x, self._value):
            self._value = x
        self._count += 1

    def merge(self, other: _Extremum) -> None:
        self._check_same_kind(other)
        if other._value is not None and (
            self._value is None or self._better(other._value, self._value)
        ):
            self._value = other._value
        self._count += other._count

    def __len__(self) -> int:
        return self._count

    def get(self) -> Number:
        if self._value is None:
            raise InsufficientDataError(self._name, 1, 0)
        return self._value

    def to_state(self) -> State:
        return {"count": self._count, "value": self._value}

    @classmethod
    def from_state(cls, state: State) -> _Extremum:
        est = cls()
        est._count = state["count"]
        est._value = state["value"]
        return est


class Min(_Extremum):
    """Running minimum."""

    _name = "min"

    @staticmethod
    def _better(candidate: Number, current: Number) -> bool:
        return candidate < current

    def min(self) -> Number:
        """Smallest sample seen; InsufficientDataError when empty."""
        return self.get()


class Max(_Extremum):
    """Running maximum."""

    _name = "max"

    @staticmethod
    def _better(candidate: Number, current: Number) -> bool:
        return candidate > current

    def max(self) -> Number:
        """Largest sample seen; InsufficientDataError when empty."""
        return self.get()
