"""Abstract base for streaming estimators.

Every estimator in the package implements this interface. The point:
an estimator is a small value that ingests one sample at a time, can
be queried at any moment, and can be merged with another estimator of
the same kind that saw a disjoint part of the same stream. Merge is
associative and the empty estimator is its identity, so a list of
partial estimators reduces with a plain fold:

    parts = [Kurtosis.from_iterable(chunk) for chunk in chunks]
    total = merge_all(parts)

Nothing here schedules work or shares state between owners; callers
decide how to partition and when to merge.
"""
from __future__ import annotations

import copy
import math
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, TypeVar

from streamstats.errors import IncompatibleMergeError, InvalidInputError
from streamstats.types import Number, State

E = TypeVar("E", bound="Estimator")


def check_finite(value: Number, what: str = "sample") -> None:
    """Reject NaN and infinite values before they reach any state."""
    if not math.isfinite(value):
        raise InvalidInputError(f"{what} must be finite, got {value!r}")


class Estimator(ABC):
    """Interface that every single-pass estimator implements."""

    @abstractmethod
    def validate(self, x: Any) -> None:
        """Raise exactly what update(x) would raise, without mutating."""
        ...

    @abstractmethod
    def update(self, x: Any) -> None:
        """Add one sample."""
        ...

    @abstractmethod
    def merge(self: E, other: E) -> None:
        """Fold another estimator of the same kind into this one."""
        ...

    @abstractmethod
    def __len__(self) -> int:
        """Number of samples seen."""
        ...

    @abstractmethod
    def to_state(self) -> State:
        """Return the estimator state as a flat dict of plain values."""
        ...

    @classmethod
    @abstractmethod
    def from_state(cls: type[E], state: State) -> E:
        """Rebuild an estimator from the output of to_state()."""
        ...

    @classmethod
    def from_iterable(cls: type[E], values: Iterable[Any], *args: Any, **kwargs: Any) -> E:
        """Build an estimator and feed it every value.

        Extra arguments go to the constructor, e.g.
        ``Quantile.from_iterable(data, 0.9)``.
        """
        est = cls(*args, **kwargs)
        est.extend(values)
        return est

    def extend(self, values: Iterable[Any]) -> None:
        """Add every value from an iterable, in order."""
        for x in values:
            self.update(x)

    def is_empty(self) -> bool:
        return len(self) == 0

    def copy(self: E) -> E:
        return copy.deepcopy(self)

    def __add__(self: E, other: E) -> E:
        """Return a merged copy, leaving both operands untouched."""
        result = self.copy()
        result.merge(other)
        return result

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.to_state() == other.to_state()  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.to_state().items())
        return f"{type(self).__name__}({fields})"

    def _check_same_kind(self, other: object) -> None:
        if type(other) is not type(self):
            raise IncompatibleMergeError(
                f"Cannot merge {type(self).__name__} with "
                f"{type(other).__name__}"
            )


def merge_all(estimators: Iterable[E]) -> E:
    """Merge a non-empty sequence of estimators into a new one.

    The inputs are not modified. Raises ValueError on an empty sequence
    because there is no way to know which kind of estimator to return.
    """
    items = list(estimators)
    if not items:
        raise ValueError("merge_all() needs at least one estimator")
    result = items[0].copy()
    for est in items[1:]:
        result.merge(est)
    return result
