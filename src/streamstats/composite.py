"""Several estimators fed from one pass over the data.

A Composite is a named bundle of estimators. update() fans each sample
out to every member; merge() merges member by member. It adds no
invariants of its own beyond two atomicity rules: a sample rejected by
any member reaches none of them, and a merge that fails for any member
changes none of them.

    summary = Composite(moments=Kurtosis(), low=Min(), high=Max(),
                        median=Quantile(0.5))
    summary.extend(samples)
    summary.moments.kurtosis()

Members must take a single sample per update; paired estimators such
as Covariance do not fit.
"""
from __future__ import annotations

from typing import Any

from streamstats.base import Estimator
from streamstats.errors import IncompatibleMergeError
from streamstats.extrema import Max, Min
from streamstats.histogram import Histogram
from streamstats.moments import Kurtosis, Mean, Skewness, Variance
from streamstats.quantile import Quantile
from streamstats.types import Number, State
from streamstats.weighted import WeightedMean, WeightedVariance

# Estimator kinds a Composite can rebuild from to_state()
_KINDS: dict[str, type[Estimator]] = {
    cls.__name__: cls
    for cls in (
        Histogram, Kurtosis, Max, Mean, Min, Quantile, Skewness,
        Variance, WeightedMean, WeightedVariance,
    )
}


class Composite(Estimator):
    """Named collection of estimators updated and merged together."""

    def __init__(self, **members: Estimator) -> None:
        if not members:
            raise ValueError("Composite needs at least one member")
        for name, member in members.items():
            if not isinstance(member, Estimator):
                raise TypeError(
                    f"Member {name!r} is not an Estimator: {member!r}"
                )
        self._members: dict[str, Estimator] = dict(members)
        self._count = 0

    def __getattr__(self, name: str) -> Estimator:
        members = self.__dict__.get("_members")
        if members is not None and name in members:
            return members[name]
        raise AttributeError(
            f"{type(self).__name__!r} object has no attribute {name!r}"
        )

    def __getitem__(self, name: str) -> Estimator:
        return self._members[name]

    def __contains__(self, name: object) -> bool:
        return name in self._members

    def names(self) -> list[str]:
        return list(self._members)

    def __len__(self) -> int:
        return self._count

    def validate(self, x: Number) -> None:
        for member in self._members.values():
            member.validate(x)

    def update(self, x: Number) -> None:
        self.validate(x)
        for member in self._members.values():
            member.update(x)
        self._count += 1

    def merge(self, other: Composite) -> None:
        self._check_same_kind(other)
        if sorted(other.names()) != sorted(self.names()):
            raise IncompatibleMergeError(
                f"Composite members differ: {self.names()} vs {other.names()}"
            )
        # Build every merged member first so a failure leaves self untouched
        merged = {
            name: member + other._members[name]
            for name, member in self._members.items()
        }
        self._members = merged
        self._count += other._count

    def to_state(self) -> State:
        return {
            "count": self._count,
            "members": {
                name: {"kind": type(member).__name__, "state": member.to_state()}
                for name, member in self._members.items()
            },
        }

    @classmethod
    def from_state(cls, state: State) -> Composite:
        members: dict[str, Any] = {}
        for name, entry in state["members"].items():
            kind = _KINDS.get(entry["kind"])
            if kind is None:
                raise ValueError(f"Unknown estimator kind: {entry['kind']!r}")
            members[name] = kind.from_state(entry["state"])
        est = cls(**members)
        est._count = state["count"]
        return est
