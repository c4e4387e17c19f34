"""Shared type aliases used across the estimators."""
from __future__ import annotations

from fractions import Fraction
from typing import Any, TypeAlias, Union

# Anything supporting + - * / and ordering against small integers.
# float is the everyday case; Fraction keeps moment state exact.
Number: TypeAlias = Union[int, float, Fraction]

# Flat, introspectable estimator state (see Estimator.to_state).
State: TypeAlias = dict[str, Any]
