"""Shared fixtures for weighted estimator tests."""
from __future__ import annotations

import random
from fractions import Fraction

import pytest


SEED = 42


@pytest.fixture()
def weighted_samples() -> list[tuple[float, float]]:
    rng = random.Random(SEED)
    return [(rng.gauss(10.0, 2.0), rng.uniform(0.1, 5.0)) for _ in range(800)]


@pytest.fixture()
def fraction_samples() -> list[Fraction]:
    rng = random.Random(SEED + 2)
    return [Fraction(rng.randint(-500, 500), rng.randint(1, 20)) for _ in range(40)]
