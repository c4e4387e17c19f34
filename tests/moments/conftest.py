"""Shared fixtures for moment estimator tests."""
from __future__ import annotations

import random
from fractions import Fraction

import pytest


# Fixed seed so the sample streams are reproducible across runs
SEED = 42


@pytest.fixture()
def normal_samples() -> list[float]:
    rng = random.Random(SEED)
    return [rng.gauss(2.0, 3.0) for _ in range(1000)]


@pytest.fixture()
def skewed_samples() -> list[float]:
    """Exponential samples: clearly positive skewness and kurtosis."""
    rng = random.Random(SEED + 1)
    return [rng.expovariate(0.5) for _ in range(2000)]


@pytest.fixture()
def fraction_samples() -> list[Fraction]:
    """Rational samples; moment state over these is exact."""
    rng = random.Random(SEED + 2)
    return [Fraction(rng.randint(-1000, 1000), rng.randint(1, 50)) for _ in range(60)]
