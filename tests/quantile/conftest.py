"""Shared fixtures for P² quantile tests."""
from __future__ import annotations

import random

import pytest


SEED = 42


@pytest.fixture()
def uniform_samples() -> list[float]:
    rng = random.Random(SEED)
    return [rng.uniform(0.0, 100.0) for _ in range(1000)]
