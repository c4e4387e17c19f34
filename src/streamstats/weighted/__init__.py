"""Weighted streaming estimators.

Public API:
    WeightedMean: weighted mean
    WeightedVariance: weighted mean, variance, effective sample size
"""

from streamstats.weighted.mean import WeightedMean
from streamstats.weighted.variance import WeightedVariance

__all__ = [
    "WeightedMean",
    "WeightedVariance",
]
