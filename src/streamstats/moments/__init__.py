"""Moment-based streaming estimators.

Public API:
    Mean: count and mean (Welford)
    Variance: adds M2 -> population/sample variance, standard error
    Skewness: adds M3 -> skewness
    Kurtosis: adds M4 -> excess kurtosis (the full moment accumulator)
    Covariance: paired streams -> covariance, Pearson correlation

Each class merges exactly with another of the same class, so the
result over partitioned data matches one pass over all of it.
"""

from streamstats.moments.covariance import Covariance
from streamstats.moments.kurtosis import Kurtosis
from streamstats.moments.mean import Mean
from streamstats.moments.skewness import Skewness
from streamstats.moments.variance import Variance

__all__ = [
    "Covariance",
    "Kurtosis",
    "Mean",
    "Skewness",
    "Variance",
]
