"""Single-pass, mergeable descriptive statistics.

Public API:
    Mean, Variance, Skewness, Kurtosis: moment estimators (exact merge)
    Covariance: paired-stream covariance and correlation (exact merge)
    WeightedMean, WeightedVariance: weighted moment estimators (exact merge)
    Min, Max: running extrema
    Quantile: P² streaming quantile (merge only when exact)
    Histogram, OutOfRange: fixed-bin counts, cdf and quantiles (exact merge)
    Composite: several estimators fed from one pass
    merge_all: fold partial estimators into one

Errors:
    InsufficientDataError, InvalidInputError, IncompatibleMergeError,
    all subclasses of StatisticsError.
"""

from streamstats.base import Estimator, merge_all
from streamstats.composite import Composite
from streamstats.errors import (
    IncompatibleMergeError,
    InsufficientDataError,
    InvalidInputError,
    StatisticsError,
)
from streamstats.extrema import Max, Min
from streamstats.histogram import Histogram, OutOfRange
from streamstats.moments import Covariance, Kurtosis, Mean, Skewness, Variance
from streamstats.quantile import Quantile
from streamstats.weighted import WeightedMean, WeightedVariance

__all__ = [
    "Composite",
    "Covariance",
    "Estimator",
    "Histogram",
    "IncompatibleMergeError",
    "InsufficientDataError",
    "InvalidInputError",
    "Kurtosis",
    "Max",
    "Mean",
    "Min",
    "OutOfRange",
    "Quantile",
    "Skewness",
    "StatisticsError",
    "Variance",
    "WeightedMean",
    "WeightedVariance",
    "merge_all",
]
