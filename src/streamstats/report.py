"""Report generation for summaries.

Formats a Composite of estimators into a human-readable block for
terminal output. Statistics that need more samples than were seen
print as "n/a" instead of failing the whole report.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence

from streamstats.composite import Composite
from streamstats.errors import InsufficientDataError
from streamstats.extrema import Max, Min
from streamstats.histogram import Histogram
from streamstats.moments import Kurtosis, Mean, Skewness, Variance
from streamstats.quantile import Quantile

NA = "n/a"


def _value(query: Callable[[], object], fmt: str = ".6g") -> str:
    try:
        value = query()
    except InsufficientDataError:
        return NA
    return format(value, fmt)


def _moment_lines(est: Mean) -> list[str]:
    lines = [f"  Mean:            {_value(est.mean)}"]
    if isinstance(est, Variance):
        lines += [
            f"  Std dev:         {_value(est.std_dev)}",
            f"  Variance (pop):  {_value(est.population_variance)}",
            f"  Variance (smp):  {_value(est.sample_variance)}",
            f"  Std error:       {_value(est.error)}",
        ]
    if isinstance(est, Skewness):
        lines.append(f"  Skewness:        {_value(est.skewness)}")
    if isinstance(est, Kurtosis):
        lines.append(f"  Kurtosis (exc):  {_value(est.kurtosis)}")
    return lines


def _histogram_lines(hist: Histogram, quantiles: Sequence[float]) -> list[str]:
    lines = ["  Bins:"]
    bounds = hist.boundaries
    for i, count in enumerate(hist.counts()):
        lines.append(f"    [{bounds[i]:>10.4g}, {bounds[i + 1]:>10.4g})  {count:>10,}")
    for p in quantiles:
        lines.append(f"  p{p * 100:<5g} (hist):   {_value(lambda p=p: hist.quantile(p))}")
    return lines


def format_summary(
    summary: Composite,
    label: str = "Summary",
    histogram_quantiles: Sequence[float] = (),
) -> str:
    """Format every member of a Composite as a readable report string.

    ``histogram_quantiles`` lists the quantiles to read off any
    Histogram member.
    """
    lines = [
        f"=== {label} ===",
        f"Samples:           {len(summary):,}",
    ]
    for name in summary.names():
        est = summary[name]
        lines.append(f"{name}:")
        if isinstance(est, Mean):
            lines += _moment_lines(est)
        elif isinstance(est, Min):
            lines.append(f"  Min:             {_value(est.min)}")
        elif isinstance(est, Max):
            lines.append(f"  Max:             {_value(est.max)}")
        elif isinstance(est, Quantile):
            lines.append(f"  p{est.p * 100:<5g} (P²):     {_value(est.quantile)}")
        elif isinstance(est, Histogram):
            lines += _histogram_lines(est, histogram_quantiles)
        else:
            lines.append(f"  {est!r}")
    return "\n".join(lines)
