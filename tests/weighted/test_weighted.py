"""Tests for WeightedMean and WeightedVariance."""
from __future__ import annotations

import math
from fractions import Fraction

import pytest

from streamstats.errors import (
    IncompatibleMergeError,
    InsufficientDataError,
    InvalidInputError,
)
from streamstats.moments import Mean, Variance
from streamstats.weighted import WeightedMean, WeightedVariance


def _reference(pairs):
    """Direct two-pass weighted mean and M2."""
    w = math.fsum(wt for _, wt in pairs)
    mean = math.fsum(x * wt for x, wt in pairs) / w
    m2 = math.fsum(wt * (x - mean) ** 2 for x, wt in pairs)
    return w, mean, m2


class TestWeightedMean:
    def test_known_values(self):
        wm = WeightedMean()
        for x, w in [(1.0, 1.0), (2.0, 1.0), (3.0, 2.0)]:
            wm.update(x, w)
        assert wm.mean() == pytest.approx(2.25)
        assert wm.sum_weights == 4.0
        assert wm.count == 3

    def test_unit_weights_match_mean(self, fraction_samples):
        wm = WeightedMean.from_iterable(fraction_samples)
        m = Mean.from_iterable(fraction_samples)
        assert wm.mean() == m.mean()
        assert wm.sum_weights == len(m)

    def test_empty(self):
        with pytest.raises(InsufficientDataError):
            WeightedMean().mean()

    @pytest.mark.parametrize("bad", [0, -1.0, math.nan, math.inf])
    def test_rejects_bad_weight(self, bad):
        wm = WeightedMean()
        wm.update(1.0, 2.0)
        before = wm.to_state()
        with pytest.raises(InvalidInputError):
            wm.update(5.0, bad)
        assert wm.to_state() == before

    def test_rejects_bad_sample(self):
        with pytest.raises(InvalidInputError):
            WeightedMean().update(math.nan, 1.0)

    def test_extend_accepts_pairs_and_bare_values(self):
        wm = WeightedMean()
        wm.extend([(4.0, 3.0), 0.0])
        assert wm.mean() == pytest.approx(3.0)


class TestWeightedVariance:
    def test_against_two_pass(self, weighted_samples):
        wv = WeightedVariance.from_iterable(weighted_samples)
        w, mean, m2 = _reference(weighted_samples)
        assert wv.sum_weights == pytest.approx(w, rel=1e-12)
        assert wv.mean() == pytest.approx(mean, rel=1e-12)
        assert wv.m2 == pytest.approx(m2, rel=1e-9)
        assert wv.population_variance() == pytest.approx(m2 / w, rel=1e-9)

    def test_unit_weights_match_variance(self, fraction_samples):
        wv = WeightedVariance.from_iterable(fraction_samples)
        v = Variance.from_iterable(fraction_samples)
        assert wv.m2 == v.m2
        assert wv.sample_variance() == pytest.approx(v.sample_variance())
        assert wv.population_variance() == v.population_variance()
        assert wv.effective_sample_size() == len(v)

    def test_unit_weight_error_matches_variance(self):
        values = [2.0, 4.0, 4.0, 5.0, 7.0, 9.0]
        wv = WeightedVariance.from_iterable(values)
        v = Variance.from_iterable(values)
        assert wv.error() == pytest.approx(v.error())
        assert wv.std_dev() == pytest.approx(v.std_dev())

    def test_integer_weight_acts_like_repetition(self):
        wv = WeightedVariance()
        wv.extend([(1.0, 3), (4.0, 1)])
        repeated = Variance.from_iterable([1.0, 1.0, 1.0, 4.0])
        assert wv.mean() == pytest.approx(repeated.mean())
        assert wv.population_variance() == pytest.approx(repeated.population_variance())

    def test_effective_sample_size(self):
        wv = WeightedVariance()
        wv.extend([(1.0, 1.0), (2.0, 1.0), (3.0, 2.0)])
        # 4^2 / (1 + 1 + 4)
        assert wv.effective_sample_size() == pytest.approx(16 / 6)

    @pytest.mark.parametrize("weight", [1e-170, 1e200])
    def test_extreme_uniform_weights(self, weight):
        wv = WeightedVariance()
        wv.extend([(1.0, weight), (2.0, weight)])
        assert wv.mean() == pytest.approx(1.5)
        assert wv.population_variance() == pytest.approx(0.25)
        assert wv.sample_variance() == pytest.approx(0.5)
        assert wv.effective_sample_size() == pytest.approx(2.0)
        assert wv.error() == pytest.approx(0.5)

    @pytest.mark.parametrize("weight", [1e-170, 1e200])
    def test_extreme_uniform_weights_merge(self, weight):
        a = WeightedVariance()
        a.update(1.0, weight)
        b = WeightedVariance()
        b.update(2.0, weight)
        a.merge(b)
        assert a.sample_variance() == pytest.approx(0.5)
        assert a.effective_sample_size() == pytest.approx(2.0)

    def test_mixed_scale_weights(self):
        wv = WeightedVariance()
        wv.extend([(1.0, 1e200), (2.0, 3e200)])
        # W = 4, sum(w^2) = 10, M2 = 0.75 in units of 1e200
        assert wv.mean() == pytest.approx(1.75)
        assert wv.effective_sample_size() == pytest.approx(1.6)
        assert wv.sample_variance() == pytest.approx(0.75 / (4 - 2.5))

    def test_single_sample(self):
        wv = WeightedVariance()
        wv.update(3.0, 2.5)
        assert wv.mean() == 3.0
        with pytest.raises(InsufficientDataError):
            wv.sample_variance()
        with pytest.raises(InsufficientDataError):
            wv.population_variance()


class TestWeightedMerge:
    def test_merge_equivalence(self, weighted_samples):
        whole = WeightedVariance.from_iterable(weighted_samples)
        for split in (1, 250, 799):
            a = WeightedVariance.from_iterable(weighted_samples[:split])
            b = WeightedVariance.from_iterable(weighted_samples[split:])
            a.merge(b)
            assert a.count == whole.count
            assert a.mean() == pytest.approx(whole.mean(), rel=1e-12)
            assert a.sample_variance() == pytest.approx(whole.sample_variance(), rel=1e-9)
            assert a.effective_sample_size() == pytest.approx(
                whole.effective_sample_size(), rel=1e-12
            )

    def test_fraction_merge_is_exact(self, fraction_samples):
        pairs = [(x, Fraction(i % 3 + 1)) for i, x in enumerate(fraction_samples)]
        a = WeightedVariance.from_iterable(pairs[:13])
        b = WeightedVariance.from_iterable(pairs[13:])
        assert a + b == WeightedVariance.from_iterable(pairs)

    def test_merge_with_empty(self, weighted_samples):
        full = WeightedMean.from_iterable(weighted_samples)
        empty = WeightedMean()
        empty.merge(full)
        assert empty == full
        assert full + WeightedMean() == full

    def test_mean_and_variance_do_not_mix(self):
        with pytest.raises(IncompatibleMergeError):
            WeightedMean().merge(WeightedVariance())

    def test_state_round_trip(self, weighted_samples):
        wv = WeightedVariance.from_iterable(weighted_samples)
        assert set(wv.to_state()) == {"count", "sum_weights", "mean", "mean_weight", "m2"}
        assert WeightedVariance.from_state(wv.to_state()) == wv
