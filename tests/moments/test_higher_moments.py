"""Tests for Variance, Skewness and Kurtosis."""
from __future__ import annotations

import math
import random
import statistics

import pytest

from streamstats.base import merge_all
from streamstats.errors import IncompatibleMergeError, InsufficientDataError
from streamstats.moments import Kurtosis, Skewness, Variance


def _central_sums(values):
    """Two-pass reference: (mean, M2, M3, M4)."""
    mean = math.fsum(values) / len(values)
    return (
        mean,
        math.fsum((x - mean) ** 2 for x in values),
        math.fsum((x - mean) ** 3 for x in values),
        math.fsum((x - mean) ** 4 for x in values),
    )


def _assert_same_moments(a: Kurtosis, b: Kurtosis, rel: float = 1e-9) -> None:
    assert len(a) == len(b)
    assert a.mean() == pytest.approx(b.mean(), rel=rel)
    assert a.sample_variance() == pytest.approx(b.sample_variance(), rel=rel)
    assert a.skewness() == pytest.approx(b.skewness(), rel=rel)
    assert a.kurtosis() == pytest.approx(b.kurtosis(), rel=rel)


class TestClosedForm:
    def test_one_to_five(self):
        k = Kurtosis.from_iterable([1, 2, 3, 4, 5])
        assert k.mean() == 3.0
        assert k.population_variance() == pytest.approx(2.0)
        assert k.sample_variance() == pytest.approx(2.5)
        assert k.skewness() == pytest.approx(0.0, abs=1e-12)
        # M4 = 16 + 1 + 0 + 1 + 16 = 34 -> 5 * 34 / 10^2 - 3
        assert k.kurtosis() == pytest.approx(-1.3)

    def test_std_dev_and_error(self):
        v = Variance.from_iterable([1, 2, 3, 4, 5])
        assert v.std_dev() == pytest.approx(math.sqrt(2.5))
        assert v.error() == pytest.approx(math.sqrt(2.5 / 5))

    def test_against_statistics_module(self, normal_samples):
        v = Variance.from_iterable(normal_samples)
        assert v.population_variance() == pytest.approx(
            statistics.pvariance(normal_samples), rel=1e-10
        )
        assert v.sample_variance() == pytest.approx(
            statistics.variance(normal_samples), rel=1e-10
        )

    def test_against_two_pass(self, skewed_samples):
        k = Kurtosis.from_iterable(skewed_samples)
        n = len(skewed_samples)
        mean, m2, m3, m4 = _central_sums(skewed_samples)
        assert k.mean() == pytest.approx(mean, rel=1e-12)
        assert k.m2 == pytest.approx(m2, rel=1e-10)
        assert k.m3 == pytest.approx(m3, rel=1e-9)
        assert k.m4 == pytest.approx(m4, rel=1e-9)
        assert k.skewness() == pytest.approx(math.sqrt(n) * m3 / m2 ** 1.5, rel=1e-9)
        assert k.kurtosis() == pytest.approx(n * m4 / m2 ** 2 - 3, rel=1e-9)
        # exponential: skewness ~2, excess kurtosis ~6
        assert 1.5 < k.skewness() < 2.5
        assert k.kurtosis() > 3

    def test_lower_orders_agree(self, normal_samples):
        v = Variance.from_iterable(normal_samples)
        s = Skewness.from_iterable(normal_samples)
        k = Kurtosis.from_iterable(normal_samples)
        assert v.to_state() == {key: s.to_state()[key] for key in v.to_state()}
        assert s.to_state() == {key: k.to_state()[key] for key in s.to_state()}


class TestInsufficientData:
    def test_single_sample(self):
        k = Kurtosis.from_iterable([4.0])
        assert k.mean() == 4.0
        assert (k.m2, k.m3, k.m4) == (0, 0, 0)
        with pytest.raises(InsufficientDataError) as exc_info:
            k.sample_variance()
        assert exc_info.value.required == 2
        assert exc_info.value.available == 1
        with pytest.raises(InsufficientDataError):
            k.population_variance()

    def test_thresholds(self):
        k = Kurtosis.from_iterable([1.0, 2.0])
        assert k.sample_variance() == pytest.approx(0.5)
        with pytest.raises(InsufficientDataError):
            k.skewness()
        k.update(4.0)
        k.skewness()
        with pytest.raises(InsufficientDataError):
            k.kurtosis()
        k.update(8.0)
        k.kurtosis()

    def test_identical_samples(self):
        k = Kurtosis.from_iterable([3.5] * 10)
        assert k.population_variance() == 0
        assert math.isnan(k.skewness())
        assert math.isnan(k.kurtosis())


class TestMomentMerge:
    def test_merge_equivalence(self, skewed_samples):
        whole = Kurtosis.from_iterable(skewed_samples)
        for split in (1, 3, 700, 1999):
            a = Kurtosis.from_iterable(skewed_samples[:split])
            b = Kurtosis.from_iterable(skewed_samples[split:])
            a.merge(b)
            _assert_same_moments(a, whole)

    def test_merge_is_commutative(self, skewed_samples):
        a = Kurtosis.from_iterable(skewed_samples[:300])
        b = Kurtosis.from_iterable(skewed_samples[300:])
        _assert_same_moments(a + b, b + a, rel=1e-10)

    def test_merge_is_associative(self, normal_samples):
        a = Kurtosis.from_iterable(normal_samples[:200])
        b = Kurtosis.from_iterable(normal_samples[200:650])
        c = Kurtosis.from_iterable(normal_samples[650:])
        _assert_same_moments((a + b) + c, a + (b + c), rel=1e-10)

    def test_many_partitions(self, normal_samples):
        parts = [Kurtosis.from_iterable(normal_samples[i::7]) for i in range(7)]
        _assert_same_moments(merge_all(parts), Kurtosis.from_iterable(normal_samples))

    def test_merge_with_empty(self, normal_samples):
        full = Kurtosis.from_iterable(normal_samples)
        empty = Kurtosis()
        empty.merge(full)
        assert empty == full
        same = full + Kurtosis()
        assert same == full

    def test_fraction_merge_is_exact(self, fraction_samples):
        whole = Kurtosis.from_iterable(fraction_samples)
        for split in (1, 17, 59):
            a = Kurtosis.from_iterable(fraction_samples[:split])
            b = Kurtosis.from_iterable(fraction_samples[split:])
            a.merge(b)
            assert a == whole

    def test_different_orders_fail(self):
        with pytest.raises(IncompatibleMergeError):
            Kurtosis().merge(Skewness())
        with pytest.raises(IncompatibleMergeError):
            Variance().merge(Kurtosis())


class TestOrderInvariance:
    def test_shuffled_floats(self, skewed_samples):
        shuffled = list(skewed_samples)
        random.Random(7).shuffle(shuffled)
        _assert_same_moments(
            Kurtosis.from_iterable(shuffled),
            Kurtosis.from_iterable(skewed_samples),
        )

    def test_shuffled_fractions_exact(self, fraction_samples):
        shuffled = list(fraction_samples)
        random.Random(7).shuffle(shuffled)
        assert Kurtosis.from_iterable(shuffled) == Kurtosis.from_iterable(fraction_samples)

    def test_m2_never_negative(self, normal_samples):
        v = Variance()
        for x in normal_samples:
            v.update(x)
            assert v.m2 >= 0


class TestMomentState:
    def test_state_round_trip(self, normal_samples):
        k = Kurtosis.from_iterable(normal_samples)
        state = k.to_state()
        assert set(state) == {"count", "mean", "m2", "m3", "m4"}
        assert Kurtosis.from_state(state) == k
