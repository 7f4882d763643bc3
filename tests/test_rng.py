"""Tests for the seeded RNG and Poisson sampler."""

import math

import pytest

from iterative_ml.rng import Poisson, Random


class TestRandom:
    def test_same_seed_same_sequence(self) -> None:
        a = Random(42)
        b = Random(42)
        assert [a.next() for _ in range(50)] == [b.next() for _ in range(50)]

    def test_different_seeds_diverge(self) -> None:
        a = Random(1)
        b = Random(2)
        assert [a.next() for _ in range(5)] != [b.next() for _ in range(5)]

    def test_reset_replays_sequence(self) -> None:
        rng = Random(7)
        first = [rng.next() for _ in range(20)]
        rng.next_double()
        rng.randn(3)
        rng.reset()
        assert [rng.next() for _ in range(20)] == first

    def test_next_matches_sine_formula(self) -> None:
        rng = Random(3)
        x = math.sin(3) * 10000
        assert rng.next() == pytest.approx((x - math.floor(x)) * 2 - 1)
        assert rng.seed == 4

    @pytest.mark.parametrize("seed", [1, 2, 17, 1000, 123456])
    def test_next_strictly_within_unit_interval(self, seed: int) -> None:
        rng = Random(seed)
        for _ in range(2000):
            value = rng.next()
            assert -1 < value < 1

    def test_next_double_within_zero_one(self) -> None:
        rng = Random(5)
        for _ in range(2000):
            value = rng.next_double()
            assert 0 <= value <= 1

    def test_next_double_rescales_next(self) -> None:
        a = Random(9)
        b = Random(9)
        assert a.next_double() == pytest.approx(0.5 * b.next() + 0.5)

    def test_randn_fills_from_next(self) -> None:
        a = Random(11)
        b = Random(11)
        values = a.randn(6)
        assert len(values) == 6
        assert list(values) == [b.next() for _ in range(6)]

    def test_falsy_seed_falls_back_to_one(self) -> None:
        assert Random(0).next() == Random(1).next()
        assert Random(None).next() == Random().next()
        rng = Random(0)
        rng.next()
        rng.reset()
        assert rng.seed == 1


class TestPoisson:
    def test_sample_mean_matches_rate(self) -> None:
        sampler = Poisson(3)
        n = 100_000
        mean = sum(sampler.sample() for _ in range(n)) / n
        assert abs(mean - 3) < 0.05

    def test_samples_are_non_negative_integers(self) -> None:
        sampler = Poisson(1.5, seed=4)
        draws = [sampler.sample() for _ in range(500)]
        assert all(isinstance(d, int) and d >= 0 for d in draws)

    def test_zero_rate_always_zero(self) -> None:
        sampler = Poisson(0)
        assert {sampler.sample() for _ in range(100)} == {0}

    def test_same_seed_reproducible_and_stream_continues(self) -> None:
        a = Poisson(2, seed=8)
        b = Poisson(2, seed=8)
        first = [a.sample() for _ in range(30)]
        assert first == [b.sample() for _ in range(30)]
        assert a.rng.seed > 8

    def test_negative_rate_rejected(self) -> None:
        with pytest.raises(ValueError):
            Poisson(-1)
