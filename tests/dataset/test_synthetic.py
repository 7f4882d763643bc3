import math

import numpy as np
import pytest

from iterative_ml.dataset import LocalContext, random_svm_data, random_svm_line, svm_label
from iterative_ml.rng import Random


def sin_draw(seed: int) -> float:
    x = math.sin(seed) * 10000
    return (x - math.floor(x)) * 2 - 1


def test_random_svm_line_shape_and_label() -> None:
    rng = Random(5)
    label, features = random_svm_line(rng, 4)
    assert label in (-1, 1)
    assert features.shape == (4,)
    assert np.all(np.abs(features) < 1)
    # D + 1 draws consumed
    assert rng.seed == 10


def test_random_svm_line_uses_first_draw_for_label() -> None:
    expected = Random(9).randn(3)
    label, features = random_svm_line(Random(9), 2)
    assert label == svm_label(expected[0])
    assert list(features) == list(expected[1:])


def test_random_svm_data_reproducible_across_partitionings() -> None:
    with LocalContext(max_workers=2) as ctx:
        one = random_svm_data(ctx, 25, 3, seed=7, n_partitions=1).collect().result(timeout=5)
        four = random_svm_data(ctx, 25, 3, seed=7, n_partitions=4).collect().result(timeout=5)
    assert len(one) == 25
    for (la, fa), (lb, fb) in zip(one, four):
        assert la == lb
        assert np.array_equal(fa, fb)
    assert {label for label, _ in one} <= {-1, 1}


def test_random_svm_data_rejects_bad_dimension() -> None:
    with LocalContext() as ctx:
        with pytest.raises(ValueError):
            random_svm_data(ctx, 10, 0)


def test_svm_label_rounds_halves_up() -> None:
    assert svm_label(0.5) == 1
    assert svm_label(-0.5) == 1
    assert svm_label(0.49) == -1
    assert svm_label(-1.0) == 1
    assert svm_label(0.0) == -1


def test_default_seed_records_follow_sine_sequence() -> None:
    D = 3
    with LocalContext() as ctx:
        records = random_svm_data(ctx, 2, D).collect().result(timeout=5)
    for i, (label, features) in enumerate(records):
        draws = [sin_draw(i * (D + 1) + j) for j in range(D + 1)]
        assert label == svm_label(draws[0])
        assert features.tolist() == pytest.approx(draws[1:])
    # Record 0 starts at seed 0 itself, which draws exactly -1.
    assert records[0][0] == 1
    # Record 1 owns seed D + 1; record 0 stops before it.
    assert sin_draw(D + 1) not in records[0][1].tolist()


def test_seed_offsets_every_record() -> None:
    D = 2
    with LocalContext() as ctx:
        shifted = random_svm_data(ctx, 1, D, seed=5).collect().result(timeout=5)
    _, features = shifted[0]
    assert features.tolist() == pytest.approx([sin_draw(6), sin_draw(7)])
