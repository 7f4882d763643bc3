import pytest

from iterative_ml.models import cksum, zeros
from iterative_ml.models.vector import check_dimension


@pytest.mark.parametrize("n", [0, 1, 5, 100])
def test_zeros_length_and_values(n: int) -> None:
    vec = zeros(n)
    assert len(vec) == n
    assert all(v == 0 for v in vec)


def test_zeros_returns_fresh_vectors() -> None:
    a = zeros(3)
    b = zeros(3)
    a[0] = 1.0
    assert b[0] == 0


def test_zeros_rejects_negative_length() -> None:
    with pytest.raises(ValueError):
        zeros(-1)


def test_cksum_matches_rolling_hash() -> None:
    assert cksum("") == 0
    assert cksum("a") == 97
    assert cksum("ab") == 97 * 31 + 98
    assert cksum(12) == ord("1") * 31 + ord("2")
    assert cksum("hello") == 99162322


def test_cksum_wraps_to_32_bits_and_is_non_negative() -> None:
    # Wraps to exactly -2**31 before the absolute value.
    assert cksum("polygenelubricants") == 2**31
    for value in ["some longer text " * 20, [1, 2, 3], {"k": "v"}, 3.14159]:
        h = cksum(value)
        assert 0 <= h <= 2**31
        assert cksum(value) == h


def test_check_dimension() -> None:
    check_dimension([1.0, 2.0], 2)
    with pytest.raises(ValueError):
        check_dimension([1.0], 2, "weights")
