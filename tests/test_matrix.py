import numpy as np
import pytest

from wavehash.errors import EmptyInputError, RegionOutOfRangeError
from wavehash.matrix import extract_square_region, flatten, floor_pow2, is_pow2, median


@pytest.mark.parametrize("value, expected", [(0, 0), (1, 1), (2, 2), (5, 4), (8, 8), (17, 16), (1023, 512)])
def test_floor_pow2(value, expected):
    assert floor_pow2(value) == expected


def test_floor_pow2_rejects_negative():
    with pytest.raises(ValueError):
        floor_pow2(-1)


def test_is_pow2():
    assert [n for n in range(0, 20) if is_pow2(n)] == [1, 2, 4, 8, 16]


def test_median_odd_and_even():
    assert median([1, 2, 3]) == 2
    assert median([1, 2, 3, 4]) == 2.5
    assert median([3.0, 1.0, 2.0]) == 2.0
    assert median([7]) == 7


def test_median_does_not_reorder_input():
    values = [5.0, 1.0, 4.0, 2.0]
    arr = np.array(values)
    assert median(values) == 3.0
    assert median(arr) == 3.0
    assert values == [5.0, 1.0, 4.0, 2.0]
    assert arr.tolist() == [5.0, 1.0, 4.0, 2.0]


def test_median_of_matrix_uses_all_elements():
    assert median([[4.0, 1.0], [3.0, 2.0]]) == 2.5


def test_median_empty():
    with pytest.raises(EmptyInputError):
        median([])


def test_flatten_row_major():
    out = flatten([[1, 2], [3, 4]])
    assert out.tolist() == [1.0, 2.0, 3.0, 4.0]


def test_flatten_returns_copy():
    m = np.arange(4, dtype=np.float64).reshape(2, 2)
    flat = flatten(m)
    flat[0] = 99
    assert m[0, 0] == 0


def test_flatten_empty():
    with pytest.raises(EmptyInputError):
        flatten(np.zeros((0, 0)))


def test_extract_full_width_is_equal():
    m = np.arange(16, dtype=np.float64).reshape(4, 4)
    assert np.array_equal(extract_square_region(m, 4), m)


def test_extract_top_left_copy():
    m = np.arange(16, dtype=np.float64).reshape(4, 4)
    region = extract_square_region(m, 2)
    assert region.tolist() == [[0.0, 1.0], [4.0, 5.0]]
    region[0, 0] = -1
    assert m[0, 0] == 0


@pytest.mark.parametrize("width", [5, -1])
def test_extract_out_of_range(width):
    with pytest.raises(RegionOutOfRangeError):
        extract_square_region(np.zeros((4, 4)), width)
