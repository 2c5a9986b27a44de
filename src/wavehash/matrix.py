"""Matrix helpers used between the wavelet transform and the hash threshold."""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from .errors import EmptyInputError, RegionOutOfRangeError


ArrayLike = Union[np.ndarray, Sequence[float], Sequence[Sequence[float]]]


def floor_pow2(value: int) -> int:
    """Return the largest power of two that is <= *value*.

    ``floor_pow2(0)`` is 0. Negative values are rejected.
    """

    value = int(value)
    if value < 0:
        raise ValueError(f"floor_pow2 expects a non-negative integer, got {value}")
    if value == 0:
        return 0
    return 1 << (value.bit_length() - 1)


def is_pow2(value: int) -> bool:
    """True for 1, 2, 4, 8, ..."""

    return value > 0 and value & (value - 1) == 0


def flatten(matrix: ArrayLike) -> np.ndarray:
    """Concatenate the rows of *matrix* into a new 1-D array (row-major)."""

    arr = np.asarray(matrix, dtype=np.float64)
    if arr.size == 0:
        raise EmptyInputError("cannot flatten an empty matrix")
    return arr.flatten()


def median(values: ArrayLike) -> float:
    """Median of *values*.

    Odd length returns the middle element of a sorted copy; even length
    returns the mean of the two middle elements. The input is never
    reordered.
    """

    ordered = np.sort(np.asarray(values, dtype=np.float64), axis=None)
    n = ordered.size
    if n == 0:
        raise EmptyInputError("median of an empty sequence is undefined")
    mid = n // 2
    if n % 2 == 1:
        return float(ordered[mid])
    return float(0.5 * (ordered[mid - 1] + ordered[mid]))


def extract_square_region(matrix: ArrayLike, width: int) -> np.ndarray:
    """Copy the top-left ``width x width`` block of *matrix*.

    Raises
    ------
    RegionOutOfRangeError
        If *width* is negative or larger than either side of *matrix*.
    """

    arr = np.asarray(matrix, dtype=np.float64)
    if arr.ndim != 2:
        raise RegionOutOfRangeError(f"expected a 2-D matrix, got {arr.ndim} dimension(s)")
    rows, cols = arr.shape
    if width < 0 or width > rows or width > cols:
        raise RegionOutOfRangeError(
            f"cannot extract a {width}x{width} region from a {rows}x{cols} matrix"
        )
    return arr[:width, :width].copy()
