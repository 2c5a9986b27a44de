"""Haar discrete wavelet transform.

The transform is the plain (non-normalised) Haar pair: the low-pass filter
averages two neighbouring samples and the high-pass filter takes half their
difference. A forward pass over a signal of length ``n`` lays the result out
as::

    [ approximation (n/2) | detail (n/2) ]

The 2D transform applies that separably, first over rows and then over
columns, and repeats on the shrinking top-left approximation block for each
extra level. Detail coefficients of earlier levels stay where they are, which
is what lets :func:`idwt2d` undo the whole thing.

Hash compatibility depends on the arithmetic being exactly
``lp[0]*x[k] + lp[1]*x[k+1]`` (and the same for ``hp``), so don't "simplify"
the forward pass into ``(x[k] + x[k+1]) / 2``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import MutableSequence, Tuple, Union

import numpy as np

from .errors import DimensionMismatchError


@dataclass(frozen=True)
class WaveletCoefficients:
    """Two-tap analysis filters."""

    low_pass: Tuple[float, float]
    high_pass: Tuple[float, float]


# https://wavelets.pybytes.com/wavelet/haar/
HAAR = WaveletCoefficients(low_pass=(0.5, 0.5), high_pass=(0.5, -0.5))


Signal = Union[np.ndarray, MutableSequence[float]]


def _analyze(block: np.ndarray, axis: int) -> None:
    """Forward Haar pass along *axis*, written back into *block*."""
    moved = np.moveaxis(block, axis, 0)
    half = moved.shape[0] // 2
    even = moved[0::2]
    odd = moved[1::2]
    lp, hp = HAAR.low_pass, HAAR.high_pass
    low = lp[0] * even + lp[1] * odd
    high = hp[0] * even + hp[1] * odd
    moved[:half] = low
    moved[half:] = high


def _synthesize(block: np.ndarray, axis: int) -> None:
    """Inverse of :func:`_analyze`.

    Solves the 2x2 analysis system ``a = lp0*x + lp1*y``,
    ``d = hp0*x + hp1*y`` for ``x`` and ``y``. With the Haar taps this
    reduces to ``x = a + d`` and ``y = a - d``.
    """
    moved = np.moveaxis(block, axis, 0)
    half = moved.shape[0] // 2
    approx = moved[:half].copy()
    detail = moved[half:].copy()
    lp, hp = HAAR.low_pass, HAAR.high_pass
    det = lp[0] * hp[1] - lp[1] * hp[0]
    moved[0::2] = (hp[1] * approx - lp[1] * detail) / det
    moved[1::2] = (lp[0] * detail - hp[0] * approx) / det


def _check_signal(arr: np.ndarray) -> None:
    if arr.ndim != 1:
        raise DimensionMismatchError(f"expected a 1-D signal, got shape {arr.shape}")
    if arr.shape[0] % 2:
        raise DimensionMismatchError(
            f"Haar transform needs an even-length signal, got length {arr.shape[0]}"
        )


def _run_1d(data: Signal, step) -> np.ndarray:
    if isinstance(data, np.ndarray) and np.issubdtype(data.dtype, np.floating):
        _check_signal(data)
        step(data, 0)
        return data
    arr = np.array(data, dtype=np.float64)
    _check_signal(arr)
    step(arr, 0)
    if isinstance(data, list):
        data[:] = arr.tolist()
    return arr


def dwt1d(data: Signal) -> np.ndarray:
    """Forward 1D Haar transform of an even-length signal.

    Float arrays and lists are overwritten in place. The transformed signal
    is also returned; for integer arrays that is the only place it ends up.

    Raises
    ------
    DimensionMismatchError
        If the signal isn't 1-D or its length is odd.
    """

    return _run_1d(data, _analyze)


def idwt1d(data: Signal) -> np.ndarray:
    """Inverse of :func:`dwt1d`, with the same in-place rules."""

    return _run_1d(data, _synthesize)


def _as_matrix(data) -> np.ndarray:
    if isinstance(data, np.ndarray) and np.issubdtype(data.dtype, np.floating):
        return data
    return np.array(data, dtype=np.float64)


def _check_levels(arr: np.ndarray, levels: int) -> int:
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise DimensionMismatchError(f"expected a square matrix, got shape {arr.shape}")
    if levels < 0:
        raise DimensionMismatchError(f"levels must be >= 0, got {levels}")
    dims = arr.shape[0]
    if dims % (1 << levels):
        raise DimensionMismatchError(
            f"a {dims}x{dims} matrix can't be halved {levels} time(s)"
        )
    return dims


def dwt2d(data, levels: int) -> np.ndarray:
    """Forward 2D Haar transform, *levels* deep.

    Level ``k`` works on the top-left ``dims >> k`` square: every row of it
    first, then every column of the row-transformed result. After the call
    the top-left ``dims >> levels`` block holds the approximation
    coefficients.

    Float arrays are transformed in place and returned; other input is
    copied to float64 first.

    Raises
    ------
    DimensionMismatchError
        If *data* isn't square, *levels* is negative, or the side isn't
        divisible by ``2**levels``.
    """

    arr = _as_matrix(data)
    dims = _check_levels(arr, levels)
    for level in range(levels):
        curdims = dims >> level
        block = arr[:curdims, :curdims]
        _analyze(block, 1)  # rows
        _analyze(block, 0)  # columns
    return arr


def idwt2d(data, levels: int) -> np.ndarray:
    """Undo :func:`dwt2d` with the same *levels*.

    Levels are processed coarsest first and, inside a level, columns are
    restored before rows.
    """

    arr = _as_matrix(data)
    dims = _check_levels(arr, levels)
    for level in reversed(range(levels)):
        curdims = dims >> level
        block = arr[:curdims, :curdims]
        _synthesize(block, 0)  # columns
        _synthesize(block, 1)  # rows
    return arr
