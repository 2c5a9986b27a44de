"""Wavelet hash (wHash) computation.

The wHash of an image is built like this:

1) Resize to a power-of-two square (the largest one that fits the shorter
   side, but never smaller than the hash) and convert to luminance
2) Run a multi-level 2D Haar transform until the approximation block is
   ``hash_size x hash_size``
3) Take that block and its median
4) For each coefficient in row-major order, set bit=1 if it is >= the median
5) Pack the bits into an integer, first bit in the most significant position

The Hamming distance between two hashes of the same size is the number of
differing bits. Smaller distance => more visually similar.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

import numpy as np
from PIL import Image

from .errors import DimensionMismatchError
from .luminance import DEFAULT_RESAMPLE, grayscale
from .matrix import extract_square_region, flatten, floor_pow2, is_pow2, median
from .wavelets import dwt2d


logger = logging.getLogger(__name__)

DEFAULT_HASH_SIZE = 8

# Common extensions in real-world photo pipelines. Add more if you need.
DEFAULT_EXTS = {
    ".jpg",
    ".jpeg",
    ".png",
    ".bmp",
    ".tiff",
    ".tif",
    ".webp",
    ".gif",
}


@dataclass(frozen=True)
class ImageHash:
    """A computed wHash for a specific image file path."""

    path: Path
    whash: int
    hash_size: int = DEFAULT_HASH_SIZE


def iter_images(root: Path, exts: Sequence[str] = tuple(DEFAULT_EXTS)) -> Iterator[Path]:
    """Recursively yield image file paths under *root*, sorted per folder.

    Extensions are compared case-insensitively.
    """

    root = root.expanduser().resolve()
    exts_lc = {e.lower() for e in exts}
    for folder, dirs, files in os.walk(root):
        dirs.sort()
        for name in sorted(files):
            if Path(name).suffix.lower() in exts_lc:
                yield Path(folder) / name


def check_hash_size(hash_size: int) -> int:
    """Return *hash_size* if it is a power of two >= 2, else raise ``ValueError``."""

    if not is_pow2(hash_size) or hash_size < 2:
        raise ValueError(f"hash_size must be a power of two >= 2, got {hash_size}")
    return hash_size


def hash_bits(matrix, hash_size: int = DEFAULT_HASH_SIZE) -> np.ndarray:
    """Threshold the low-frequency wavelet coefficients of *matrix*.

    Parameters
    ----------
    matrix:
        Square luminance matrix whose side is a power of two and at least
        *hash_size*. It is not modified.
    hash_size:
        Side of the approximation block to keep.

    Returns
    -------
    numpy.ndarray
        Boolean vector of ``hash_size**2`` bits in row-major order.
    """

    check_hash_size(hash_size)
    data = np.array(matrix, dtype=np.float64)
    if data.ndim != 2 or data.shape[0] != data.shape[1]:
        raise DimensionMismatchError(f"expected a square matrix, got shape {data.shape}")
    side = data.shape[0]
    if not is_pow2(side) or side < hash_size:
        raise DimensionMismatchError(
            f"matrix side must be a power of two >= {hash_size}, got {side}"
        )

    levels = side.bit_length() - hash_size.bit_length()
    dwt2d(data, levels)
    low = flatten(extract_square_region(data, hash_size))
    return low >= median(low)


def pack_bits(bits: Iterable[bool]) -> int:
    """Pack *bits* into an int, MSB first."""

    h = 0
    for bit in bits:
        h = (h << 1) | int(bool(bit))
    return h


def wavelet_hash(
    img: Image.Image,
    hash_size: int = DEFAULT_HASH_SIZE,
    resample: Image.Resampling = DEFAULT_RESAMPLE,
) -> int:
    """Compute the wHash of a Pillow image as an integer of ``hash_size**2`` bits."""

    check_hash_size(hash_size)
    scale = max(floor_pow2(min(img.size)), hash_size)
    matrix = grayscale(img, scale=scale, resample=resample)
    return pack_bits(hash_bits(matrix, hash_size))


def whash_path(
    path: Path,
    hash_size: int = DEFAULT_HASH_SIZE,
    resample: Image.Resampling = DEFAULT_RESAMPLE,
) -> Optional[int]:
    """Compute the wHash for an image file.

    Returns ``None`` if the file can't be opened/decoded as an image, is
    too large for Pillow's decompression-bomb guard, or has a pixel mode
    that can't be converted.
    """

    try:
        with Image.open(path) as img:
            img.load()
            return wavelet_hash(img, hash_size=hash_size, resample=resample)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        logger.warning("Skipping unreadable image %s: %s", path, exc)
        return None


def format_hash(whash: int, hash_size: int = DEFAULT_HASH_SIZE) -> str:
    """Hex string for *whash*, zero-padded to the full hash width."""

    digits = (hash_size * hash_size + 3) // 4
    return f"{whash:0{digits}x}"


def parse_hash(text: str) -> int:
    """Inverse of :func:`format_hash`."""

    return int(text, 16)


def hamming_distance(a: int, b: int) -> int:
    """Number of differing bits between two hashes of the same size."""

    return (a ^ b).bit_count()
