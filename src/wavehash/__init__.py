"""wavehash package.

Perceptual image fingerprints ("wavelet hashes") built from a multi-level
2D Haar wavelet transform of the image luminance, plus a small CLI for
hashing folders and matching near-duplicate images.
"""

from .errors import DimensionMismatchError, EmptyInputError, RegionOutOfRangeError, WaveHashError
from .hashing import ImageHash, hamming_distance, hash_bits, wavelet_hash, whash_path
from .luminance import grayscale, luminance
from .matrix import extract_square_region, flatten, floor_pow2, median
from .wavelets import HAAR, dwt1d, dwt2d, idwt1d, idwt2d

__all__ = [
    "HAAR",
    "DimensionMismatchError",
    "EmptyInputError",
    "ImageHash",
    "RegionOutOfRangeError",
    "WaveHashError",
    "dwt1d",
    "dwt2d",
    "extract_square_region",
    "flatten",
    "floor_pow2",
    "grayscale",
    "hamming_distance",
    "hash_bits",
    "idwt1d",
    "idwt2d",
    "luminance",
    "median",
    "wavelet_hash",
    "whash_path",
]
__version__ = "0.1.0"
