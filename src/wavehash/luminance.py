"""Turn pixels into the single-channel matrix the wavelet transform consumes."""

from __future__ import annotations

from typing import Optional

import numpy as np
from PIL import Image

from .matrix import floor_pow2, is_pow2


# ITU-R BT.601 luma weights. Changing them changes every hash.
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

DEFAULT_RESAMPLE = Image.Resampling.BICUBIC

# Single-channel modes wider than 8 bits, with the value that maps to 1.0.
# 32-bit "I" images are what Pillow opens 16-bit PNGs as. "F" is taken as
# already normalised.
WIDE_MODE_RANGES = {
    "I;16": 65535.0,
    "I;16L": 65535.0,
    "I;16B": 65535.0,
    "I;16N": 65535.0,
    "I": 65535.0,
    "F": 1.0,
}


def luminance(pixels, max_value: float = 255.0) -> np.ndarray:
    """Per-pixel luminance scaled to ``[0, 1]``.

    Parameters
    ----------
    pixels:
        ``H x W x 3`` (RGB) or ``H x W x 4`` (RGBA) array, or an ``H x W``
        array that already holds a single channel. With an alpha channel the
        colour is premultiplied, so fully transparent pixels count as black.
    max_value:
        Largest representable channel value (255 for 8-bit images).

    Returns
    -------
    numpy.ndarray
        ``H x W`` float64 matrix.
    """

    arr = np.asarray(pixels, dtype=np.float64)
    if arr.ndim == 2:
        return arr / max_value
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"expected an HxW, HxWx3 or HxWx4 pixel grid, got shape {arr.shape}")
    r = arr[:, :, 0]
    g = arr[:, :, 1]
    b = arr[:, :, 2]
    if arr.shape[2] == 4:
        alpha = arr[:, :, 3] / max_value
        r, g, b = r * alpha, g * alpha, b * alpha
    wr, wg, wb = LUMA_WEIGHTS
    return (wr * r + wg * g + wb * b) / max_value


def grayscale(
    img: Image.Image,
    scale: Optional[int] = None,
    resample: Image.Resampling = DEFAULT_RESAMPLE,
) -> np.ndarray:
    """Resize *img* to a power-of-two square and return its luminance.

    16-bit, 32-bit integer and float images are resized as floats in their
    own range (see ``WIDE_MODE_RANGES``). Everything else goes through 8-bit
    RGB, or RGBA when the image carries transparency.

    Parameters
    ----------
    img:
        Any Pillow image.
    scale:
        Side of the output square. Defaults to the largest power of two that
        fits the shorter image side.
    resample:
        Pillow resampling filter used for the resize.
    """

    if scale is None:
        scale = floor_pow2(min(img.size))
    if not is_pow2(scale):
        raise ValueError(f"scale must be a positive power of two, got {scale}")

    if img.mode in WIDE_MODE_RANGES:
        native = Image.fromarray(np.asarray(img, dtype=np.float32))
        resized = native.resize((scale, scale), resample=resample)
        return luminance(np.asarray(resized), max_value=WIDE_MODE_RANGES[img.mode])

    has_alpha = "A" in img.getbands() or "transparency" in img.info
    resized = img.convert("RGBA" if has_alpha else "RGB").resize((scale, scale), resample=resample)
    return luminance(np.asarray(resized), max_value=255.0)
