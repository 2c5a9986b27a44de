import numpy as np
import pytest
from PIL import Image

from wavehash.luminance import grayscale, luminance


def test_luma_weights():
    px = np.array([[[255, 0, 0], [0, 255, 0], [0, 0, 255], [255, 255, 255]]], dtype=np.uint8)
    out = luminance(px)
    assert out.shape == (1, 4)
    np.testing.assert_allclose(out[0], [0.299, 0.587, 0.114, 1.0], rtol=0, atol=1e-12)


def test_alpha_premultiplies_colour():
    rgb = np.full((1, 3, 3), 200, dtype=np.uint8)
    alpha = np.array([[[255], [0], [51]]], dtype=np.uint8)
    out = luminance(np.concatenate([rgb, alpha], axis=-1))
    expected = luminance(rgb)[0, 0]
    np.testing.assert_allclose(out[0], [expected, 0.0, expected * 0.2], rtol=0, atol=1e-12)


def test_single_channel_and_custom_range():
    out = luminance(np.array([[0, 32768], [65535, 65535]]), max_value=65535.0)
    np.testing.assert_allclose(out, [[0.0, 32768 / 65535], [1.0, 1.0]])


def test_bad_shape():
    with pytest.raises(ValueError):
        luminance(np.zeros((2, 2, 2)))


def test_grayscale_picks_power_of_two_square():
    img = Image.new("RGB", (100, 60), (10, 20, 30))
    out = grayscale(img)
    assert out.shape == (32, 32)
    expected = (0.299 * 10 + 0.587 * 20 + 0.114 * 30) / 255
    np.testing.assert_allclose(out, expected, atol=0.005)


def test_grayscale_explicit_scale_and_mode():
    img = Image.new("L", (20, 20), 255)
    out = grayscale(img, scale=64)
    assert out.shape == (64, 64)
    np.testing.assert_allclose(out, 1.0, atol=0.005)


@pytest.mark.parametrize("scale", [0, 48])
def test_grayscale_rejects_bad_scale(scale):
    with pytest.raises(ValueError):
        grayscale(Image.new("RGB", (64, 64)), scale=scale)


def _ramp16(side=64):
    column = np.linspace(0, 65535, side).astype(np.uint16)
    return np.tile(column[:, None], (1, side))


def test_grayscale_keeps_16_bit_range():
    arr = _ramp16()
    img = Image.fromarray(arr)
    assert img.mode == "I;16"
    out = grayscale(img, scale=64)
    np.testing.assert_allclose(out, arr / 65535.0, rtol=0, atol=1e-6)
    assert out[10, 0] == pytest.approx(0.1587, abs=1e-4)


def test_grayscale_32_bit_integer_image():
    img = Image.fromarray(_ramp16().astype(np.int32))
    assert img.mode == "I"
    out = grayscale(img, scale=32)
    assert out.shape == (32, 32)
    assert -0.01 < out.min() < 0.1
    assert 0.9 < out.max() < 1.01


def test_grayscale_float_image_is_already_normalised():
    img = Image.fromarray(np.full((16, 16), 0.25, dtype=np.float32))
    assert img.mode == "F"
    np.testing.assert_allclose(grayscale(img), 0.25, atol=1e-6)


def test_grayscale_transparent_pixels_are_black():
    img = Image.new("RGBA", (32, 32), (255, 255, 255, 0))
    np.testing.assert_allclose(grayscale(img), 0.0, atol=1e-9)


def test_grayscale_opaque_alpha_matches_rgb():
    la = Image.new("LA", (32, 32), (200, 255))
    rgb = Image.new("RGB", (32, 32), (200, 200, 200))
    np.testing.assert_allclose(grayscale(la), grayscale(rgb), atol=0.005)


def test_grayscale_palette_transparency():
    img = Image.new("P", (16, 16), 0)
    img.putpalette([255, 255, 255] * 256)
    img.info["transparency"] = 0
    np.testing.assert_allclose(grayscale(img, resample=Image.Resampling.NEAREST), 0.0, atol=1e-9)
