import numpy as np
import pytest
from PIL import Image


def make_gradient(size, horizontal=False):
    """RGB image whose brightness ramps steeply along one axis and gently along the other."""
    y, x = np.mgrid[0:size, 0:size].astype(np.float64) * (256.0 / size)
    if horizontal:
        x, y = y, x
    v = np.clip(y * 0.75 + x * 0.09, 0, 255).astype(np.uint8)
    return Image.fromarray(np.stack([v, v, v], axis=-1), mode="RGB")


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def image_dirs(tmp_path):
    """A reference folder with two distinct images and a query folder with a resized copy of one."""
    ref = tmp_path / "reference"
    qry = tmp_path / "query"
    ref.mkdir()
    qry.mkdir()
    make_gradient(256).save(ref / "vertical.png")
    make_gradient(256, horizontal=True).save(ref / "horizontal.png")
    make_gradient(256).resize((180, 180), Image.Resampling.BILINEAR).save(qry / "edited.jpg", quality=90)
    return ref, qry
