import io

import numpy as np
import pytest
from PIL import Image
from PIL.PngImagePlugin import PngInfo


def png_bytes(img, pnginfo=None):
    buf = io.BytesIO()
    img.save(buf, format='PNG', pnginfo=pnginfo)
    return buf.getvalue()


@pytest.fixture
def rgb_array():
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(12, 16, 3), dtype=np.uint8)


@pytest.fixture
def neutral_png(rgb_array):
    info = PngInfo()
    info.add_text('Comment', 'holiday photo')
    return png_bytes(Image.fromarray(rgb_array), info)


@pytest.fixture
def rgba_png():
    rng = np.random.default_rng(3)
    arr = rng.integers(0, 256, size=(9, 11, 4), dtype=np.uint8)
    return png_bytes(Image.fromarray(arr))


@pytest.fixture
def gray_png():
    arr = np.tile(np.arange(0, 240, 15, dtype=np.uint8), (10, 1))
    return png_bytes(Image.fromarray(arr))


@pytest.fixture
def palette_png():
    rng = np.random.default_rng(5)
    indices = rng.integers(0, 256, size=(8, 10), dtype=np.uint8)
    img = Image.frombytes('P', (10, 8), indices.tobytes())
    #full 256 entry palette keeps the bit depth at 8
    img.putpalette([v for i in range(256) for v in (i, 255 - i, (i * 7) % 256)])
    return png_bytes(img)


@pytest.fixture
def png_file(tmp_path, neutral_png):
    path = tmp_path / 'cover.png'
    path.write_bytes(neutral_png)
    return path
