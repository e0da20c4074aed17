import io

import numpy as np
import pytest
from PIL import Image

from moonphase.assets import TextureProvider


PNG_SIGNATURE = bytes([0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A])


def is_png(data: bytes) -> bool:
    return len(data) >= len(PNG_SIGNATURE) and data[: len(PNG_SIGNATURE)] == PNG_SIGNATURE


def png_pixels(data: bytes) -> np.ndarray:
    with Image.open(io.BytesIO(data)) as img:
        return np.array(img.convert("RGB"))


@pytest.fixture
def no_textures(tmp_path):
    """Texture provider that searches only empty directories."""
    return TextureProvider(module_dir=str(tmp_path / "module"), host_dirs=[str(tmp_path / "host")])


@pytest.fixture
def red_textures(tmp_path):
    """Texture provider whose packaged fullMoon.png is solid red."""
    module_dir = tmp_path / "module"
    module_dir.mkdir()
    Image.new("RGB", (64, 32), (255, 0, 0)).save(module_dir / "fullMoon.png")
    return TextureProvider(module_dir=str(module_dir), host_dirs=[])
