import os

import pytest
from PIL import Image

from moonphase.assets import TextureProvider, host_resource_dirs, load_moon_texture


@pytest.fixture
def dirs(tmp_path):
    module_dir = tmp_path / "module"
    host_dir = tmp_path / "host"
    module_dir.mkdir()
    host_dir.mkdir()
    return module_dir, host_dir


def _save(path, color):
    Image.new("RGB", (4, 2), color).save(path)


def _color(img):
    return img.getpixel((0, 0))


def test_missing_texture_is_none(dirs):
    module_dir, host_dir = dirs
    provider = TextureProvider(str(module_dir), [str(host_dir)])
    assert provider.resolve("fullMoon") is None


def test_nonexistent_directories_are_ignored(tmp_path):
    provider = TextureProvider(str(tmp_path / "nope"), [str(tmp_path / "nothing")])
    assert provider.resolve() is None


def test_module_resource_comes_first(dirs):
    module_dir, host_dir = dirs
    _save(module_dir / "fullMoon.png", (255, 0, 0))
    _save(host_dir / "fullMoon.png", (0, 255, 0))
    img = TextureProvider(str(module_dir), [str(host_dir)]).resolve("fullMoon")
    assert img.mode == "RGB"
    assert _color(img) == (255, 0, 0)


def test_host_resource_file(dirs):
    module_dir, host_dir = dirs
    _save(host_dir / "fullMoon.png", (0, 255, 0))
    img = TextureProvider(str(module_dir), [str(host_dir)]).resolve("fullMoon")
    assert _color(img) == (0, 255, 0)


def test_host_file_beats_named_module_lookup(dirs):
    module_dir, host_dir = dirs
    _save(module_dir / "FullMoon.jpg", (0, 0, 255))
    _save(host_dir / "fullMoon.png", (0, 255, 0))
    img = TextureProvider(str(module_dir), [str(host_dir)]).resolve("fullMoon")
    assert _color(img) == (0, 255, 0)


def test_named_lookup_in_module_resources(dirs):
    module_dir, host_dir = dirs
    _save(module_dir / "FULLMOON.bmp", (0, 0, 255))
    img = TextureProvider(str(module_dir), [str(host_dir)]).resolve("fullMoon")
    assert _color(img) == (0, 0, 255)


def test_named_lookup_in_host_resources(dirs):
    module_dir, host_dir = dirs
    _save(host_dir / "fullmoon.bmp", (9, 9, 9))
    (module_dir / "fullmoon.txt").write_text("not an image")
    img = TextureProvider(str(module_dir), [str(host_dir)]).resolve("fullMoon")
    assert _color(img) == (9, 9, 9)


def test_corrupt_file_falls_through(dirs):
    module_dir, host_dir = dirs
    (module_dir / "fullMoon.png").write_bytes(b"\x89PNG\r\n\x1a\ngarbage")
    _save(host_dir / "fullMoon.png", (0, 255, 0))
    img = TextureProvider(str(module_dir), [str(host_dir)]).resolve("fullMoon")
    assert _color(img) == (0, 255, 0)


def test_all_corrupt_is_none(dirs):
    module_dir, host_dir = dirs
    (module_dir / "fullMoon.png").write_bytes(b"junk")
    (host_dir / "fullMoon.png").write_bytes(b"junk")
    assert TextureProvider(str(module_dir), [str(host_dir)]).resolve("fullMoon") is None


def test_load_moon_texture_uses_provider(dirs):
    module_dir, host_dir = dirs
    _save(module_dir / "fullMoon.png", (1, 2, 3))
    img = load_moon_texture(TextureProvider(str(module_dir), [str(host_dir)]))
    assert _color(img) == (1, 2, 3)


def test_host_resource_dirs_include_user_data_dir():
    dirs = host_resource_dirs()
    assert dirs
    assert all(os.path.isabs(d) for d in dirs)
    assert "moonphase" in dirs[-1]
