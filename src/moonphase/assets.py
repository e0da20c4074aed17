import logging
import os
import os.path
import sys
from typing import Callable, Iterator, List, Optional, Sequence

from appdirs import user_data_dir
from PIL import Image

from .paths import APP_AUTHOR, APP_ID, DATA_DIR, TEXTURE_EXTENSIONS, TEXTURE_NAME


log = logging.getLogger("moonphase.assets")


def host_resource_dirs() -> List[str]:
    """Directories holding resources of the host application.

    These are the directory of the running __main__ script (when there is one)
    and the per-user data directory of this package.
    """
    dirs: List[str] = []
    main_file = getattr(sys.modules.get("__main__"), "__file__", None)
    if main_file:
        dirs.append(os.path.dirname(os.path.abspath(main_file)))
    dirs.append(user_data_dir(APP_ID, APP_AUTHOR))
    return dirs


def _load_image(path: str) -> Optional[Image.Image]:
    if not os.path.isfile(path):
        return None
    try:
        with Image.open(path) as img:
            return img.convert("RGB")
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        log.debug("cannot decode texture %s: %s", path, e)
        return None


def _named_candidates(directory: str, name: str) -> List[str]:
    """Image files in directory whose stem matches name, ignoring case."""
    try:
        entries = sorted(os.listdir(directory))
    except OSError:
        return []
    wanted = name.lower()
    result: List[str] = []
    for entry in entries:
        stem, ext = os.path.splitext(entry)
        if stem.lower() == wanted and ext.lower() in TEXTURE_EXTENSIONS:
            result.append(os.path.join(directory, entry))
    return result


class TextureProvider:
    """Resolves the moon surface texture.

    Sources are tried in order: the packaged resource file, the host application
    resource file, a named lookup among packaged resources, and a named lookup
    among host application resources. The first image that decodes wins. None
    means no texture is available, which callers handle by using a flat
    material.
    """

    def __init__(
        self,
        module_dir: str = DATA_DIR,
        host_dirs: Optional[Sequence[str]] = None,
    ):
        self.module_dir = module_dir
        self._host_dirs = list(host_dirs) if host_dirs is not None else None

    @property
    def host_dirs(self) -> List[str]:
        if self._host_dirs is not None:
            return self._host_dirs
        return host_resource_dirs()

    def _sources(self, name: str) -> Iterator[Callable[[], Optional[Image.Image]]]:
        filename = f"{name}.png"
        host_dirs = self.host_dirs

        yield lambda: _load_image(os.path.join(self.module_dir, filename))

        def from_host_file() -> Optional[Image.Image]:
            for d in host_dirs:
                img = _load_image(os.path.join(d, filename))
                if img is not None:
                    return img
            return None

        yield from_host_file

        def named(dirs: Sequence[str]) -> Optional[Image.Image]:
            for d in dirs:
                for path in _named_candidates(d, name):
                    img = _load_image(path)
                    if img is not None:
                        return img
            return None

        yield lambda: named([self.module_dir])
        yield lambda: named(host_dirs)

    def resolve(self, name: str = TEXTURE_NAME) -> Optional[Image.Image]:
        for source in self._sources(name):
            img = source()
            if img is not None:
                return img
        log.debug("texture %r not found, using flat material", name)
        return None


def load_moon_texture(provider: Optional[TextureProvider] = None) -> Optional[Image.Image]:
    """Load the full-moon texture, or None when it is not installed."""
    return (provider or TextureProvider()).resolve(TEXTURE_NAME)
