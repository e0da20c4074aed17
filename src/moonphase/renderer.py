"""Moon phase image rendering.

render_moon_image() turns a phase fraction into PNG bytes; it is the
recommended entry point. render_moon_image_for_date() computes a simple
synodic phase for a timestamp first.

Both always return non-empty PNG data. If the texture cannot be loaded the moon
is drawn with a flat gray material. If the 3-D snapshot is unavailable or fails,
a plain white disk on black is drawn instead.
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from .assets import TextureProvider, load_moon_texture
from .astro import Timestamp, clamp_phase, fractional_phase, phase_to_angle, resolve_location
from .paths import DEFAULT_SIZE
from .render.fallback import render_fallback
from .render.raster import OffscreenRenderer, RasterBackend
from .render.scene import build_scene
from .types import RenderingOptions
from .utils.image import encode_png, normalize_size


log = logging.getLogger("moonphase.renderer")


def _safe_size(size: Sequence[float]) -> Tuple[int, int]:
    try:
        return normalize_size(size)
    except (TypeError, ValueError, OverflowError):
        log.warning("invalid size %r, using %r", size, DEFAULT_SIZE)
        return DEFAULT_SIZE


def _render_3d(
    phase: float,
    size: Tuple[int, int],
    options: RenderingOptions,
    backend: Optional[RasterBackend],
    textures: Optional[TextureProvider],
) -> Optional[np.ndarray]:
    texture = load_moon_texture(textures)
    scene = build_scene(phase_to_angle(phase), texture, options)
    return OffscreenRenderer(backend).snapshot(scene, size, options.antialiasing)


def _encode_fallback(size: Tuple[int, int]) -> bytes:
    try:
        return encode_png(render_fallback(size))
    except Exception:
        if size == DEFAULT_SIZE:
            raise
        log.warning("flat image at %dx%d failed, using %dx%d", *size, *DEFAULT_SIZE, exc_info=True)
        return encode_png(render_fallback(DEFAULT_SIZE))


def render_moon_image(
    phase: float,
    size: Sequence[float] = DEFAULT_SIZE,
    options: Optional[RenderingOptions] = None,
    *,
    backend: Optional[RasterBackend] = None,
    textures: Optional[TextureProvider] = None,
) -> bytes:
    """Render a PNG moon image for a phase fraction.

    phase is clipped to [0, 1] (0 = new, 0.5 = full, 1 = new). Each size
    dimension is floored to at least one pixel. backend and textures can be
    injected; by default the ray-casting backend and the standard texture
    search are used.
    """
    render_size = _safe_size(size)
    options = options or RenderingOptions()

    try:
        buf = _render_3d(clamp_phase(phase), render_size, options, backend, textures)
    except Exception:
        log.warning("3-D rendering failed", exc_info=True)
        buf = None

    if buf is not None:
        try:
            return encode_png(buf)
        except Exception:
            log.warning("PNG encoding failed, using flat image", exc_info=True)
    else:
        log.info("using 2-D fallback for %dx%d", *render_size)

    return _encode_fallback(render_size)


def render_moon_image_for_date(
    when: Timestamp,
    location: Optional[Tuple[float, float]] = None,
    size: Sequence[float] = DEFAULT_SIZE,
    *,
    backend: Optional[RasterBackend] = None,
    textures: Optional[TextureProvider] = None,
) -> bytes:
    """Render a PNG moon image for a date and observer location.

    The phase comes from fractional_phase(). The lunar phase does not depend on
    the observer, so location is only resolved (Kyoto City when None) and does
    not change the image.
    """
    try:
        phase = fractional_phase(when)
    except Exception:
        log.warning("cannot compute phase for %r, assuming new moon", when, exc_info=True)
        phase = 0.0

    try:
        resolve_location(location)
    except (TypeError, ValueError):
        log.warning("ignoring invalid location %r", location)

    return render_moon_image(phase, size, RenderingOptions(), backend=backend, textures=textures)
