from typing import Sequence

import numpy as np
from PIL import Image, ImageDraw

from ..paths import BACKGROUND_COLOR, FALLBACK_INSET_RATIO, FALLBACK_MOON_COLOR
from ..utils.image import normalize_size


def render_fallback(size: Sequence[float]) -> np.ndarray:
    """Draw a white disk on black as an (H, W, 3) uint8 buffer.

    The disk is inscribed in the square [inset, inset, r - 2*inset, r - 2*inset]
    with r = min(w, h) and inset = 0.15 * r, anchored at the top-left corner.
    Needs no 3-D backend and no resources.
    """
    w, h = normalize_size(size)
    img = Image.new("RGB", (w, h), BACKGROUND_COLOR)
    r = min(w, h)
    inset = r * FALLBACK_INSET_RATIO
    draw = ImageDraw.Draw(img)
    draw.ellipse((inset, inset, r - inset, r - inset), fill=FALLBACK_MOON_COLOR)
    return np.array(img)
