from __future__ import annotations

import io
import math
from typing import Sequence, Tuple

import numpy as np
from PIL import Image


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def normalize_size(size: Sequence[float]) -> Tuple[int, int]:
    """Return (width, height) as ints, each floored to at least 1 pixel."""
    w, h = size

    def dim(v: float) -> int:
        v = float(v)
        if not math.isfinite(v):
            return 1
        return max(1, int(v))

    return (dim(w), dim(h))


def to_uint8(buffer: np.ndarray) -> np.ndarray:
    """Convert an (H, W, 3|4) buffer to uint8, scaling float data from [0, 1]."""
    if not isinstance(buffer, np.ndarray) or buffer.ndim != 3 or buffer.shape[2] not in (3, 4):
        raise ValueError("buffer must be numpy array with shape (H,W,3|4)")
    if buffer.dtype == np.uint8:
        return buffer
    if buffer.dtype in (np.float32, np.float64):
        data = np.nan_to_num(buffer, nan=0.0)
        return (np.clip(data, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
    return np.clip(buffer, 0, 255).astype(np.uint8)


def encode_png(buffer: np.ndarray) -> bytes:
    """Encode a pixel buffer as PNG bytes."""
    arr = to_uint8(buffer)
    img = Image.fromarray(np.ascontiguousarray(arr))
    buf = io.BytesIO()
    img.save(buf, format="PNG", optimize=False, compress_level=6)
    data = buf.getvalue()
    if not data.startswith(PNG_SIGNATURE):
        raise ValueError("encoder produced no PNG data")
    return data


def decode_png(data: bytes) -> np.ndarray:
    """Decode PNG bytes to an (H, W, 3) uint8 array."""
    with Image.open(io.BytesIO(data)) as img:
        if img.format != "PNG":
            raise ValueError(f"not a PNG image: {img.format}")
        return np.array(img.convert("RGB"))
