import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..types import Antialiasing, Camera, Scene
from ..utils.image import normalize_size, to_uint8


log = logging.getLogger("moonphase.raster")


class RasterBackend:
    """Capability that turns a Scene into an (H, W, 3) float buffer.

    Backends must not keep per-call state. One that is not safe for concurrent
    use has to be serialized by the caller, or created once per thread.
    """

    name = "abstract"

    def is_available(self) -> bool:
        return True

    def draw(self, scene: Scene, width: int, height: int, sample_offsets: Sequence[Tuple[float, float]]) -> np.ndarray:
        raise NotImplementedError


def _normalize(v: np.ndarray) -> np.ndarray:
    return v / np.linalg.norm(v, axis=-1, keepdims=True)


def _camera_basis(camera: Camera) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    eye = np.asarray(camera.position, dtype=np.float64)
    forward = _normalize(np.asarray(camera.target, dtype=np.float64) - eye)
    right = _normalize(np.cross(forward, np.asarray(camera.up, dtype=np.float64)))
    up = np.cross(right, forward)
    return eye, forward, right, up


def _sample_texture(texture: np.ndarray, normals: np.ndarray) -> np.ndarray:
    """Equirectangular lookup; u=0.5 faces +Z, v=0 at the north pole (+Y)."""
    th, tw = texture.shape[:2]
    u = 0.5 + np.arctan2(normals[:, 0], normals[:, 2]) / (2.0 * np.pi)
    v = np.arccos(np.clip(normals[:, 1], -1.0, 1.0)) / np.pi
    ix = np.clip((u * tw).astype(np.int64), 0, tw - 1)
    iy = np.clip((v * th).astype(np.int64), 0, th - 1)
    return texture[iy, ix, :3]


class RaycastBackend(RasterBackend):
    """Software renderer: perspective rays against the moon sphere.

    Shading is Lambert diffuse from the single directional light with no ambient
    term, so the unlit side stays black like the background.
    """

    name = "raycast"

    def draw(self, scene: Scene, width: int, height: int, sample_offsets: Sequence[Tuple[float, float]]) -> np.ndarray:
        acc = np.zeros((height, width, 3), dtype=np.float64)
        for ox, oy in sample_offsets:
            acc += self._draw_pass(scene, width, height, ox, oy)
        return acc / max(1, len(sample_offsets))

    def _draw_pass(self, scene: Scene, width: int, height: int, ox: float, oy: float) -> np.ndarray:
        eye, forward, right, up = _camera_basis(scene.camera)
        tan_half = math.tan(math.radians(scene.camera.y_fov_deg) / 2.0)
        aspect = width / height

        # Primary rays through each sample position
        xs = ((np.arange(width) + ox) / width * 2.0 - 1.0) * aspect * tan_half
        ys = (1.0 - (np.arange(height) + oy) / height * 2.0) * tan_half
        dirs = xs[None, :, None] * right + ys[:, None, None] * up + forward
        dirs = _normalize(dirs).reshape(-1, 3)

        # Into sphere-local coordinates (rotation is orthonormal)
        sphere = scene.sphere
        rot = np.asarray(sphere.rotation, dtype=np.float64)
        origin = (eye - np.asarray(sphere.position, dtype=np.float64)) @ rot
        local_dirs = dirs @ rot

        b = local_dirs @ origin
        c = float(origin @ origin) - sphere.radius**2
        disc = b * b - c
        hit = disc >= 0.0
        t = np.full_like(b, -1.0)
        t[hit] = -b[hit] - np.sqrt(disc[hit])
        hit &= t > 0.0  # front faces only

        out = np.zeros((height * width, 3), dtype=np.float64)
        if not np.any(hit):
            return out.reshape(height, width, 3)

        local_normals = (origin + t[hit, None] * local_dirs[hit]) / sphere.radius
        normals = local_normals @ rot.T

        to_light = -np.asarray(scene.light.direction, dtype=np.float64)
        lambert = np.clip(normals @ to_light, 0.0, None)

        material = sphere.material
        if material.is_textured:
            albedo = _sample_texture(material.diffuse, local_normals)
        else:
            albedo = np.full((len(lambert), 3), float(material.diffuse))

        color = albedo * lambert[:, None] * np.asarray(scene.light.color, dtype=np.float64)
        out[hit] = np.clip(color, 0.0, 1.0)
        return out.reshape(height, width, 3)


class NullBackend(RasterBackend):
    """Stand-in used where no 3-D backend exists; never available."""

    name = "null"

    def is_available(self) -> bool:
        return False

    def draw(self, scene: Scene, width: int, height: int, sample_offsets: Sequence[Tuple[float, float]]) -> np.ndarray:
        raise RuntimeError("no rasterization backend on this platform")


class FailingBackend(RasterBackend):
    """Available, but every snapshot fails. For exercising the fallback path."""

    name = "failing"

    def __init__(self, message: str = "forced rasterization failure"):
        self.message = message

    def draw(self, scene: Scene, width: int, height: int, sample_offsets: Sequence[Tuple[float, float]]) -> np.ndarray:
        raise RuntimeError(self.message)


def default_backend() -> RasterBackend:
    return RaycastBackend()


class OffscreenRenderer:
    """Rasterizes a scene from its camera into a uint8 (H, W, 3) buffer.

    snapshot() returns None when the backend is unavailable or fails; callers
    treat that as the signal to use the 2-D fallback.
    """

    def __init__(self, backend: Optional[RasterBackend] = None):
        self.backend = backend if backend is not None else default_backend()

    def snapshot(
        self,
        scene: Scene,
        size: Sequence[float],
        antialiasing: Antialiasing = Antialiasing.X4,
    ) -> Optional[np.ndarray]:
        width, height = normalize_size(size)
        if not self.backend.is_available():
            log.info("backend %s unavailable", self.backend.name)
            return None

        offsets: List[Tuple[float, float]] = antialiasing.sample_offsets
        try:
            buf = self.backend.draw(scene, width, height, offsets)
        except Exception:
            log.warning("snapshot with backend %s failed", self.backend.name, exc_info=True)
            return None

        if not isinstance(buf, np.ndarray) or buf.ndim != 3 or buf.shape[:2] != (height, width):
            log.warning("backend %s returned an unusable buffer", self.backend.name)
            return None
        return to_uint8(np.asarray(buf[..., :3], dtype=np.float64))
