import math
from typing import Optional

import numpy as np
from PIL import Image

from ..paths import CAMERA_POSITION, FLAT_MOON_GRAY, LIGHT_DISTANCE, MAX_EXPOSURE, MOON_RADIUS
from ..types import Camera, DirectionalLight, Material, RenderingOptions, Scene, Sphere


def rotation_about_z(angle_rad: float) -> np.ndarray:
    c, s = math.cos(angle_rad), math.sin(angle_rad)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def texture_to_array(texture: Image.Image) -> np.ndarray:
    """Convert a PIL texture to an (H, W, 3) float array in [0, 1]."""
    return np.asarray(texture.convert("RGB"), dtype=np.float64) / 255.0


def build_scene(
    phase_angle: float,
    texture: Optional[Image.Image] = None,
    options: Optional[RenderingOptions] = None,
) -> Scene:
    """Build the moon scene for a phase angle in radians.

    The light sits at (cos(a), 0, sin(a)) * LIGHT_DISTANCE and always points at
    the moon center. The camera stays at CAMERA_POSITION looking at the origin.
    """
    options = options or RenderingOptions()

    # Moon geometry
    if texture is not None:
        material = Material(diffuse=texture_to_array(texture), double_sided=False)
    else:
        material = Material(diffuse=FLAT_MOON_GRAY, double_sided=False)
    sphere = Sphere(material=material, radius=MOON_RADIUS, position=(0.0, 0.0, 0.0))

    # Directional light (Sun), a plain brightness gain
    gain = float(options.exposure)
    gain = 0.0 if math.isnan(gain) else min(max(gain, 0.0), MAX_EXPOSURE)
    lx = math.cos(phase_angle) * LIGHT_DISTANCE
    lz = math.sin(phase_angle) * LIGHT_DISTANCE
    to_center = np.array(sphere.position) - np.array([lx, 0.0, lz])
    to_center /= np.linalg.norm(to_center)
    light = DirectionalLight(
        position=(lx, 0.0, lz),
        direction=(float(to_center[0]), float(to_center[1]), float(to_center[2])),
        color=(gain, gain, gain),
    )

    camera = Camera(position=CAMERA_POSITION, target=sphere.position)

    # Orientation correction around the view axis, moon only
    correction = options.orientation_correction
    if correction is not None and math.isfinite(correction) and correction != 0:
        sphere.rotation = sphere.rotation @ rotation_about_z(correction)

    return Scene(sphere=sphere, light=light, camera=camera)
