import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

import numpy as np

from .paths import CAMERA_FIELD_OF_VIEW_DEG, FLAT_MOON_GRAY, MOON_RADIUS


Vector3 = Tuple[float, float, float]


class Antialiasing(enum.Enum):
    """Multisample level used for the offscreen snapshot."""

    NONE = "none"
    X2 = "2x"
    X4 = "4x"

    @property
    def sample_offsets(self) -> List[Tuple[float, float]]:
        """Sub-pixel sample positions, in pixel units from the pixel corner."""
        if self is Antialiasing.X2:
            return [(0.25, 0.25), (0.75, 0.75)]
        if self is Antialiasing.X4:
            # rotated grid
            return [(0.375, 0.125), (0.875, 0.375), (0.125, 0.625), (0.625, 0.875)]
        return [(0.5, 0.5)]


@dataclass(frozen=True)
class RenderingOptions:
    """Options for a single render call.

    gamma and bright_limb_position_angle are reserved and currently have no
    effect. exposure is a plain gain on the light color, clamped to [0, 4] when
    the scene is built. orientation_correction (radians) rotates the moon about
    the view axis.
    """

    antialiasing: Antialiasing = Antialiasing.X4
    exposure: float = 1.0
    gamma: float = 1.0
    bright_limb_position_angle: Optional[float] = None  # degrees, north through east
    orientation_correction: Optional[float] = None  # radians


@dataclass
class Material:
    """Diffuse surface. diffuse is either a gray level or an (H, W, 3) float texture."""

    diffuse: Union[float, np.ndarray] = FLAT_MOON_GRAY
    double_sided: bool = False

    @property
    def is_textured(self) -> bool:
        return isinstance(self.diffuse, np.ndarray)


@dataclass
class Sphere:
    material: Material
    radius: float = MOON_RADIUS
    position: Vector3 = (0.0, 0.0, 0.0)
    rotation: np.ndarray = field(default_factory=lambda: np.eye(3))


@dataclass
class DirectionalLight:
    position: Vector3
    direction: Vector3  # unit vector the light travels along
    color: Vector3


@dataclass
class Camera:
    position: Vector3
    target: Vector3 = (0.0, 0.0, 0.0)
    up: Vector3 = (0.0, 1.0, 0.0)
    y_fov_deg: float = CAMERA_FIELD_OF_VIEW_DEG


@dataclass
class Scene:
    """Everything needed for one snapshot; built fresh for each render."""

    sphere: Sphere
    light: DirectionalLight
    camera: Camera
