# showroom/core/transforms.py
"""
Scene transforms in the Y-up convention the scene literals are written in,
plus the conversion into pybullet's Z-up world.

The conversion is the same one the OBJ kit loaders apply to vertices:
``(x, y, z)`` Y-up becomes ``(x, -z, y)`` Z-up.  It is a proper rotation, so a
rotation of θ about +Y in the scene is a rotation of θ about +Z in pybullet.

Nothing in here touches pybullet, so it is importable (and testable) without a
physics client.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Sequence, Tuple

import numpy as np
from trimesh import transformations as tf

Vec3 = Tuple[float, float, float]

Y_UP_TO_Z_UP = np.array(
    [
        [1.0, 0.0, 0.0],
        [0.0, 0.0, -1.0],
        [0.0, 1.0, 0.0],
    ]
)


def _vec3(values: Sequence[float]) -> Vec3:
    if len(values) != 3:
        raise ValueError(f"expected 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


def euler_matrix(rotation: Sequence[float]) -> np.ndarray:
    """Rotation matrix for intrinsic XYZ Euler angles (radians), i.e. Rx @ Ry @ Rz."""
    rx, ry, rz = _vec3(rotation)
    return tf.euler_matrix(rx, ry, rz, "rxyz")[:3, :3]


def matrix_to_quaternion(rot: np.ndarray) -> Tuple[float, float, float, float]:
    """Unit quaternion ``(x, y, z, w)`` of a 3x3 rotation matrix (pybullet order)."""
    m = np.eye(4)
    m[:3, :3] = rot
    w, x, y, z = tf.quaternion_from_matrix(m)
    return (float(x), float(y), float(z), float(w))


@dataclass(slots=True)
class Transform:
    """Local position / Euler XYZ rotation (radians) / scale of a scene node."""

    position: Vec3 = (0.0, 0.0, 0.0)
    rotation: Vec3 = (0.0, 0.0, 0.0)
    scale: Vec3 = (1.0, 1.0, 1.0)

    def __post_init__(self):
        self.position = _vec3(self.position)
        self.rotation = _vec3(self.rotation)
        self.scale = _vec3(self.scale)

    def matrix(self) -> np.ndarray:
        out = np.eye(4)
        out[:3, :3] = euler_matrix(self.rotation) @ np.diag(self.scale)
        out[:3, 3] = self.position
        return out


@dataclass(slots=True)
class WorldPose:
    """Composed world transform of a node, still in Y-up."""

    matrix: np.ndarray = field(default_factory=lambda: np.eye(4))

    @property
    def position(self) -> Vec3:
        return _vec3(self.matrix[:3, 3])

    @property
    def scale(self) -> Vec3:
        return _vec3(np.linalg.norm(self.matrix[:3, :3], axis=0))

    @property
    def rotation_matrix(self) -> np.ndarray:
        scale = np.array(self.scale)
        scale[scale == 0.0] = 1.0
        return self.matrix[:3, :3] / scale

    def then(self, local: Transform) -> "WorldPose":
        return WorldPose(self.matrix @ local.matrix())

    # -- pybullet (Z-up) views ----------------------------------------------
    def zup_position(self) -> Vec3:
        return to_zup_position(self.position)

    def zup_quaternion(self) -> Tuple[float, float, float, float]:
        rot = Y_UP_TO_Z_UP @ self.rotation_matrix @ Y_UP_TO_Z_UP.T
        return matrix_to_quaternion(rot)

    def zup_scale(self) -> Vec3:
        sx, sy, sz = self.scale
        return (sx, sz, sy)


def compose(*transforms: Transform) -> WorldPose:
    """World pose of a node whose ancestors' local transforms are *transforms*,
    outermost first."""
    pose = WorldPose()
    for local in transforms:
        pose = pose.then(local)
    return pose


def to_zup_position(position: Sequence[float]) -> Vec3:
    return _vec3(Y_UP_TO_Z_UP @ np.asarray(_vec3(position)))


def to_zup_points(points: Iterable[Sequence[float]]) -> np.ndarray:
    """Convert an (N, 3) array of Y-up points (or normals) to Z-up."""
    arr = np.asarray(points, dtype=float).reshape(-1, 3)
    return arr @ Y_UP_TO_Z_UP.T


def to_zup_quaternion(rotation: Sequence[float]) -> Tuple[float, float, float, float]:
    """Z-up quaternion of a Y-up Euler XYZ rotation."""
    rot = Y_UP_TO_Z_UP @ euler_matrix(rotation) @ Y_UP_TO_Z_UP.T
    return matrix_to_quaternion(rot)


# --------------------------------------------------------------------------
# Orbit parameters (pybullet debug-camera convention, degrees)
# --------------------------------------------------------------------------
def orbit_from_offset(offset: Sequence[float]) -> Tuple[float, float, float]:
    """``(distance, yaw, pitch)`` of a Z-up eye offset from the orbit target."""
    ox, oy, oz = _vec3(offset)
    distance = math.sqrt(ox * ox + oy * oy + oz * oz)
    if distance == 0.0:
        return 0.0, 0.0, 0.0
    pitch = -math.degrees(math.asin(max(-1.0, min(1.0, oz / distance))))
    yaw = math.degrees(math.atan2(ox, -oy)) if (ox or oy) else 0.0
    return distance, yaw, pitch


def offset_from_orbit(distance: float, yaw: float, pitch: float) -> Vec3:
    """Inverse of :func:`orbit_from_offset`."""
    ry, rp = math.radians(yaw), math.radians(pitch)
    horizontal = distance * math.cos(rp)
    return (
        horizontal * math.sin(ry),
        -horizontal * math.cos(ry),
        -distance * math.sin(rp),
    )


def to_yup_position(position: Sequence[float]) -> Vec3:
    return _vec3(Y_UP_TO_Z_UP.T @ np.asarray(_vec3(position)))
